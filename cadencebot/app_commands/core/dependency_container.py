"""
依赖注入容器

管理App Commands共享的服务实例：配置、音频客户端、歌单存储、分页缓存和歌词管理器
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from cadencebot.core.interfaces import IAudioClient, IPlaylistStore
from cadencebot.lyrics.lyrics_manager import LyricsManager
from cadencebot.ui.pagination_cache import PaginationCache
from cadencebot.utils.config_manager import ConfigManager

T = TypeVar('T')


class DependencyContainer:
    """
    依赖注入容器

    按接口类型保存单例服务
    """

    def __init__(self):
        """初始化依赖容器"""
        self._singletons: Dict[Type, Any] = {}
        self.logger = logging.getLogger("cadencebot.app_commands.dependency_container")

        self.logger.debug("依赖注入容器已初始化")

    def register_singleton(self, service_type: Type[T], instance: T) -> None:
        """
        注册单例服务

        Args:
            service_type: 服务类型
            instance: 服务实例
        """
        self._singletons[service_type] = instance
        self.logger.debug(f"注册单例服务: {service_type.__name__}")

    def resolve(self, service_type: Type[T]) -> T:
        """
        解析服务实例

        Args:
            service_type: 服务类型

        Returns:
            服务实例

        Raises:
            ValueError: 如果服务未注册
        """
        if service_type in self._singletons:
            return self._singletons[service_type]

        raise ValueError(f"服务未注册: {service_type.__name__}")


class ServiceProvider:
    """
    服务提供者

    为App Commands提供预配置的依赖注入容器：
    配置、音频客户端、歌单存储、分页缓存和歌词管理器。
    """

    def __init__(
        self,
        config: ConfigManager,
        audio_client: IAudioClient,
        playlist_store: IPlaylistStore,
        pagination_cache: Optional[PaginationCache] = None,
        lyrics_manager: Optional[LyricsManager] = None
    ):
        """
        初始化服务提供者

        Args:
            config: 配置管理器
            audio_client: 音频节点客户端
            playlist_store: 歌单存储
            pagination_cache: 分页缓存，缺省按配置创建
            lyrics_manager: 歌词管理器，缺省按配置创建
        """
        self.container = DependencyContainer()
        self.logger = logging.getLogger("cadencebot.app_commands.service_provider")

        self._register_core_services(config, audio_client, playlist_store)

        self.container.register_singleton(
            PaginationCache,
            pagination_cache or PaginationCache(ttl=config.get_pagination_timeout())
        )

        self.container.register_singleton(
            LyricsManager,
            lyrics_manager or LyricsManager.from_config(config)
        )

        self.logger.debug("服务提供者已初始化")

    def _register_core_services(
        self,
        config: ConfigManager,
        audio_client: IAudioClient,
        playlist_store: IPlaylistStore
    ) -> None:
        self.container.register_singleton(ConfigManager, config)
        self.container.register_singleton(IAudioClient, audio_client)
        self.container.register_singleton(IPlaylistStore, playlist_store)

        self.logger.debug("核心服务已注册")

    def get_container(self) -> DependencyContainer:
        """
        获取依赖容器

        Returns:
            依赖注入容器实例
        """
        return self.container
