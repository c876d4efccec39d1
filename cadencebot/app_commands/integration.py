"""
App Commands集成

把命令处理器、路由器、注册器和歌词翻页监听器接入机器人
"""

import logging
from typing import Optional
import discord
from discord import app_commands
from discord.ext import commands

from cadencebot.core.interfaces import IAudioClient, IPlaylistStore
from cadencebot.lyrics.lyrics_manager import LyricsManager
from cadencebot.ui.pagination_cache import PaginationCache, is_navigation_token
from cadencebot.utils.config_manager import ConfigManager
from .core import AppCommandsErrorHandler, CommandRegistry, CommandRouter, ServiceProvider
from .general import HelpCommand
from .music import LyricsCommands, PlaybackControlCommands, PlaylistCommands, QueueManagementCommands


class AppCommandsIntegration:
    """
    App Commands集成器

    负责创建命令处理器并将Slash命令和翻页按钮接入Discord机器人
    """

    def __init__(
        self,
        bot: commands.Bot,
        config: ConfigManager,
        audio_client: IAudioClient,
        playlist_store: IPlaylistStore,
        pagination_cache: Optional[PaginationCache] = None,
        lyrics_manager: Optional[LyricsManager] = None
    ):
        """
        初始化集成器

        Args:
            bot: Discord机器人实例
            config: 配置管理器
            audio_client: 音频节点客户端
            playlist_store: 歌单存储
            pagination_cache: 分页缓存
            lyrics_manager: 歌词管理器
        """
        self.bot = bot
        self.config = config
        self.logger = logging.getLogger("cadencebot.app_commands.integration")

        self.service_provider = ServiceProvider(
            config,
            audio_client,
            playlist_store,
            pagination_cache=pagination_cache,
            lyrics_manager=lyrics_manager
        )
        container = self.service_provider.get_container()
        audio_client = container.resolve(IAudioClient)
        playlist_store = container.resolve(IPlaylistStore)

        self.error_handler = AppCommandsErrorHandler()
        self.pagination_cache = container.resolve(PaginationCache)

        self.lyrics_commands = LyricsCommands(
            config,
            audio_client,
            container.resolve(LyricsManager),
            self.pagination_cache,
            error_handler=self.error_handler
        )

        self.router = CommandRouter(
            [
                PlaybackControlCommands(config, audio_client),
                QueueManagementCommands(config, audio_client),
                PlaylistCommands(config, audio_client, playlist_store),
                self.lyrics_commands,
                HelpCommand(config)
            ],
            error_handler=self.error_handler
        )

        self.command_registry = CommandRegistry(bot, self.service_provider, self.router)

        self.logger.info("App Commands集成器已初始化")

    async def setup(self) -> None:
        """设置App Commands"""
        try:
            self.logger.info("开始设置App Commands...")

            self.command_registry.register_all()
            self._check_routes()
            self._setup_event_handlers()

            self.logger.info("App Commands设置完成")

        except Exception as e:
            self.logger.error(f"设置App Commands失败: {e}", exc_info=True)
            raise

    async def sync_commands(self, guild_id: Optional[int] = None) -> None:
        """
        同步命令到Discord

        Args:
            guild_id: 可选的服务器ID，如果为None则全局同步
        """
        try:
            if guild_id:
                await self.command_registry.sync_commands(discord.Object(id=guild_id))
            else:
                await self.command_registry.sync_commands()

        except Exception as e:
            self.logger.error(f"同步命令失败: {e}", exc_info=True)
            raise

    def _check_routes(self) -> None:
        """检查每个已注册的命令都有对应的处理方法"""
        unrouted = set(self.command_registry.get_registered_commands()) - set(self.router.command_names)
        if unrouted:
            self.logger.warning(f"以下命令已注册但没有处理器: {', '.join(sorted(unrouted))}")

    def _setup_event_handlers(self) -> None:
        """设置事件处理器"""
        self.bot.add_listener(self.on_interaction, "on_interaction")
        self.bot.tree.error(self.on_app_command_error)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """
        分发歌词翻页按钮

        只处理 custom_id 为翻页令牌的组件交互，其它交互交给 discord.py 的默认流程。
        """
        if interaction.type != discord.InteractionType.component:
            return

        custom_id = (interaction.data or {}).get("custom_id")
        if not is_navigation_token(custom_id):
            return

        await self.lyrics_commands.handle_navigation(interaction)

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ) -> None:
        """处理命令树在回调之外产生的错误（参数转换、检查失败等）"""
        command_name = interaction.command.name if interaction.command else "unknown"
        original = getattr(error, "original", error)
        await self.error_handler.handle_error(interaction, original, command_name)

    async def cleanup(self) -> None:
        """清理资源"""
        try:
            self.pagination_cache.clear()
            self.command_registry.unregister_all()
            self.logger.info("App Commands已清理")

        except Exception as e:
            self.logger.error(f"清理App Commands失败: {e}", exc_info=True)


async def setup_app_commands(
    bot: commands.Bot,
    config: ConfigManager,
    audio_client: IAudioClient,
    playlist_store: IPlaylistStore
) -> AppCommandsIntegration:
    """
    设置App Commands的便捷函数

    Args:
        bot: Discord机器人实例
        config: 配置管理器
        audio_client: 音频节点客户端
        playlist_store: 歌单存储

    Returns:
        集成器实例
    """
    integration = AppCommandsIntegration(bot, config, audio_client, playlist_store)
    await integration.setup()
    return integration
