"""歌词管理器 - 选择歌词源、获取歌词并切分为显示页"""

import logging
from typing import List, Optional

from cadencebot.core.errors import ErrorReason, NotFoundError, UpstreamError
from cadencebot.core.interfaces import ILyricsProvider
from cadencebot.utils.config_manager import ConfigManager
from .lyrics_client import GeniusLyricsProvider, LrclibLyricsProvider


# Discord 嵌入消息描述的长度上限
MAX_PAGE_SIZE = 4000


def split_into_chunks(text: str, size: int = MAX_PAGE_SIZE) -> List[str]:
    """
    按行边界切分文本

    尽量把整行放进同一页；单行超过页长时按页长硬切。

    Args:
        text: 原始文本
        size: 每页最大字符数

    Returns:
        每段长度不超过 size 的文本列表，空文本返回空列表
    """
    if size <= 0:
        raise ValueError(f"页长必须为正数: {size}")

    if not text or not text.strip():
        return []

    chunks: List[str] = []
    # None 表示当前页还没有任何行；空字符串是一行空行
    current: Optional[str] = None

    for line in text.strip("\n").split("\n"):
        while len(line) > size:
            if current is not None:
                chunks.append(current)
                current = None
            chunks.append(line[:size])
            line = line[size:]

        candidate = line if current is None else f"{current}\n{line}"
        if len(candidate) > size:
            chunks.append(current)
            current = line
        else:
            current = candidate

    if current is not None:
        chunks.append(current)

    return [chunk for chunk in chunks if chunk.strip()]


def lyrics_title(title: str, artist: str = "") -> str:
    return f"Lyrics for {title} by {artist}" if artist else f"Lyrics for {title}"


class LyricsManager:
    """
    歌词管理器

    根据配置选择歌词源，把歌词源错误统一转换为领域错误。
    """

    def __init__(self, provider: ILyricsProvider, page_size: int = MAX_PAGE_SIZE):
        """
        初始化歌词管理器

        Args:
            provider: 歌词源
            page_size: 每页最大字符数
        """
        self.logger = logging.getLogger("cadencebot.lyrics.lyrics_manager")
        self.provider = provider
        self.page_size = min(page_size, MAX_PAGE_SIZE)

        self.logger.info(f"歌词管理器初始化完成 - 歌词源: {type(provider).__name__}")

    @classmethod
    def from_config(cls, config: ConfigManager) -> "LyricsManager":
        """
        根据配置创建歌词管理器

        选择 genius 但未配置令牌时退回 LRCLIB。
        """
        logger = logging.getLogger("cadencebot.lyrics.lyrics_manager")
        timeout = config.get_lyrics_timeout()
        provider_name = config.get_lyrics_provider()

        provider: Optional[ILyricsProvider] = None
        if provider_name == "genius":
            token = config.get_genius_token()
            if token:
                provider = GeniusLyricsProvider(token, timeout=timeout)
            else:
                logger.warning("未配置 Genius 令牌，改用 LRCLIB 歌词源")

        if provider is None:
            provider = LrclibLyricsProvider(config.get_lrclib_url(), timeout=timeout)

        return cls(provider, page_size=config.get_lyrics_page_size())

    async def fetch_pages(self, title: str, artist: str = "") -> List[str]:
        """
        获取歌词并切分为显示页

        Args:
            title: 歌曲标题
            artist: 艺术家（可为空）

        Returns:
            非空的分页文本列表

        Raises:
            UpstreamError: LYRICS_PROVIDER_FAILED 歌词源调用失败
            NotFoundError: NO_LYRICS 未找到歌词
        """
        self.logger.info(f"获取歌词: {title} - {artist}")

        try:
            lyrics = await self.provider.get_lyrics(title, artist)
        except Exception as e:
            self.logger.error(f"歌词源调用失败: {title} - {e}", exc_info=True)
            raise UpstreamError(ErrorReason.LYRICS_PROVIDER_FAILED, title=title, artist=artist) from e

        pages = split_into_chunks(lyrics or "", self.page_size)
        if not pages:
            self.logger.debug(f"未找到歌词: {title}")
            raise NotFoundError(ErrorReason.NO_LYRICS, title=title, artist=artist)

        self.logger.debug(f"歌词分页完成: {title} - 共 {len(pages)} 页")
        return pages
