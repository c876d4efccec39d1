"""歌词源客户端 - Genius 与 LRCLIB"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
import lyricsgenius

from cadencebot.core.interfaces import ILyricsProvider


class GeniusLyricsProvider(ILyricsProvider):
    """
    Genius 歌词源

    lyricsgenius 是同步库，所有调用都放到执行器中运行，避免阻塞事件循环。
    """

    def __init__(self, access_token: str, timeout: float = 15):
        """
        初始化 Genius 歌词源

        Args:
            access_token: Genius API 访问令牌
            timeout: 请求超时时间（秒）
        """
        self.logger = logging.getLogger("cadencebot.lyrics.genius")
        self.genius = lyricsgenius.Genius(
            access_token,
            timeout=int(timeout),
            retries=2,
            verbose=False,
            skip_non_songs=True,
            remove_section_headers=False
        )

        self.logger.debug("Genius 歌词源初始化完成")

    def _search_sync(self, title: str, artist: str) -> Optional[str]:
        song = self.genius.search_song(title, artist)
        if song is None:
            return None
        return song.lyrics

    async def get_lyrics(self, title: str, artist: str = "") -> Optional[str]:
        """
        搜索歌曲并返回歌词

        Args:
            title: 歌曲标题
            artist: 艺术家（可为空）

        Returns:
            歌词文本，未找到时返回 None
        """
        self.logger.debug(f"Genius 搜索歌词: {title} - {artist}")
        loop = asyncio.get_running_loop()
        lyrics = await loop.run_in_executor(None, self._search_sync, title, artist)

        if not lyrics:
            self.logger.debug(f"Genius 未找到歌词: {title}")
            return None
        return lyrics.strip()


class LrclibLyricsProvider(ILyricsProvider):
    """
    LRCLIB 歌词源

    先按元数据精确匹配（/api/get），未命中再退回搜索（/api/search）。
    只返回纯文本歌词，纯音乐返回 None。
    """

    def __init__(self, base_url: str = "https://lrclib.net", timeout: float = 15):
        """
        初始化 LRCLIB 歌词源

        Args:
            base_url: LRCLIB 服务地址
            timeout: 请求总超时（秒）
        """
        self.logger = logging.getLogger("cadencebot.lyrics.lrclib")
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {"User-Agent": "CadenceBot/1.0"}

        self.logger.debug(f"LRCLIB 歌词源初始化完成 - 地址: {self.base_url}")

    @staticmethod
    def _plain_lyrics(record: Dict[str, Any]) -> Optional[str]:
        if record.get("instrumental"):
            return None
        plain = (record.get("plainLyrics") or "").strip()
        return plain or None

    async def _get_json(self, session: aiohttp.ClientSession, path: str, params: Dict[str, str]) -> Any:
        async with session.get(f"{self.base_url}{path}", params=params) as response:
            if response.status == 404:
                return None
            response.raise_for_status()
            return await response.json(content_type=None)

    async def get_lyrics(self, title: str, artist: str = "") -> Optional[str]:
        """
        获取歌词

        Raises:
            aiohttp.ClientError: 服务返回错误状态或网络失败
            asyncio.TimeoutError: 请求超时
        """
        async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
            if artist:
                record = await self._get_json(
                    session, "/api/get", {"track_name": title, "artist_name": artist}
                )
                if record:
                    lyrics = self._plain_lyrics(record)
                    if lyrics:
                        self.logger.debug(f"LRCLIB 精确匹配命中: {title} - {artist}")
                        return lyrics

            query = f"{artist} {title}".strip()
            results: Optional[List[Dict[str, Any]]] = await self._get_json(
                session, "/api/search", {"q": query}
            )

        for record in results or []:
            lyrics = self._plain_lyrics(record)
            if lyrics:
                self.logger.debug(f"LRCLIB 搜索命中: {query}")
                return lyrics

        self.logger.debug(f"LRCLIB 未找到歌词: {query}")
        return None
