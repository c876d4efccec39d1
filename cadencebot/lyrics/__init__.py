"""歌词模块 - 歌词源客户端、获取与分页"""

from .lyrics_client import GeniusLyricsProvider, LrclibLyricsProvider
from .lyrics_manager import LyricsManager, MAX_PAGE_SIZE, lyrics_title, split_into_chunks

__all__ = [
    'GeniusLyricsProvider',
    'LrclibLyricsProvider',
    'LyricsManager',
    'MAX_PAGE_SIZE',
    'lyrics_title',
    'split_into_chunks'
]
