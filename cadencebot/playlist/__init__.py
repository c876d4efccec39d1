"""歌单模块 - 用户歌单的持久化存储"""

from .playlist_store import JsonPlaylistStore

__all__ = [
    'JsonPlaylistStore'
]
