"""
音乐命令模块

按领域划分的音乐命令处理器：
- 播放控制
- 队列显示
- 用户歌单
- 歌词
"""

from .playback_commands import PlaybackControlCommands
from .queue_commands import QueueManagementCommands
from .playlist_commands import PlaylistCommands
from .lyrics_commands import LyricsCommands

__all__ = [
    'PlaybackControlCommands',
    'QueueManagementCommands',
    'PlaylistCommands',
    'LyricsCommands'
]
