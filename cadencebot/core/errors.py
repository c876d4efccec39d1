"""
领域错误定义

所有业务错误都携带一个 ErrorReason 和面向用户的消息，
由命令处理边界统一转换为 Discord 回复，不会导致进程退出。
"""

from enum import Enum
from typing import Dict, Optional


class ErrorReason(Enum):
    """错误原因枚举"""
    # 前置条件
    NOT_IN_VOICE = "not_in_voice"
    MISSING_PERMISSION = "missing_permission"

    # 播放状态
    NO_SESSION = "no_session"
    ALREADY_PAUSED = "already_paused"
    NOT_PAUSED = "not_paused"
    EMPTY_QUEUE = "empty_queue"

    # 未找到 / 已存在
    PLAYLIST_ABSENT = "playlist_absent"
    PLAYLIST_EXISTS = "playlist_exists"
    EMPTY_PLAYLIST = "empty_playlist"
    TRACK_INDEX_OUT_OF_RANGE = "track_index_out_of_range"
    NO_SEARCH_RESULTS = "no_search_results"
    NO_LYRICS = "no_lyrics"
    NOTHING_TO_LOOK_UP = "nothing_to_look_up"

    # 外部服务
    AUDIO_RESOLVE_FAILED = "audio_resolve_failed"
    LYRICS_PROVIDER_FAILED = "lyrics_provider_failed"

    # 分页
    FORBIDDEN = "forbidden"
    EXPIRED = "expired"
    MALFORMED_TOKEN = "malformed_token"

    # 路由
    UNKNOWN_COMMAND = "unknown_command"
    INVALID_FILTER = "invalid_filter"


DEFAULT_MESSAGES: Dict[ErrorReason, str] = {
    ErrorReason.NOT_IN_VOICE: "You need to be in a voice channel to use this command!",
    ErrorReason.MISSING_PERMISSION: "I need permissions to join and speak in your voice channel!",
    ErrorReason.NO_SESSION: "No music is currently playing!",
    ErrorReason.ALREADY_PAUSED: "The player is already paused!",
    ErrorReason.NOT_PAUSED: "The player is not paused!",
    ErrorReason.EMPTY_QUEUE: "No music is playing or no songs in queue to skip!",
    ErrorReason.PLAYLIST_ABSENT: "That playlist does not exist!",
    ErrorReason.PLAYLIST_EXISTS: "That playlist already exists!",
    ErrorReason.EMPTY_PLAYLIST: "That playlist is empty!",
    ErrorReason.TRACK_INDEX_OUT_OF_RANGE: "Invalid song index. Check the playlist and try again.",
    ErrorReason.NO_SEARCH_RESULTS: "No results found for your query.",
    ErrorReason.NO_LYRICS: "No lyrics found for this song.",
    ErrorReason.NOTHING_TO_LOOK_UP: "No song is currently playing, and no query was provided.",
    ErrorReason.AUDIO_RESOLVE_FAILED: "The audio node could not load that query. Please try again later.",
    ErrorReason.LYRICS_PROVIDER_FAILED: "Error fetching lyrics. Please try again later.",
    ErrorReason.FORBIDDEN: "This interaction is not for you or has expired.",
    ErrorReason.EXPIRED: "This interaction is not for you or has expired.",
    ErrorReason.MALFORMED_TOKEN: "This interaction is not for you or has expired.",
    ErrorReason.UNKNOWN_COMMAND: "Unknown command.",
    ErrorReason.INVALID_FILTER: "Invalid filter.",
}


class CadenceError(Exception):
    """业务错误基类"""

    def __init__(self, reason: ErrorReason, user_message: Optional[str] = None, **context):
        """
        初始化业务错误

        Args:
            reason: 错误原因
            user_message: 用户友好的错误消息，缺省时使用默认文案
            **context: 额外的上下文信息（用于日志）
        """
        self.reason = reason
        self.user_message = user_message or DEFAULT_MESSAGES.get(reason, "An error occurred.")
        self.context = context
        super().__init__(f"{reason.value}: {self.user_message}")


class PreconditionError(CadenceError):
    """命令前置条件不满足"""


class StateError(CadenceError):
    """播放会话状态不允许该操作"""


class NotFoundError(CadenceError):
    """歌单、歌曲或歌词不存在（或已存在冲突）"""


class UpstreamError(CadenceError):
    """外部服务（音频节点、歌词源）调用失败"""


class PaginationError(CadenceError):
    """分页交互被拒绝"""


class RouterError(CadenceError):
    """命令路由失败"""
