"""
核心接口定义 - 定义系统各模块间的抽象接口

命令层只依赖这里的抽象：音频节点客户端、播放会话、歌单存储和歌词源。
具体实现（wavelink、JSON 文件、Genius/LRCLIB）在各自的模块中。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from cadencebot.audio.filter_presets import FilterPreset


@dataclass(frozen=True)
class TrackRef:
    """歌单中保存的歌曲引用"""
    title: str
    author: str
    uri: str
    length_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "uri": self.uri,
            "length": self.length_ms
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackRef":
        return cls(
            title=str(data.get("title", "Unknown")),
            author=str(data.get("author", "Unknown")),
            uri=str(data.get("uri", "")),
            length_ms=int(data.get("length", 0) or 0)
        )


@dataclass
class ResolvedTrack:
    """
    音频节点解析出的可播放歌曲

    playable 是底层客户端的原始对象（wavelink.Playable），命令层不直接访问。
    """
    title: str
    author: str
    uri: str
    length_ms: int
    requester: Any = None
    artwork: Optional[str] = None
    playable: Any = field(default=None, repr=False, compare=False)

    def to_ref(self) -> TrackRef:
        return TrackRef(
            title=self.title,
            author=self.author,
            uri=self.uri,
            length_ms=self.length_ms
        )


@dataclass(frozen=True)
class EmptyResult:
    """查询没有结果"""


@dataclass(frozen=True)
class TrackResult:
    """直接链接解析出的单曲"""
    track: ResolvedTrack


@dataclass(frozen=True)
class SearchResult:
    """关键词搜索结果，按相关度排序"""
    tracks: Tuple[ResolvedTrack, ...]


@dataclass(frozen=True)
class PlaylistResult:
    """播放列表链接解析结果"""
    tracks: Tuple[ResolvedTrack, ...]
    name: str


ResolveResult = Union[EmptyResult, TrackResult, SearchResult, PlaylistResult]


def first_track(result: ResolveResult) -> Optional[ResolvedTrack]:
    """
    取解析结果中的第一首歌曲

    Args:
        result: 解析结果

    Returns:
        第一首歌曲，空结果时返回 None
    """
    if isinstance(result, TrackResult):
        return result.track
    if isinstance(result, (SearchResult, PlaylistResult)) and result.tracks:
        return result.tracks[0]
    return None


class IPlayerSession(ABC):
    """服务器播放会话接口 - 由外部音频客户端拥有，命令层只读取状态并调用操作"""

    @property
    @abstractmethod
    def guild_id(self) -> int:
        pass

    @property
    @abstractmethod
    def playing(self) -> bool:
        pass

    @property
    @abstractmethod
    def paused(self) -> bool:
        pass

    @property
    @abstractmethod
    def queue_size(self) -> int:
        pass

    @property
    @abstractmethod
    def current(self) -> Optional[ResolvedTrack]:
        pass

    @abstractmethod
    def upcoming(self, limit: int = 10) -> List[ResolvedTrack]:
        """返回队列中即将播放的歌曲"""
        pass

    @abstractmethod
    async def add(self, track: ResolvedTrack) -> None:
        pass

    @abstractmethod
    async def play(self) -> None:
        """开始播放队列中的下一首"""
        pass

    @abstractmethod
    async def pause(self, value: bool) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        """停止当前歌曲，队列自动前进"""
        pass

    @abstractmethod
    async def destroy(self) -> None:
        """断开连接并销毁会话"""
        pass

    @abstractmethod
    async def apply_filter(self, preset: "FilterPreset") -> None:
        pass


class IAudioClient(ABC):
    """音频节点客户端接口"""

    @abstractmethod
    def get_session(self, guild_id: int) -> Optional[IPlayerSession]:
        pass

    @abstractmethod
    async def create_connection(
        self,
        guild_id: int,
        voice_channel_id: int,
        text_channel_id: int
    ) -> IPlayerSession:
        """创建或复用服务器的播放会话"""
        pass

    @abstractmethod
    async def resolve(self, query: str, requester: Any = None) -> ResolveResult:
        pass


class IPlaylistStore(ABC):
    """歌单存储接口"""

    @abstractmethod
    async def create(self, user_id: str, name: str) -> None:
        pass

    @abstractmethod
    async def delete(self, user_id: str, name: str) -> None:
        pass

    @abstractmethod
    async def append(self, user_id: str, name: str, track: TrackRef) -> int:
        pass

    @abstractmethod
    async def remove_at(self, user_id: str, name: str, index: int) -> TrackRef:
        pass

    @abstractmethod
    async def list(self, user_id: str, name: str) -> List[TrackRef]:
        pass

    @abstractmethod
    async def exists(self, user_id: str, name: str) -> bool:
        pass


class ILyricsProvider(ABC):
    """歌词源接口"""

    @abstractmethod
    async def get_lyrics(self, title: str, artist: str = "") -> Optional[str]:
        """
        获取纯文本歌词

        Returns:
            歌词文本，未找到时返回 None 或空字符串

        Raises:
            Exception: 网络或服务错误直接向上抛出
        """
        pass
