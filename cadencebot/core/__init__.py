"""
核心模块 - 接口定义与领域错误
"""

from .errors import (
    ErrorReason,
    CadenceError,
    PreconditionError,
    StateError,
    NotFoundError,
    UpstreamError,
    PaginationError,
    RouterError
)
from .interfaces import (
    TrackRef,
    ResolvedTrack,
    EmptyResult,
    TrackResult,
    SearchResult,
    PlaylistResult,
    ResolveResult,
    first_track,
    IPlayerSession,
    IAudioClient,
    IPlaylistStore,
    ILyricsProvider
)

__all__ = [
    'ErrorReason',
    'CadenceError',
    'PreconditionError',
    'StateError',
    'NotFoundError',
    'UpstreamError',
    'PaginationError',
    'RouterError',
    'TrackRef',
    'ResolvedTrack',
    'EmptyResult',
    'TrackResult',
    'SearchResult',
    'PlaylistResult',
    'ResolveResult',
    'first_track',
    'IPlayerSession',
    'IAudioClient',
    'IPlaylistStore',
    'ILyricsProvider'
]
