"""
测试配置

提供测试所需的fixtures：测试替身、分页缓存和临时歌单文件
"""

import logging
from unittest.mock import Mock

import pytest

from cadencebot.app_commands.core import AppCommandsErrorHandler, CommandRouter
from cadencebot.app_commands.general import HelpCommand
from cadencebot.app_commands.music import (
    LyricsCommands,
    PlaybackControlCommands,
    PlaylistCommands,
    QueueManagementCommands
)
from cadencebot.lyrics.lyrics_manager import LyricsManager
from cadencebot.playlist.playlist_store import JsonPlaylistStore
from cadencebot.ui.pagination_cache import PaginationCache
from cadencebot.utils.config_manager import ConfigManager
from fakes import FakeAudioClient, FakeClock, FakeLyricsProvider


@pytest.fixture
def mock_config():
    """创建模拟配置管理器"""
    config = Mock(spec=ConfigManager)
    config.get.side_effect = lambda key, default=None: default
    config.get_pagination_timeout.return_value = 300.0
    return config


@pytest.fixture
def audio_client() -> FakeAudioClient:
    return FakeAudioClient()


@pytest.fixture
def playlist_store(tmp_path) -> JsonPlaylistStore:
    return JsonPlaylistStore(str(tmp_path / "data" / "playlists.json"))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pagination_cache(clock) -> PaginationCache:
    cache = PaginationCache(ttl=300.0, clock=clock)
    yield cache
    cache.clear()


@pytest.fixture
def lyrics_provider() -> FakeLyricsProvider:
    return FakeLyricsProvider(lyrics="First line\nSecond line")


@pytest.fixture
def error_handler() -> AppCommandsErrorHandler:
    return AppCommandsErrorHandler()


@pytest.fixture
def lyrics_commands(mock_config, audio_client, lyrics_provider, pagination_cache, error_handler):
    return LyricsCommands(
        mock_config,
        audio_client,
        LyricsManager(lyrics_provider),
        pagination_cache,
        error_handler=error_handler
    )


@pytest.fixture
def router(mock_config, audio_client, playlist_store, lyrics_commands, error_handler) -> CommandRouter:
    """装配全部命令处理器的路由器"""
    return CommandRouter(
        [
            PlaybackControlCommands(mock_config, audio_client),
            QueueManagementCommands(mock_config, audio_client),
            PlaylistCommands(mock_config, audio_client, playlist_store),
            lyrics_commands,
            HelpCommand(mock_config)
        ],
        error_handler=error_handler
    )


@pytest.fixture(autouse=True)
def setup_logging():
    """设置测试日志"""
    logging.getLogger("cadencebot").setLevel(logging.CRITICAL)
    yield
    logging.getLogger("cadencebot").setLevel(logging.DEBUG)
