"""
测试替身

内存中的播放会话、音频客户端和歌词源，行为与真实实现的接口约定一致；
以及模拟的Discord交互对象。
"""

from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, Mock

import discord

from cadencebot.audio.filter_presets import FilterPreset
from cadencebot.core.interfaces import (
    EmptyResult,
    IAudioClient,
    ILyricsProvider,
    IPlayerSession,
    ResolvedTrack,
    ResolveResult,
    SearchResult
)


def make_track(title: str = "Test Song", author: str = "Test Artist", length_ms: int = 180000) -> ResolvedTrack:
    slug = title.lower().replace(" ", "-")
    return ResolvedTrack(
        title=title,
        author=author,
        uri=f"https://music.example.com/{slug}",
        length_ms=length_ms
    )


class FakeSession(IPlayerSession):
    """内存播放会话"""

    def __init__(self, guild_id: int):
        self._guild_id = guild_id
        self._playing = False
        self._paused = False
        self._current: Optional[ResolvedTrack] = None
        self.queue: List[ResolvedTrack] = []
        self.filters: List[FilterPreset] = []
        self.destroyed = False
        self.stop_calls = 0

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def queue_size(self) -> int:
        return len(self.queue)

    @property
    def current(self) -> Optional[ResolvedTrack]:
        return self._current

    def upcoming(self, limit: int = 10) -> List[ResolvedTrack]:
        return self.queue[:limit]

    async def add(self, track: ResolvedTrack) -> None:
        self.queue.append(track)

    async def play(self) -> None:
        if not self.queue:
            return
        self._current = self.queue.pop(0)
        self._playing = True
        self._paused = False

    async def pause(self, value: bool) -> None:
        self._paused = value

    async def stop(self) -> None:
        self.stop_calls += 1
        self._current = None
        self._playing = False
        await self.play()

    async def destroy(self) -> None:
        self.destroyed = True
        self._playing = False
        self._current = None
        self.queue.clear()

    async def apply_filter(self, preset: FilterPreset) -> None:
        self.filters.append(preset)


class FakeAudioClient(IAudioClient):
    """
    内存音频客户端

    results 按查询字符串返回预设结果，未预设的查询返回 EmptyResult。
    """

    def __init__(self):
        self.sessions: Dict[int, FakeSession] = {}
        self.results: Dict[str, ResolveResult] = {}
        self.failures: Dict[str, Exception] = {}
        self.resolved_queries: List[str] = []
        self.connections: List[tuple] = []

    def get_session(self, guild_id: int) -> Optional[FakeSession]:
        session = self.sessions.get(guild_id)
        if session is None or session.destroyed:
            return None
        return session

    async def create_connection(
        self,
        guild_id: int,
        voice_channel_id: int,
        text_channel_id: int
    ) -> FakeSession:
        self.connections.append((guild_id, voice_channel_id, text_channel_id))
        session = self.get_session(guild_id)
        if session is None:
            session = FakeSession(guild_id)
            self.sessions[guild_id] = session
        return session

    async def resolve(self, query: str, requester: Any = None) -> ResolveResult:
        self.resolved_queries.append(query)
        if query in self.failures:
            raise self.failures[query]
        return self.results.get(query, EmptyResult())

    def add_search_result(self, query: str, *tracks: ResolvedTrack) -> None:
        self.results[query] = SearchResult(tracks=tuple(tracks))

    def start_session(self, guild_id: int, *, playing: bool = True, paused: bool = False,
                      current: Optional[ResolvedTrack] = None, queued: int = 0) -> FakeSession:
        session = FakeSession(guild_id)
        session._playing = playing
        session._paused = paused
        session._current = current
        session.queue = [make_track(f"Queued Song {i + 1}") for i in range(queued)]
        self.sessions[guild_id] = session
        return session


class FakeLyricsProvider(ILyricsProvider):
    """返回固定歌词或抛出预设异常的歌词源"""

    def __init__(self, lyrics: Optional[str] = None, error: Optional[Exception] = None):
        self.lyrics = lyrics
        self.error = error
        self.calls: List[tuple] = []

    async def get_lyrics(self, title: str, artist: str = "") -> Optional[str]:
        self.calls.append((title, artist))
        if self.error is not None:
            raise self.error
        return self.lyrics


class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


GUILD_ID = 12345
TEXT_CHANNEL_ID = 11111
VOICE_CHANNEL_ID = 22222
USER_ID = 67890


def make_interaction(
    user_id: int = USER_ID,
    in_voice: bool = True,
    can_connect: bool = True,
    can_speak: bool = True,
    interaction_id: int = 99999,
    custom_id: Optional[str] = None
) -> Mock:
    """
    创建模拟Discord交互对象

    response.defer / send_message / edit_message 会把交互标记为已响应并记录响应类型，
    之后的回复走 followup。
    """
    interaction = Mock(spec=discord.Interaction)
    interaction.id = interaction_id
    interaction.type = discord.InteractionType.component if custom_id else discord.InteractionType.application_command
    interaction.data = {"custom_id": custom_id} if custom_id else {}

    interaction.guild = Mock()
    interaction.guild.id = GUILD_ID
    interaction.guild.name = "Test Guild"
    interaction.guild.me = Mock()

    interaction.user = Mock()
    interaction.user.id = user_id
    interaction.user.display_name = f"User{user_id}"

    if in_voice:
        permissions = Mock()
        permissions.connect = can_connect
        permissions.speak = can_speak
        interaction.user.voice = Mock()
        interaction.user.voice.channel = Mock()
        interaction.user.voice.channel.id = VOICE_CHANNEL_ID
        interaction.user.voice.channel.permissions_for = Mock(return_value=permissions)
    else:
        interaction.user.voice = None

    interaction.channel = Mock()
    interaction.channel.id = TEXT_CHANNEL_ID
    interaction.client = Mock()
    interaction.command = None

    interaction.response = Mock()
    interaction.response.type = None
    interaction.response.is_done = Mock(side_effect=lambda: interaction.response.type is not None)

    def responds_with(response_type):
        async def respond(*args, **kwargs):
            interaction.response.type = response_type
        return respond

    interaction.response.defer = AsyncMock(
        side_effect=responds_with(discord.InteractionResponseType.deferred_channel_message)
    )
    interaction.response.send_message = AsyncMock(
        side_effect=responds_with(discord.InteractionResponseType.channel_message)
    )
    interaction.response.edit_message = AsyncMock(
        side_effect=responds_with(discord.InteractionResponseType.message_update)
    )
    interaction.delete_original_response = AsyncMock()
    interaction.followup = Mock()
    interaction.followup.send = AsyncMock()
    interaction.original_response = AsyncMock()
    return interaction


def sent_replies(interaction: Mock) -> List[Tuple[discord.Embed, bool, Optional[discord.ui.View]]]:
    """收集交互上发送的所有回复：(嵌入, 是否ephemeral, 视图)"""
    replies = []
    for mock in (interaction.response.send_message, interaction.followup.send):
        for call in mock.call_args_list:
            replies.append((call.kwargs.get("embed"), call.kwargs.get("ephemeral", False), call.kwargs.get("view")))
    return replies


def last_reply(interaction: Mock) -> Tuple[discord.Embed, bool, Optional[discord.ui.View]]:
    replies = sent_replies(interaction)
    assert replies, "no reply was sent"
    return replies[-1]

