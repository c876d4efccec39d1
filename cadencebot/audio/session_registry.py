"""
会话注册表 - wavelink 播放器的适配层

播放器由 wavelink 拥有，这里只负责：
- 按服务器查询/创建播放会话
- 将 Lavalink 的解析结果一次性解码为 ResolveResult
- 应用滤镜预设
- 处理节点与播放事件（正在播放通知、队列结束自动断开）
"""

import logging
import re
from typing import Any, Dict, List, Optional

import discord
from discord.ext import commands
import wavelink

from cadencebot.core.errors import ErrorReason, PreconditionError, UpstreamError
from cadencebot.core.interfaces import (
    EmptyResult,
    IAudioClient,
    IPlayerSession,
    PlaylistResult,
    ResolvedTrack,
    ResolveResult,
    SearchResult,
    TrackResult
)
from cadencebot.audio.filter_presets import FilterPreset, FilterStage
from cadencebot.app_commands.ui.embed_builder import EmbedBuilder
from cadencebot.utils.config_manager import ConfigManager


URL_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def is_url(query: str) -> bool:
    return bool(URL_PATTERN.match(query.strip()))


def wrap_playable(playable: wavelink.Playable, requester: Any = None) -> ResolvedTrack:
    """
    将 wavelink.Playable 包装为 ResolvedTrack

    Args:
        playable: wavelink 歌曲对象
        requester: 点歌人

    Returns:
        ResolvedTrack 实例
    """
    return ResolvedTrack(
        title=playable.title,
        author=playable.author,
        uri=playable.uri or "",
        length_ms=int(playable.length or 0),
        requester=requester,
        artwork=playable.artwork,
        playable=playable
    )


class WavelinkSession(IPlayerSession):
    """单个服务器的 wavelink 播放会话"""

    def __init__(self, player: wavelink.Player):
        self.player = player
        self.logger = logging.getLogger("cadencebot.audio.session")

    @property
    def guild_id(self) -> int:
        return self.player.guild.id

    @property
    def playing(self) -> bool:
        return self.player.playing

    @property
    def paused(self) -> bool:
        return self.player.paused

    @property
    def queue_size(self) -> int:
        return len(self.player.queue)

    @property
    def current(self) -> Optional[ResolvedTrack]:
        if self.player.current is None:
            return None
        return wrap_playable(self.player.current)

    def upcoming(self, limit: int = 10) -> List[ResolvedTrack]:
        return [wrap_playable(track) for track in list(self.player.queue)[:limit]]

    async def add(self, track: ResolvedTrack) -> None:
        playable = track.playable
        if track.requester is not None:
            playable.extras = {"requester_id": str(getattr(track.requester, "id", track.requester))}
        self.player.queue.put(playable)

    async def play(self) -> None:
        if self.player.queue.is_empty:
            self.logger.debug(f"队列为空，无法开始播放 - 服务器: {self.guild_id}")
            return

        track = self.player.queue.get()
        await self.player.play(track)
        self.logger.debug(f"开始播放 - 服务器: {self.guild_id}, 歌曲: {track.title}")

    async def pause(self, value: bool) -> None:
        await self.player.pause(value)

    async def stop(self) -> None:
        # 自动播放模式下队列会自动前进到下一首
        await self.player.skip(force=True)

    async def destroy(self) -> None:
        await self.player.disconnect()
        self.logger.info(f"播放会话已销毁 - 服务器: {self.guild_id}")

    async def apply_filter(self, preset: FilterPreset) -> None:
        """
        应用滤镜预设

        同一播放器上的不同滤镜字段会叠加，同一字段（如 timescale）会被覆盖，
        "none" 清除所有滤镜。

        Args:
            preset: 滤镜预设
        """
        if preset.stage is FilterStage.CLEAR:
            await self.player.set_filters()
            self.logger.debug(f"清除滤镜 - 服务器: {self.guild_id}")
            return

        filters: wavelink.Filters = self.player.filters
        stage = getattr(filters, preset.stage.value)

        if preset.stage is FilterStage.EQUALIZER:
            stage.set(bands=[dict(band) for band in preset.params["bands"]])
        else:
            stage.set(**dict(preset.params))

        await self.player.set_filters(filters)
        self.logger.debug(f"应用滤镜 - 服务器: {self.guild_id}, 滤镜: {preset.name.value}")


class WavelinkAudioClient(IAudioClient):
    """
    wavelink 音频客户端

    负责节点连接、会话查询与创建、查询解析和播放事件。
    """

    def __init__(self, bot: commands.Bot, config: ConfigManager):
        """
        初始化音频客户端

        Args:
            bot: Discord机器人实例
            config: 配置管理器
        """
        self.bot = bot
        self.config = config
        self.logger = logging.getLogger("cadencebot.audio.session_registry")

        self.search_source = config.get_lavalink_search_source()
        self.self_deaf = config.get('lavalink.self_deaf', True)

        # 服务器ID -> 用于发送播放通知的文字频道ID
        self._text_channels: Dict[int, int] = {}
        self._nodes_connected = False

        self.logger.debug("音频客户端初始化完成")

    async def connect_nodes(self) -> None:
        """连接配置中的所有 Lavalink 节点（只执行一次）"""
        if self._nodes_connected:
            return

        nodes = [
            wavelink.Node(
                uri=node_config["uri"],
                password=node_config.get("password", "youshallnotpass"),
                identifier=node_config.get("identifier")
            )
            for node_config in self.config.get_lavalink_nodes()
        ]

        await wavelink.Pool.connect(client=self.bot, nodes=nodes)
        self._nodes_connected = True
        self.logger.info(f"已请求连接 {len(nodes)} 个 Lavalink 节点")

    def register_listeners(self) -> None:
        """注册 wavelink 事件监听器"""
        self.bot.add_listener(self.on_wavelink_node_ready, 'on_wavelink_node_ready')
        self.bot.add_listener(self.on_wavelink_track_start, 'on_wavelink_track_start')
        self.bot.add_listener(self.on_wavelink_track_end, 'on_wavelink_track_end')
        self.logger.debug("wavelink 事件监听器注册完成")

    def get_session(self, guild_id: int) -> Optional[WavelinkSession]:
        guild = self.bot.get_guild(guild_id)
        if guild is None:
            return None

        player = guild.voice_client
        if isinstance(player, wavelink.Player) and player.connected:
            return WavelinkSession(player)
        return None

    async def create_connection(
        self,
        guild_id: int,
        voice_channel_id: int,
        text_channel_id: int
    ) -> WavelinkSession:
        """
        创建或复用播放会话

        已有会话时直接复用，新歌曲追加到现有队列末尾。
        """
        self._text_channels[guild_id] = text_channel_id

        existing = self.get_session(guild_id)
        if existing:
            self.logger.debug(f"复用现有播放会话 - 服务器: {guild_id}")
            return existing

        guild = self.bot.get_guild(guild_id)
        channel = guild.get_channel(voice_channel_id) if guild else None
        if not isinstance(channel, (discord.VoiceChannel, discord.StageChannel)):
            raise PreconditionError(
                ErrorReason.NOT_IN_VOICE,
                guild_id=guild_id,
                voice_channel_id=voice_channel_id
            )

        player: wavelink.Player = await channel.connect(cls=wavelink.Player, self_deaf=self.self_deaf)
        player.autoplay = wavelink.AutoPlayMode.partial

        self.logger.info(f"创建播放会话 - 服务器: {guild.name}, 频道: {channel.name}")
        return WavelinkSession(player)

    async def resolve(self, query: str, requester: Any = None) -> ResolveResult:
        """
        解析查询并解码为 ResolveResult

        Raises:
            UpstreamError: AUDIO_RESOLVE_FAILED 如果节点加载失败
        """
        try:
            results: wavelink.Search = await wavelink.Playable.search(query, source=self.search_source)
        except (wavelink.LavalinkLoadException, wavelink.WavelinkException) as e:
            self.logger.warning(f"解析查询失败: {query} - {e}")
            raise UpstreamError(ErrorReason.AUDIO_RESOLVE_FAILED, query=query) from e

        if isinstance(results, wavelink.Playlist):
            tracks = tuple(wrap_playable(track, requester) for track in results.tracks)
            if not tracks:
                return EmptyResult()
            return PlaylistResult(tracks=tracks, name=results.name)

        if not results:
            return EmptyResult()

        tracks = tuple(wrap_playable(track, requester) for track in results)
        if is_url(query):
            return TrackResult(track=tracks[0])
        return SearchResult(tracks=tracks)

    async def on_wavelink_node_ready(self, payload: wavelink.NodeReadyEventPayload) -> None:
        self.logger.info(f"Lavalink 节点已连接: {payload.node.identifier} (resumed: {payload.resumed})")

    async def on_wavelink_track_start(self, payload: wavelink.TrackStartEventPayload) -> None:
        player = payload.player
        if player is None:
            return

        track = wrap_playable(payload.track)
        self.logger.info(f"开始播放 - 服务器: {player.guild.id}, 歌曲: {track.title}")
        await self._announce(
            player.guild.id,
            f"Now Playing: **{track.title}** by {track.author}",
            embed=EmbedBuilder.create_now_playing_embed(track)
        )

    async def on_wavelink_track_end(self, payload: wavelink.TrackEndEventPayload) -> None:
        player = payload.player
        if player is None or payload.reason == "replaced":
            return

        if player.queue.is_empty and not player.playing:
            guild_id = player.guild.id
            self.logger.info(f"队列播放完毕，断开连接 - 服务器: {guild_id}")
            await self._announce(guild_id, "Queue has ended.")
            await player.disconnect()
            self._text_channels.pop(guild_id, None)

    async def _announce(self, guild_id: int, message: str, embed: Optional[discord.Embed] = None) -> None:
        channel_id = self._text_channels.get(guild_id)
        channel = self.bot.get_channel(channel_id) if channel_id else None
        if channel is None:
            return

        try:
            await channel.send(message, embed=embed)
        except discord.HTTPException as e:
            self.logger.warning(f"发送播放通知失败 - 服务器: {guild_id}: {e}")
