"""
歌单命令实现

处理用户歌单相关的Slash命令：
- 创建 / 删除歌单
- 添加 / 移除歌曲
- 播放歌单
"""

import discord

from cadencebot.core.errors import ErrorReason, NotFoundError, UpstreamError
from cadencebot.core.interfaces import IAudioClient, IPlaylistStore, first_track
from cadencebot.utils.config_manager import ConfigManager
from ..core.base_command import BaseSlashCommand
from ..core.command import Command


class PlaylistCommands(BaseSlashCommand):
    """
    歌单命令处理器

    歌单按调用者的用户ID隔离，每个操作都直接读写歌单存储。
    """

    def __init__(
        self,
        config: ConfigManager,
        audio_client: IAudioClient,
        playlist_store: IPlaylistStore
    ):
        """
        初始化歌单命令

        Args:
            config: 配置管理器
            audio_client: 音频节点客户端
            playlist_store: 歌单存储
        """
        super().__init__(config, audio_client)
        self.playlist_store = playlist_store
        self.logger.debug("歌单命令已初始化")

    @property
    def command_names(self) -> tuple:
        return (
            "playlist_create",
            "playlist_delete",
            "playlist_add",
            "playlist_remove",
            "playlist_play"
        )

    async def handle_playlist_create(self, interaction: discord.Interaction, command: Command) -> None:
        await self.defer(interaction)
        name = command.args["name"]

        await self.playlist_store.create(command.caller_user_id, name)
        await self.send_success_response(interaction, "Playlist", f"Created playlist **{name}**.")

    async def handle_playlist_delete(self, interaction: discord.Interaction, command: Command) -> None:
        await self.defer(interaction)
        name = command.args["name"]

        await self.playlist_store.delete(command.caller_user_id, name)
        await self.send_success_response(interaction, "Playlist", f"Deleted playlist **{name}**.")

    async def handle_playlist_add(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理添加歌曲到歌单命令

        先确认歌单存在，再解析查询，保存第一首结果的引用。
        """
        await self.defer(interaction)
        name = command.args["name"]
        query = command.args["query"]

        if not await self.playlist_store.exists(command.caller_user_id, name):
            raise NotFoundError(
                ErrorReason.PLAYLIST_ABSENT,
                f"Playlist **{name}** does not exist!",
                playlist=name
            )

        result = await self.audio_client.resolve(query, requester=interaction.user)
        track = first_track(result)
        if track is None:
            raise NotFoundError(ErrorReason.NO_SEARCH_RESULTS, query=query)

        await self.playlist_store.append(command.caller_user_id, name, track.to_ref())
        await self.send_success_response(
            interaction,
            "Playlist",
            f"Added **{track.title}** to playlist **{name}**."
        )

    async def handle_playlist_remove(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理从歌单移除歌曲命令

        用户输入的位置从1开始。
        """
        await self.defer(interaction)
        name = command.args["name"]
        index = int(command.args["index"])

        removed = await self.playlist_store.remove_at(command.caller_user_id, name, index - 1)
        await self.send_success_response(
            interaction,
            "Playlist",
            f"Removed **{removed.title}** from playlist **{name}**."
        )

    async def handle_playlist_play(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理播放歌单命令

        逐个重新解析歌单中保存的链接，解析失败的歌曲跳过。
        """
        await self.defer(interaction)
        name = command.args["name"]

        tracks = await self.playlist_store.list(command.caller_user_id, name)
        if not tracks:
            raise NotFoundError(
                ErrorReason.EMPTY_PLAYLIST,
                f"Playlist **{name}** is empty!",
                playlist=name
            )

        session = await self.audio_client.create_connection(
            command.guild_id,
            command.caller_voice_channel_id,
            command.text_channel_id
        )

        queued = 0
        for ref in tracks:
            try:
                result = await self.audio_client.resolve(ref.uri, requester=interaction.user)
            except UpstreamError as e:
                self.logger.warning(f"歌单歌曲解析失败，跳过: {ref.title} - {e}")
                continue

            track = first_track(result)
            if track is None:
                self.logger.debug(f"歌单歌曲无结果，跳过: {ref.title}")
                continue

            await session.add(track)
            queued += 1

        if queued < len(tracks):
            self.logger.warning(f"歌单 {name} 有 {len(tracks) - queued} 首歌曲未能加入队列")

        if not session.playing and not session.paused:
            await session.play()

        await self.send_success_response(
            interaction,
            "Playlist",
            f"Playing playlist **{name}** with {len(tracks)} tracks."
        )
