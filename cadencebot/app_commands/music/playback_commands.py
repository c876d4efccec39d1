"""
播放控制命令实现

处理播放控制相关的Slash命令：
- 点歌（play）
- 暂停 / 继续
- 跳过 / 停止
- 音频滤镜
"""

import discord

from cadencebot.audio.filter_presets import FilterName, available_filter_names, get_filter_preset
from cadencebot.core.errors import ErrorReason, NotFoundError, RouterError, StateError
from cadencebot.core.interfaces import IAudioClient, PlaylistResult, first_track
from cadencebot.utils.config_manager import ConfigManager
from ..core.base_command import BaseSlashCommand
from ..core.command import Command


class PlaybackControlCommands(BaseSlashCommand):
    """
    播放控制命令处理器

    负责点歌、暂停、继续、跳过、停止和滤镜
    """

    def __init__(self, config: ConfigManager, audio_client: IAudioClient):
        """
        初始化播放控制命令

        Args:
            config: 配置管理器
            audio_client: 音频节点客户端
        """
        super().__init__(config, audio_client)
        self.logger.debug("播放控制命令已初始化")

    @property
    def command_names(self) -> tuple:
        return ("play", "pause", "skip", "stop", "resume", "filter")

    async def handle_play(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理点歌命令

        先解析查询，再创建或复用播放会话；已有会话时新歌曲追加到队列末尾。
        """
        await self.defer(interaction)

        query = command.args["query"]
        self.logger.debug(f"处理点歌命令 - 用户: {interaction.user.display_name}, 查询: {query}")

        result = await self.audio_client.resolve(query, requester=interaction.user)

        if isinstance(result, PlaylistResult):
            tracks = list(result.tracks)
            message = f"Added playlist **{result.name}** with {len(tracks)} tracks."
        else:
            track = first_track(result)
            if track is None:
                raise NotFoundError(ErrorReason.NO_SEARCH_RESULTS, query=query)
            tracks = [track]
            message = f"Added **{track.title}** to the queue."

        session = await self.audio_client.create_connection(
            command.guild_id,
            command.caller_voice_channel_id,
            command.text_channel_id
        )

        for track in tracks:
            await session.add(track)

        await self.send_success_response(interaction, "Queued", message)

        if not session.playing and not session.paused:
            await session.play()

        self.logger.info(f"歌曲已加入队列 - 服务器: {command.guild_id}, 数量: {len(tracks)}")

    async def handle_pause(self, interaction: discord.Interaction, command: Command) -> None:
        session = self.require_session(command)
        if session.paused:
            raise StateError(ErrorReason.ALREADY_PAUSED, guild_id=command.guild_id)

        await session.pause(True)
        await self.send_success_response(interaction, "Paused", "Paused the current song.")

    async def handle_resume(self, interaction: discord.Interaction, command: Command) -> None:
        session = self.require_session(command)
        if not session.paused:
            raise StateError(ErrorReason.NOT_PAUSED, guild_id=command.guild_id)

        await session.pause(False)
        await self.send_success_response(interaction, "Resumed", "Resumed the current song.")

    async def handle_skip(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理跳过命令

        只有在队列中还有下一首时才允许跳过。
        """
        session = self.audio_client.get_session(command.guild_id)
        if session is None or session.queue_size == 0:
            raise StateError(ErrorReason.EMPTY_QUEUE, guild_id=command.guild_id)

        await session.stop()
        await self.send_success_response(interaction, "Skipped", "Skipped the current song.")

    async def handle_stop(self, interaction: discord.Interaction, command: Command) -> None:
        session = self.require_session(command)

        await session.destroy()
        await self.send_success_response(interaction, "Stopped", "Stopped playback and cleared the queue.")

    async def handle_filter(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理滤镜命令

        滤镜会叠加在已有滤镜之上，直到选择 none 清除。
        """
        session = self.require_session(command)

        filter_name = command.args.get("filter", "")
        preset = get_filter_preset(filter_name)
        if preset is None:
            raise RouterError(
                ErrorReason.INVALID_FILTER,
                f"Invalid filter. Available filters: {', '.join(available_filter_names())}",
                filter=filter_name
            )

        await session.apply_filter(preset)

        label = "no" if preset.name is FilterName.NONE else preset.name.value
        await self.send_success_response(interaction, "Filter", f"Applied **{label}** filter.")
