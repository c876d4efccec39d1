"""
队列管理命令实现

显示当前服务器的播放队列
"""

import discord

from cadencebot.core.interfaces import IAudioClient
from cadencebot.utils.config_manager import ConfigManager
from ..core.base_command import BaseSlashCommand
from ..core.command import Command
from ..ui import EmbedBuilder, MessageType


QUEUE_DISPLAY_LIMIT = 10


class QueueManagementCommands(BaseSlashCommand):
    """队列管理命令处理器"""

    def __init__(self, config: ConfigManager, audio_client: IAudioClient):
        super().__init__(config, audio_client)
        self.logger.debug("队列管理命令已初始化")

    @property
    def command_names(self) -> tuple:
        return ("queue",)

    async def handle_queue(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理队列显示命令

        Args:
            interaction: Discord交互对象
            command: 命令
        """
        await self.defer(interaction)

        session = self.audio_client.get_session(command.guild_id)
        if session is None or session.queue_size == 0:
            embed = EmbedBuilder.create_info_embed("Queue", "No music is playing or the queue is empty.")
            await self.send_info_response(interaction, embed, MessageType.QUEUE_STATUS)
            return

        tracks = session.upcoming(QUEUE_DISPLAY_LIMIT)
        self.logger.debug(f"显示队列 - 服务器: {command.guild_id}, 队列长度: {session.queue_size}")

        embed = EmbedBuilder.create_queue_embed(tracks)
        await self.send_info_response(interaction, embed, MessageType.QUEUE_STATUS)
