"""
帮助命令

列出所有可用的Slash命令及其描述
"""

import discord

from cadencebot.utils.config_manager import ConfigManager
from ..core.base_command import BaseSlashCommand
from ..core.command import COMMAND_DESCRIPTIONS, Command
from ..ui import EmbedBuilder, MessageType


class HelpCommand(BaseSlashCommand):
    """帮助命令处理器"""

    def __init__(self, config: ConfigManager):
        super().__init__(config)

    @property
    def command_names(self) -> tuple:
        return ("help",)

    async def handle_help(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理帮助命令

        Args:
            interaction: Discord交互对象
            command: 命令
        """
        self.logger.debug(f"帮助命令被 {interaction.user} 在 {interaction.guild} 中调用")

        embed = EmbedBuilder.create_help_embed(COMMAND_DESCRIPTIONS.items())
        await self.send_info_response(interaction, embed, MessageType.HELP)
