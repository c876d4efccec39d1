"""
基础Slash命令类

提供所有Slash命令的通用功能：
- 按命令名分发到处理方法
- 日志记录
- 会话前置条件检查
- 消息可见性控制
"""

import logging
from abc import ABC
from typing import Awaitable, Callable, Dict, Optional
import discord

from cadencebot.core.errors import ErrorReason, StateError
from cadencebot.core.interfaces import IAudioClient, IPlayerSession
from cadencebot.utils.config_manager import ConfigManager
from ..ui import EmbedBuilder, MessageVisibility, MessageType
from .command import Command


CommandHandler = Callable[[discord.Interaction, Command], Awaitable[None]]


class BaseSlashCommand(ABC):
    """
    所有Slash命令的基础类

    子类为每个负责的命令实现 handle_<命令名> 方法，
    路由器通过 handlers() 按命令名取得处理方法。
    """

    def __init__(self, config: ConfigManager, audio_client: Optional[IAudioClient] = None):
        """
        初始化基础命令

        Args:
            config: 配置管理器
            audio_client: 音频节点客户端
        """
        self.config = config
        self.audio_client = audio_client
        self.message_visibility = MessageVisibility()
        self.logger = logging.getLogger(f"cadencebot.app_commands.{self.__class__.__name__}")

        self.logger.debug(f"初始化 {self.__class__.__name__}")

    @property
    def command_names(self) -> tuple:
        """该处理器负责的命令名"""
        return ()

    def get_handler(self, command_name: str) -> CommandHandler:
        return getattr(self, f"handle_{command_name}")

    def handlers(self) -> Dict[str, CommandHandler]:
        return {name: self.get_handler(name) for name in self.command_names}

    def require_session(self, command: Command) -> IPlayerSession:
        """
        获取服务器的播放会话

        Raises:
            StateError: NO_SESSION 如果没有播放会话
        """
        session = self.audio_client.get_session(command.guild_id) if self.audio_client else None
        if session is None:
            raise StateError(ErrorReason.NO_SESSION, guild_id=command.guild_id)
        return session

    async def defer(self, interaction: discord.Interaction) -> None:
        """延迟响应耗时命令"""
        if not interaction.response.is_done():
            await interaction.response.defer()

    async def send_success_response(
        self,
        interaction: discord.Interaction,
        title: str,
        message: str
    ) -> Optional[discord.Message]:
        """
        发送成功响应

        Args:
            interaction: Discord交互对象
            title: 标题
            message: 消息内容
        """
        embed = EmbedBuilder.create_success_embed(title, message)
        return await self.message_visibility.send_message(interaction, embed, MessageType.SUCCESS)

    async def send_info_response(
        self,
        interaction: discord.Interaction,
        embed: discord.Embed,
        message_type: MessageType = MessageType.INFO,
        view: Optional[discord.ui.View] = None
    ) -> Optional[discord.Message]:
        return await self.message_visibility.send_message(interaction, embed, message_type, view=view)
