"""
消息可见性控制

管理Discord消息的可见性策略：
- Ephemeral消息（仅用户可见）
- Public消息（所有用户可见）
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional
import discord


class MessageType(Enum):
    """消息类型枚举"""
    ERROR = "error"
    NOT_FOUND = "not_found"
    SUCCESS = "success"
    INFO = "info"
    QUEUE_STATUS = "queue_status"
    LYRICS = "lyrics"
    HELP = "help"


class MessageVisibility:
    """
    消息可见性控制器

    根据消息类型决定消息的可见性：前置条件、状态、分页和外部服务错误仅发起者可见，
    "未找到"类错误和正常回复对频道内所有人可见。
    """

    def __init__(self):
        """初始化消息可见性控制器"""
        self.logger = logging.getLogger("cadencebot.app_commands.message_visibility")

        self._visibility_rules = {
            # Ephemeral消息（仅用户可见）
            MessageType.ERROR: True,

            # Public消息（所有用户可见）
            MessageType.NOT_FOUND: False,
            MessageType.SUCCESS: False,
            MessageType.INFO: False,
            MessageType.QUEUE_STATUS: False,
            MessageType.LYRICS: False,
            MessageType.HELP: False
        }

    def should_be_ephemeral(self, message_type: MessageType) -> bool:
        """
        判断消息是否应该是ephemeral（仅用户可见）

        Args:
            message_type: 消息类型

        Returns:
            True if should be ephemeral, False if should be public
        """
        return self._visibility_rules.get(message_type, True)

    async def send_message(
        self,
        interaction: discord.Interaction,
        embed: discord.Embed,
        message_type: MessageType,
        view: Optional[discord.ui.View] = None
    ) -> Optional[discord.Message]:
        """
        发送消息并自动应用可见性策略

        已经响应（或延迟响应）过的交互改用 followup 发送。

        Args:
            interaction: Discord交互对象
            embed: 嵌入消息
            message_type: 消息类型
            view: 可选的视图组件

        Returns:
            发送的消息对象或None
        """
        ephemeral = self.should_be_ephemeral(message_type)
        kwargs: Dict[str, Any] = {'embed': embed, 'ephemeral': ephemeral}
        if view is not None:
            kwargs['view'] = view

        self.logger.debug(
            f"发送消息 - 类型: {message_type.value}, "
            f"Ephemeral: {ephemeral}, "
            f"用户: {interaction.user.display_name}"
        )

        try:
            if interaction.response.is_done():
                if ephemeral:
                    await clear_deferred_response(interaction)
                return await interaction.followup.send(wait=True, **kwargs)

            await interaction.response.send_message(**kwargs)
            return await interaction.original_response()

        except discord.HTTPException as e:
            self.logger.error(f"发送消息失败: {e}", exc_info=True)
            return None


async def clear_deferred_response(interaction: discord.Interaction) -> None:
    """
    删除公开的延迟响应占位消息

    延迟响应后的第一条 followup 会替换占位消息并继承其可见性，
    删除占位消息后 followup 才能以ephemeral发送。
    """
    if interaction.response.type is not discord.InteractionResponseType.deferred_channel_message:
        return

    try:
        await interaction.delete_original_response()
    except discord.NotFound:
        logging.getLogger("cadencebot.app_commands.message_visibility").debug("延迟响应占位消息已不存在")
