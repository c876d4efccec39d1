"""
App Commands错误处理系统

提供统一的错误处理机制：
- 分类错误处理
- 用户友好的错误消息
- 错误统计和监控

命令和按钮交互中抛出的所有异常都在这里转换为一条回复，进程继续运行。
"""

from enum import Enum
from typing import Callable, Dict, Optional
import discord
from discord import app_commands

from cadencebot.core.errors import (
    CadenceError,
    NotFoundError,
    PaginationError,
    PreconditionError,
    RouterError,
    StateError,
    UpstreamError
)
from .logging_config import AppCommandsLogger
from ..ui import EmbedBuilder, MessageVisibility, MessageType, clear_deferred_response


GENERIC_ERROR_MESSAGE = "An error occurred while executing the command."


class ErrorCategory(Enum):
    """错误分类枚举"""
    PRECONDITION = "precondition"     # 不在语音频道、缺少权限
    STATE = "state"                   # 播放会话状态不允许
    NOT_FOUND = "not_found"           # 歌单/歌曲/歌词不存在或已存在
    UPSTREAM = "upstream"             # 音频节点或歌词源失败
    PAGINATION = "pagination"         # 翻页被拒绝或已过期
    ROUTER = "router"                 # 未知命令、无效参数
    PERMISSION_ERROR = "permission"   # Discord 权限错误
    NETWORK_ERROR = "network"         # Discord HTTP 错误
    SYSTEM_ERROR = "system"           # 未分类的异常


# 每类业务错误的回复标题和消息类型
_DOMAIN_PRESENTATION: Dict[ErrorCategory, tuple] = {
    ErrorCategory.PRECONDITION: ("Cannot run this command", MessageType.ERROR),
    ErrorCategory.STATE: ("Player", MessageType.ERROR),
    ErrorCategory.NOT_FOUND: ("Not found", MessageType.NOT_FOUND),
    ErrorCategory.UPSTREAM: ("Service unavailable", MessageType.ERROR),
    ErrorCategory.PAGINATION: ("Unavailable", MessageType.ERROR),
    ErrorCategory.ROUTER: ("Invalid command", MessageType.ERROR),
}


class AppCommandsErrorHandler:
    """
    App Commands错误处理器

    提供统一的错误处理和用户反馈机制
    """

    def __init__(self):
        """初始化错误处理器"""
        self.logger = AppCommandsLogger("error_handler")
        self.message_visibility = MessageVisibility()

        # 错误统计
        self._error_stats: Dict[str, int] = {}

        # 错误处理策略
        self._error_handlers: Dict[ErrorCategory, Callable] = {
            ErrorCategory.PRECONDITION: self._handle_domain_error,
            ErrorCategory.STATE: self._handle_domain_error,
            ErrorCategory.NOT_FOUND: self._handle_domain_error,
            ErrorCategory.UPSTREAM: self._handle_domain_error,
            ErrorCategory.PAGINATION: self._handle_domain_error,
            ErrorCategory.ROUTER: self._handle_domain_error,
            ErrorCategory.PERMISSION_ERROR: self._handle_permission_error,
            ErrorCategory.NETWORK_ERROR: self._handle_system_error,
            ErrorCategory.SYSTEM_ERROR: self._handle_system_error,
        }

    async def handle_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        command_name: Optional[str] = None
    ) -> bool:
        """
        处理错误

        Args:
            interaction: Discord交互对象
            error: 异常对象
            command_name: 命令名称

        Returns:
            True if error was handled, False otherwise
        """
        try:
            # 记录错误统计
            error_type = type(error).__name__
            self._error_stats[error_type] = self._error_stats.get(error_type, 0) + 1

            category = self.categorize_error(error)

            if isinstance(error, CadenceError):
                self.logger.debug(
                    f"业务错误 - 命令: {command_name or 'unknown'}, 原因: {error.reason.value}",
                    category=category.value
                )
            else:
                self.logger.log_command_error(
                    interaction,
                    command_name or "unknown",
                    error,
                    error_category=category.value
                )

            handler = self._error_handlers.get(category, self._handle_system_error)
            await handler(interaction, error, category)

            return True

        except Exception as e:
            # 错误处理器本身出错
            self.logger.error(f"错误处理器失败: {e}", error=e)
            await self._handle_fallback_error(interaction, error)
            return False

    def categorize_error(self, error: Exception) -> ErrorCategory:
        """
        分类错误

        Args:
            error: 异常对象

        Returns:
            错误分类
        """
        if isinstance(error, PreconditionError):
            return ErrorCategory.PRECONDITION
        if isinstance(error, StateError):
            return ErrorCategory.STATE
        if isinstance(error, NotFoundError):
            return ErrorCategory.NOT_FOUND
        if isinstance(error, UpstreamError):
            return ErrorCategory.UPSTREAM
        if isinstance(error, PaginationError):
            return ErrorCategory.PAGINATION
        if isinstance(error, RouterError):
            return ErrorCategory.ROUTER

        # Discord异常
        if isinstance(error, (discord.Forbidden, app_commands.BotMissingPermissions)):
            return ErrorCategory.PERMISSION_ERROR
        if isinstance(error, discord.HTTPException):
            return ErrorCategory.NETWORK_ERROR

        return ErrorCategory.SYSTEM_ERROR

    async def _handle_domain_error(
        self,
        interaction: discord.Interaction,
        error: CadenceError,
        category: ErrorCategory
    ) -> None:
        """处理业务错误：直接回复错误自带的用户消息"""
        title, message_type = _DOMAIN_PRESENTATION[category]

        if message_type is MessageType.NOT_FOUND:
            embed = EmbedBuilder.create_warning_embed(title, error.user_message)
        else:
            embed = EmbedBuilder.create_error_embed(title, error.user_message)

        await self.message_visibility.send_message(interaction, embed, message_type)

    async def _handle_permission_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        category: ErrorCategory
    ) -> None:
        """处理权限错误"""
        embed = EmbedBuilder.create_error_embed(
            "Missing permissions",
            "I don't have permission to do that here. Please ask a server admin to check my permissions."
        )

        await self.message_visibility.send_message(interaction, embed, MessageType.ERROR)

    async def _handle_system_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        category: ErrorCategory
    ) -> None:
        """处理未分类的系统错误"""
        embed = EmbedBuilder.create_error_embed("Error", GENERIC_ERROR_MESSAGE)

        await self.message_visibility.send_message(interaction, embed, MessageType.ERROR)

    async def _handle_fallback_error(
        self,
        interaction: discord.Interaction,
        original_error: Exception
    ) -> None:
        """处理回退错误（当错误处理器本身失败时）"""
        try:
            if interaction.response.is_done():
                await clear_deferred_response(interaction)
                await interaction.followup.send(GENERIC_ERROR_MESSAGE, ephemeral=True)
            else:
                await interaction.response.send_message(GENERIC_ERROR_MESSAGE, ephemeral=True)

        except discord.HTTPException:
            # 如果连回退处理都失败了，只能记录日志
            self.logger.error(f"回退错误处理失败，原始错误: {original_error}")

    def get_error_stats(self) -> Dict[str, int]:
        """
        获取错误统计

        Returns:
            错误统计字典
        """
        return self._error_stats.copy()
