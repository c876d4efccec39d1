"""
命令路由器

接收 Command，执行前置条件检查，分发给对应的处理方法，
并把处理过程中抛出的所有错误交给错误处理器转换为回复。
"""

from typing import Dict, Iterable, Optional
import discord

from cadencebot.core.errors import ErrorReason, PreconditionError, RouterError
from .base_command import BaseSlashCommand, CommandHandler
from .command import COMMAND_DESCRIPTIONS, Command
from .error_handler import AppCommandsErrorHandler
from .logging_config import AppCommandsLogger, log_command_execution


_router_logger = AppCommandsLogger("router")


class CommandRouter:
    """
    命令路由器

    每个命令恰好产生一条主回复；耗时命令先延迟响应再发送最终回复。
    """

    # 不需要调用者在语音频道中的命令
    VOICE_EXEMPT = frozenset({
        "queue",
        "help",
        "playlist_create",
        "playlist_delete",
        "playlist_add",
        "playlist_remove",
        "lyrics",
    })

    def __init__(
        self,
        command_handlers: Iterable[BaseSlashCommand],
        error_handler: Optional[AppCommandsErrorHandler] = None
    ):
        """
        初始化命令路由器

        Args:
            command_handlers: 命令处理器实例
            error_handler: 错误处理器
        """
        self.error_handler = error_handler or AppCommandsErrorHandler()
        self._handlers: Dict[str, CommandHandler] = {}

        for command_handler in command_handlers:
            for name, handler in command_handler.handlers().items():
                if name in self._handlers:
                    raise ValueError(f"命令重复注册: {name}")
                self._handlers[name] = handler

        missing = [name for name in COMMAND_DESCRIPTIONS if name not in self._handlers]
        if missing:
            _router_logger.warning(f"以下命令没有处理器: {', '.join(missing)}")

        _router_logger.debug(f"命令路由器已初始化 - 命令数: {len(self._handlers)}")

    @property
    def command_names(self) -> tuple:
        return tuple(self._handlers)

    def check_preconditions(self, command: Command) -> None:
        """
        前置条件检查

        Raises:
            PreconditionError: NOT_IN_VOICE 或 MISSING_PERMISSION
        """
        if command.name in self.VOICE_EXEMPT:
            return

        if command.caller_voice_channel_id is None:
            raise PreconditionError(ErrorReason.NOT_IN_VOICE, command=command.name)

        if not command.bot_can_connect_and_speak:
            raise PreconditionError(
                ErrorReason.MISSING_PERMISSION,
                command=command.name,
                voice_channel_id=command.caller_voice_channel_id
            )

    async def dispatch(self, interaction: discord.Interaction, command: Command) -> None:
        """
        分发命令

        所有异常都在这里被捕获并转换为回复。

        Args:
            interaction: Discord交互对象
            command: 命令
        """
        try:
            await self._run(interaction, command)
        except Exception as e:
            await self.error_handler.handle_error(interaction, e, command.name)

    @log_command_execution(_router_logger, name_resolver=lambda self, interaction, command: command.name)
    async def _run(self, interaction: discord.Interaction, command: Command) -> None:
        handler = self._handlers.get(command.name)
        if handler is None:
            raise RouterError(ErrorReason.UNKNOWN_COMMAND, f"Unknown command: {command.name}")

        self.check_preconditions(command)
        await handler(interaction, command)
