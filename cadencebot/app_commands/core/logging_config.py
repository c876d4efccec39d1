"""
App Commands日志配置

提供统一的日志配置和管理：
- 结构化日志记录
- 性能监控
- 错误追踪
"""

import logging
import time
import functools
from typing import Any, Callable, Optional
import discord

from cadencebot.core.errors import CadenceError


class AppCommandsLogger:
    """
    App Commands专用日志记录器

    提供结构化的日志记录和性能监控功能
    """

    def __init__(self, name: str):
        """
        初始化日志记录器

        Args:
            name: 日志记录器名称
        """
        self.logger = logging.getLogger(f"cadencebot.app_commands.{name}")

    @staticmethod
    def _base_context(interaction: discord.Interaction, command_name: str) -> dict:
        return {
            'user_id': interaction.user.id,
            'user_name': interaction.user.display_name,
            'guild_id': interaction.guild.id if interaction.guild else None,
            'command': command_name
        }

    def log_command_start(
        self,
        interaction: discord.Interaction,
        command_name: str,
        **kwargs
    ) -> None:
        """
        记录命令开始执行

        Args:
            interaction: Discord交互对象
            command_name: 命令名称
            **kwargs: 额外的上下文信息
        """
        context = {
            **self._base_context(interaction, command_name),
            'guild_name': interaction.guild.name if interaction.guild else None,
            'channel_id': interaction.channel.id if interaction.channel else None,
            'timestamp': time.time(),
            **kwargs
        }

        self.logger.info(
            f"命令开始 - {command_name} | "
            f"用户: {interaction.user.display_name} | "
            f"服务器: {interaction.guild.name if interaction.guild else 'DM'}",
            extra={'context': context}
        )

    def log_command_success(
        self,
        interaction: discord.Interaction,
        command_name: str,
        execution_time: Optional[float] = None,
        **kwargs
    ) -> None:
        """
        记录命令成功执行

        Args:
            interaction: Discord交互对象
            command_name: 命令名称
            execution_time: 执行时间（秒）
            **kwargs: 额外的上下文信息
        """
        context = {
            **self._base_context(interaction, command_name),
            'execution_time': execution_time,
            'status': 'success',
            **kwargs
        }

        time_info = f" | 耗时: {execution_time:.2f}s" if execution_time else ""

        self.logger.info(
            f"命令成功 - {command_name} | "
            f"用户: {interaction.user.display_name}{time_info}",
            extra={'context': context}
        )

    def log_command_rejected(
        self,
        interaction: discord.Interaction,
        command_name: str,
        error: CadenceError,
        **kwargs
    ) -> None:
        """
        记录被业务规则拒绝的命令（前置条件、状态、未找到等）

        Args:
            interaction: Discord交互对象
            command_name: 命令名称
            error: 业务错误
            **kwargs: 额外的上下文信息
        """
        context = {
            **self._base_context(interaction, command_name),
            'reason': error.reason.value,
            'status': 'rejected',
            **error.context,
            **kwargs
        }

        self.logger.info(
            f"命令被拒绝 - {command_name} | "
            f"用户: {interaction.user.display_name} | "
            f"原因: {error.reason.value}",
            extra={'context': context}
        )

    def log_command_error(
        self,
        interaction: discord.Interaction,
        command_name: str,
        error: Exception,
        execution_time: Optional[float] = None,
        exc_info: bool = True,
        **kwargs
    ) -> None:
        """
        记录命令执行错误

        Args:
            interaction: Discord交互对象
            command_name: 命令名称
            error: 异常对象
            execution_time: 执行时间（秒）
            exc_info: 是否附带堆栈
            **kwargs: 额外的上下文信息
        """
        context = {
            **self._base_context(interaction, command_name),
            'error_type': type(error).__name__,
            'error_message': str(error),
            'execution_time': execution_time,
            'status': 'error',
            **kwargs
        }

        time_info = f" | 耗时: {execution_time:.2f}s" if execution_time else ""

        self.logger.error(
            f"命令错误 - {command_name} | "
            f"用户: {interaction.user.display_name} | "
            f"错误: {type(error).__name__}: {error}{time_info}",
            extra={'context': context},
            exc_info=error if exc_info else None
        )

    def log_performance_warning(
        self,
        operation: str,
        execution_time: float,
        threshold: float = 5.0,
        **kwargs
    ) -> None:
        """
        记录性能警告

        Args:
            operation: 操作名称
            execution_time: 执行时间（秒）
            threshold: 警告阈值（秒）
            **kwargs: 额外的上下文信息
        """
        if execution_time > threshold:
            context = {
                'operation': operation,
                'execution_time': execution_time,
                'threshold': threshold,
                'performance_issue': True,
                **kwargs
            }

            self.logger.warning(
                f"性能警告 - {operation} | "
                f"耗时: {execution_time:.2f}s (阈值: {threshold}s)",
                extra={'context': context}
            )

    def debug(self, message: str, **kwargs) -> None:
        """记录调试信息"""
        self.logger.debug(message, extra={'context': kwargs})

    def info(self, message: str, **kwargs) -> None:
        """记录信息"""
        self.logger.info(message, extra={'context': kwargs})

    def warning(self, message: str, **kwargs) -> None:
        """记录警告"""
        self.logger.warning(message, extra={'context': kwargs})

    def error(self, message: str, error: Optional[Exception] = None, **kwargs) -> None:
        """记录错误"""
        self.logger.error(message, extra={'context': kwargs}, exc_info=error)


def log_command_execution(
    logger: AppCommandsLogger,
    name_resolver: Optional[Callable[..., str]] = None
):
    """
    命令执行日志装饰器

    Args:
        logger: 日志记录器实例
        name_resolver: 根据被装饰函数的参数解析命令名称，缺省使用函数名

    Returns:
        装饰器函数
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            # 查找interaction参数
            interaction = next((arg for arg in args if isinstance(arg, discord.Interaction)), None)

            if not interaction:
                return await func(*args, **kwargs)

            command_name = name_resolver(*args, **kwargs) if name_resolver else func.__name__
            start_time = time.time()

            try:
                logger.log_command_start(interaction, command_name)

                result = await func(*args, **kwargs)

                execution_time = time.time() - start_time
                logger.log_command_success(interaction, command_name, execution_time)
                logger.log_performance_warning(command_name, execution_time)

                return result

            except CadenceError as e:
                logger.log_command_rejected(interaction, command_name, e)
                raise

            except Exception as e:
                execution_time = time.time() - start_time
                # 堆栈由错误处理器记录
                logger.log_command_error(interaction, command_name, e, execution_time, exc_info=False)
                raise

        return wrapper
    return decorator
