"""
App Commands Core Infrastructure

提供Slash Commands的核心基础设施，包括：
- 基础命令类和命令对象
- 命令路由器
- 依赖注入容器
- 命令注册系统
- 错误处理和日志
"""

from .command import COMMAND_DESCRIPTIONS, Command
from .base_command import BaseSlashCommand
from .dependency_container import DependencyContainer, ServiceProvider
from .logging_config import AppCommandsLogger, log_command_execution
from .error_handler import AppCommandsErrorHandler, ErrorCategory
from .command_router import CommandRouter
from .registry import CommandRegistry

__all__ = [
    'COMMAND_DESCRIPTIONS',
    'Command',
    'BaseSlashCommand',
    'DependencyContainer',
    'ServiceProvider',
    'AppCommandsLogger',
    'log_command_execution',
    'AppCommandsErrorHandler',
    'ErrorCategory',
    'CommandRouter',
    'CommandRegistry'
]
