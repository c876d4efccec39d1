"""
CadenceBot Slash Commands Module

按领域组织的Discord Slash Commands实现：
音乐播放、队列、歌单、滤镜和歌词。
"""

from .core import (
    BaseSlashCommand,
    Command,
    CommandRegistry,
    CommandRouter,
    DependencyContainer
)

from .music import (
    PlaybackControlCommands,
    QueueManagementCommands,
    PlaylistCommands,
    LyricsCommands
)

from .general import HelpCommand

from .ui import (
    EmbedBuilder,
    MessageVisibility,
    LyricsPageView
)

from .integration import AppCommandsIntegration, setup_app_commands

__all__ = [
    # Core infrastructure
    'BaseSlashCommand',
    'Command',
    'CommandRegistry',
    'CommandRouter',
    'DependencyContainer',

    # Music domain commands
    'PlaybackControlCommands',
    'QueueManagementCommands',
    'PlaylistCommands',
    'LyricsCommands',

    # General commands
    'HelpCommand',

    # UI components
    'EmbedBuilder',
    'MessageVisibility',
    'LyricsPageView',

    'AppCommandsIntegration',
    'setup_app_commands'
]
