"""
命令对象

Slash 命令到达后由注册器转换为 Command，路由器和各处理器只依赖它和 interaction。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import discord


# 命令名 -> 描述（顺序即帮助信息中的顺序）
COMMAND_DESCRIPTIONS: Dict[str, str] = {
    "play": "Play a song or playlist",
    "pause": "Pause the current song",
    "skip": "Skip the current song",
    "stop": "Stop playback and clear the queue",
    "resume": "Resume the paused song",
    "queue": "Show the current music queue",
    "help": "Show all available music commands",
    "playlist_create": "Create a new playlist",
    "playlist_delete": "Delete a playlist",
    "playlist_add": "Add a song to a playlist",
    "playlist_remove": "Remove a song from a playlist",
    "playlist_play": "Play a saved playlist",
    "filter": "Apply an audio filter",
    "lyrics": "Fetch lyrics for the current song or a specified song",
}


@dataclass
class Command:
    """一次命令调用"""
    name: str
    caller_user_id: str
    guild_id: int
    text_channel_id: int
    caller_voice_channel_id: Optional[int] = None
    bot_can_connect_and_speak: bool = False
    args: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_interaction(cls, name: str, interaction: discord.Interaction, /, **args: Any) -> "Command":
        """
        从 Discord 交互构建命令

        Args:
            name: 命令名
            interaction: Discord交互对象
            **args: 命令参数

        Returns:
            Command 实例
        """
        voice_state = getattr(interaction.user, "voice", None)
        voice_channel = voice_state.channel if voice_state else None

        can_connect_and_speak = False
        if voice_channel is not None and interaction.guild is not None:
            permissions = voice_channel.permissions_for(interaction.guild.me)
            can_connect_and_speak = bool(permissions.connect and permissions.speak)

        return cls(
            name=name,
            caller_user_id=str(interaction.user.id),
            guild_id=interaction.guild.id if interaction.guild else 0,
            text_channel_id=interaction.channel.id if interaction.channel else 0,
            caller_voice_channel_id=voice_channel.id if voice_channel else None,
            bot_can_connect_and_speak=can_connect_and_speak,
            args={key: value for key, value in args.items() if value is not None}
        )
