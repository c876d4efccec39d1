"""
命令注册系统

提供Slash命令的注册和管理功能：
- 命令注册
- 命令树同步
- 生命周期管理

每个Slash命令的回调只负责把交互转换为 Command 并交给路由器。
"""

import logging
from typing import Any, Optional
import discord
from discord import app_commands
from discord.ext import commands

from cadencebot.audio.filter_presets import FILTER_PRESETS
from .command import COMMAND_DESCRIPTIONS, Command
from .command_router import CommandRouter
from .dependency_container import ServiceProvider


FILTER_CHOICES = [
    app_commands.Choice(name=preset.label, value=preset.name.value)
    for preset in FILTER_PRESETS.values()
]


class CommandRegistry:
    """
    命令注册器

    管理所有Slash命令的注册和生命周期
    """

    def __init__(self, bot: commands.Bot, service_provider: ServiceProvider, router: CommandRouter):
        """
        初始化命令注册器

        Args:
            bot: Discord机器人实例
            service_provider: 服务提供者
            router: 命令路由器
        """
        self.bot = bot
        self.service_provider = service_provider
        self.router = router
        self.logger = logging.getLogger("cadencebot.app_commands.registry")

        self.logger.debug("命令注册器已初始化")

    def register_all(self) -> None:
        """注册全部Slash命令"""
        self.register_music_commands()
        self.register_playlist_commands()
        self.register_general_commands()

    def register_music_commands(self) -> None:
        """注册音乐相关的Slash命令"""
        try:
            self._register_play_command()
            self._register_playback_commands()
            self._register_filter_command()
            self._register_lyrics_command()

            self.logger.info("音乐命令已注册")

        except Exception as e:
            self.logger.error(f"注册音乐命令失败: {e}", exc_info=True)
            raise

    def register_playlist_commands(self) -> None:
        """注册歌单命令"""
        try:
            self._register_playlist_commands()
            self.logger.info("歌单命令已注册")

        except Exception as e:
            self.logger.error(f"注册歌单命令失败: {e}", exc_info=True)
            raise

    def register_general_commands(self) -> None:
        """注册通用命令"""
        try:
            self._register_help_command()
            self.logger.info("通用命令已注册")

        except Exception as e:
            self.logger.error(f"注册通用命令失败: {e}", exc_info=True)
            raise

    async def _dispatch(self, interaction: discord.Interaction, name: str, /, **args: Any) -> None:
        """构建命令并交给路由器"""
        try:
            command = Command.from_interaction(name, interaction, **args)
        except Exception as e:
            self.logger.error(f"构建命令失败: {name} - {e}", exc_info=True)
            await self._send_error_response(interaction, "An error occurred while executing the command.")
            return

        await self.router.dispatch(interaction, command)

    def _register_play_command(self) -> None:
        """注册点歌命令"""
        @self.bot.tree.command(name="play", description=COMMAND_DESCRIPTIONS["play"])
        @app_commands.describe(query="The song or playlist to play")
        async def play(interaction: discord.Interaction, query: str):
            await self._dispatch(interaction, "play", query=query)

    def _register_playback_commands(self) -> None:
        """注册播放控制命令"""
        @self.bot.tree.command(name="pause", description=COMMAND_DESCRIPTIONS["pause"])
        async def pause(interaction: discord.Interaction):
            await self._dispatch(interaction, "pause")

        @self.bot.tree.command(name="skip", description=COMMAND_DESCRIPTIONS["skip"])
        async def skip(interaction: discord.Interaction):
            await self._dispatch(interaction, "skip")

        @self.bot.tree.command(name="stop", description=COMMAND_DESCRIPTIONS["stop"])
        async def stop(interaction: discord.Interaction):
            await self._dispatch(interaction, "stop")

        @self.bot.tree.command(name="resume", description=COMMAND_DESCRIPTIONS["resume"])
        async def resume(interaction: discord.Interaction):
            await self._dispatch(interaction, "resume")

        @self.bot.tree.command(name="queue", description=COMMAND_DESCRIPTIONS["queue"])
        async def queue(interaction: discord.Interaction):
            await self._dispatch(interaction, "queue")

    def _register_filter_command(self) -> None:
        """注册滤镜命令"""
        @self.bot.tree.command(name="filter", description=COMMAND_DESCRIPTIONS["filter"])
        @app_commands.describe(filter="The filter to apply")
        @app_commands.choices(filter=FILTER_CHOICES)
        async def filter_command(interaction: discord.Interaction, filter: str):
            await self._dispatch(interaction, "filter", filter=filter)

    def _register_lyrics_command(self) -> None:
        """注册歌词命令"""
        @self.bot.tree.command(name="lyrics", description=COMMAND_DESCRIPTIONS["lyrics"])
        @app_commands.describe(query="The song to search lyrics for (optional)")
        async def lyrics(interaction: discord.Interaction, query: Optional[str] = None):
            await self._dispatch(interaction, "lyrics", query=query)

    def _register_playlist_commands(self) -> None:
        @self.bot.tree.command(name="playlist_create", description=COMMAND_DESCRIPTIONS["playlist_create"])
        @app_commands.describe(name="The name of the playlist")
        async def playlist_create(interaction: discord.Interaction, name: str):
            await self._dispatch(interaction, "playlist_create", name=name)

        @self.bot.tree.command(name="playlist_delete", description=COMMAND_DESCRIPTIONS["playlist_delete"])
        @app_commands.describe(name="The name of the playlist")
        async def playlist_delete(interaction: discord.Interaction, name: str):
            await self._dispatch(interaction, "playlist_delete", name=name)

        @self.bot.tree.command(name="playlist_add", description=COMMAND_DESCRIPTIONS["playlist_add"])
        @app_commands.describe(name="The name of the playlist", query="The song to add")
        async def playlist_add(interaction: discord.Interaction, name: str, query: str):
            await self._dispatch(interaction, "playlist_add", name=name, query=query)

        @self.bot.tree.command(name="playlist_remove", description=COMMAND_DESCRIPTIONS["playlist_remove"])
        @app_commands.describe(name="The name of the playlist", index="The position of the song to remove")
        async def playlist_remove(
            interaction: discord.Interaction,
            name: str,
            index: app_commands.Range[int, 1]
        ):
            await self._dispatch(interaction, "playlist_remove", name=name, index=index)

        @self.bot.tree.command(name="playlist_play", description=COMMAND_DESCRIPTIONS["playlist_play"])
        @app_commands.describe(name="The name of the playlist")
        async def playlist_play(interaction: discord.Interaction, name: str):
            await self._dispatch(interaction, "playlist_play", name=name)

    def _register_help_command(self) -> None:
        """注册帮助命令"""
        @self.bot.tree.command(name="help", description=COMMAND_DESCRIPTIONS["help"])
        async def help_command(interaction: discord.Interaction):
            await self._dispatch(interaction, "help")

    async def _send_error_response(self, interaction: discord.Interaction, message: str) -> None:
        """
        发送错误响应

        Args:
            interaction: Discord交互对象
            message: 错误消息
        """
        embed = discord.Embed(
            title="❌ Error",
            description=message,
            color=discord.Color.red()
        )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            self.logger.error(f"发送错误响应失败: {e}")

    async def sync_commands(self, guild: Optional[discord.abc.Snowflake] = None) -> None:
        """
        同步命令到Discord

        Args:
            guild: 可选的服务器对象，如果为None则全局同步
        """
        try:
            if guild:
                self.bot.tree.copy_global_to(guild=guild)
                synced = await self.bot.tree.sync(guild=guild)
                self.logger.info(f"已同步 {len(synced)} 个命令到服务器 {guild.id}")
            else:
                synced = await self.bot.tree.sync()
                self.logger.info(f"已全局同步 {len(synced)} 个命令")

        except Exception as e:
            self.logger.error(f"同步命令失败: {e}", exc_info=True)
            raise

    def get_registered_commands(self) -> list:
        return [command.name for command in self.bot.tree.get_commands()]

    def unregister_all(self) -> None:
        """注销所有命令"""
        try:
            self.bot.tree.clear_commands(guild=None)
            self.logger.info("所有命令已注销")

        except Exception as e:
            self.logger.error(f"注销命令失败: {e}", exc_info=True)
