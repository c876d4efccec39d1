"""CadenceBot 音乐机器人主实现"""
import logging
from typing import Optional
import discord
from discord.ext import commands

from cadencebot.app_commands.integration import setup_app_commands
from cadencebot.audio.session_registry import WavelinkAudioClient
from cadencebot.playlist.playlist_store import JsonPlaylistStore
from cadencebot.utils.config_manager import ConfigManager


class CadenceBot:
    """
    CadenceBot 音乐机器人主实现类。

    - 通过 Lavalink 节点播放音乐
    - 每个用户独立的持久化歌单
    - 音频滤镜
    - 分页歌词显示
    """

    def __init__(self, config: ConfigManager):
        """
        Initialize the Discord bot with the Slash Commands architecture.

        Args:
            config: Configuration manager
        """
        self.logger = logging.getLogger("cadencebot.bot")
        self.config = config

        intents = discord.Intents.default()
        intents.voice_states = True

        self.bot = commands.Bot(
            command_prefix=self.config.get_command_prefix(),
            intents=intents,
            help_command=None
        )

        self._init_core_modules()

        self.bot.add_listener(self._on_ready, 'on_ready')

        self.logger.info("🎵 音乐机器人初始化成功")

    def _init_core_modules(self) -> None:
        """初始化音频客户端和歌单存储"""
        try:
            self.audio_client = WavelinkAudioClient(self.bot, self.config)
            self.audio_client.register_listeners()

            self.playlist_store = JsonPlaylistStore(self.config.get_playlist_file())

            self.logger.info("✅ 核心模块初始化完成")

        except Exception as e:
            self.logger.error(f"❌ 核心模块初始化失败: {e}", exc_info=True)
            raise RuntimeError(f"核心模块初始化失败: {e}") from e

    async def _init_slash_commands(self) -> None:
        """初始化 Slash Commands 系统"""
        try:
            self.logger.debug("🔧 开始初始化 Slash Commands...")

            self.app_commands_integration = await setup_app_commands(
                bot=self.bot,
                config=self.config,
                audio_client=self.audio_client,
                playlist_store=self.playlist_store
            )

            self.logger.info("✅ Slash Commands 初始化完成")

        except Exception as e:
            self.logger.error(f"❌ Slash Commands 初始化失败: {e}", exc_info=True)
            raise RuntimeError(f"Slash Commands 初始化失败: {e}") from e

    async def _on_ready(self) -> None:
        """机器人就绪时的初始化任务"""
        try:
            self.logger.info(f"🤖 机器人已就绪: {self.bot.user}")

            await self.audio_client.connect_nodes()

            # on_ready 可能因重连多次触发
            if hasattr(self, 'app_commands_integration'):
                return

            await self._init_slash_commands()

            await self.app_commands_integration.sync_commands(self.config.get_sync_guild_id())
            self.logger.info("✅ Slash Commands 已同步到 Discord")

        except Exception as e:
            self.logger.error(f"机器人就绪初始化失败: {e}", exc_info=True)

    async def start(self, token: str) -> None:
        """
        Start the Discord bot.

        Args:
            token: Discord bot token
        """
        try:
            self.logger.info("🚀 启动音乐机器人...")
            await self.bot.start(token)
        except Exception as e:
            self.logger.error(f"启动机器人失败: {e}", exc_info=True)
            raise

    async def close(self) -> None:
        """关闭 Discord 机器人并清理资源。"""
        try:
            self.logger.info("🛑 正在关闭音乐机器人...")
            self.logger.info(f"📊 运行统计: {self.get_stats()}")

            if hasattr(self, 'app_commands_integration'):
                await self.app_commands_integration.cleanup()

            await self.bot.close()
            self.logger.info("✅ 音乐机器人关闭成功")
        except Exception as e:
            self.logger.error(f"关闭过程中发生错误: {e}", exc_info=True)

    def run(self, token: str) -> None:
        """
        运行 Discord 机器人（阻塞式）。

        Args:
            token: Discord 机器人令牌
        """
        try:
            self.bot.run(token, log_handler=None)
        except KeyboardInterrupt:
            self.logger.info("用户停止了机器人")
        except Exception as e:
            self.logger.error(f"机器人崩溃: {e}", exc_info=True)
            raise

    def get_stats(self) -> dict:
        """
        获取机器人统计信息。

        Returns:
            包含机器人统计信息的字典
        """
        stats = {
            "bot_ready": self.bot.is_ready(),
            "guild_count": len(self.bot.guilds),
            "user_count": sum(guild.member_count or 0 for guild in self.bot.guilds),
            "slash_commands_enabled": hasattr(self, 'app_commands_integration'),
            "active_sessions": sum(
                1 for guild in self.bot.guilds
                if self.audio_client.get_session(guild.id) is not None
            )
        }

        if hasattr(self, 'app_commands_integration'):
            stats["command_errors"] = self.app_commands_integration.error_handler.get_error_stats()

        return stats

    def get_registered_commands(self) -> dict:
        """
        获取已注册的 Slash Commands 列表。

        Returns:
            已注册命令的字典
        """
        if hasattr(self, 'app_commands_integration'):
            commands_list = self.app_commands_integration.command_registry.get_registered_commands()
            return {"slash_commands": commands_list, "command_count": len(commands_list)}
        return {"slash_commands": [], "command_count": 0}

    def is_ready(self) -> bool:
        return self.bot.is_ready()

    @property
    def user(self) -> Optional[discord.ClientUser]:
        """获取机器人用户。"""
        return self.bot.user
