"""
歌词命令实现

获取歌词并以分页嵌入消息显示，翻页按钮由 handle_navigation 处理。
"""

from typing import Optional
import discord

from cadencebot.core.errors import ErrorReason, NotFoundError
from cadencebot.core.interfaces import IAudioClient
from cadencebot.lyrics.lyrics_manager import LyricsManager, lyrics_title
from cadencebot.ui.pagination_cache import NavigationToken, PaginationCache
from cadencebot.utils.config_manager import ConfigManager
from ..core.base_command import BaseSlashCommand
from ..core.command import Command
from ..core.error_handler import AppCommandsErrorHandler
from ..ui import EmbedBuilder, LyricsPageView, MessageType


class LyricsCommands(BaseSlashCommand):
    """
    歌词命令处理器

    每条歌词消息在分页缓存中对应一个条目，句柄为原始交互ID。
    """

    def __init__(
        self,
        config: ConfigManager,
        audio_client: IAudioClient,
        lyrics_manager: LyricsManager,
        pagination_cache: PaginationCache,
        error_handler: Optional[AppCommandsErrorHandler] = None
    ):
        """
        初始化歌词命令

        Args:
            config: 配置管理器
            audio_client: 音频节点客户端
            lyrics_manager: 歌词管理器
            pagination_cache: 分页缓存
            error_handler: 翻页错误使用的错误处理器
        """
        super().__init__(config, audio_client)
        self.lyrics_manager = lyrics_manager
        self.pagination_cache = pagination_cache
        self.error_handler = error_handler or AppCommandsErrorHandler()
        self.logger.debug("歌词命令已初始化")

    @property
    def command_names(self) -> tuple:
        return ("lyrics",)

    async def handle_lyrics(self, interaction: discord.Interaction, command: Command) -> None:
        """
        处理歌词命令

        有查询时按查询标题搜索；否则使用当前播放歌曲的标题和艺术家。
        """
        query = command.args.get("query")
        if query:
            title, artist = query, ""
        else:
            session = self.audio_client.get_session(command.guild_id)
            current = session.current if session else None
            if current is None:
                raise NotFoundError(ErrorReason.NOTHING_TO_LOOK_UP, guild_id=command.guild_id)
            title, artist = current.title, current.author

        await self.defer(interaction)

        pages = await self.lyrics_manager.fetch_pages(title, artist)
        heading = lyrics_title(title, artist)

        handle = self.pagination_cache.create(
            command.caller_user_id,
            heading,
            pages,
            handle=str(interaction.id)
        )

        embed = EmbedBuilder.create_lyrics_embed(heading, pages[0], 0, len(pages))
        view = LyricsPageView(
            handle,
            command.caller_user_id,
            page=0,
            page_count=len(pages),
            timeout=self.pagination_cache.ttl
        )

        await self.send_info_response(interaction, embed, MessageType.LYRICS, view=view)
        self.logger.info(f"歌词已发送 - {heading}, 共 {len(pages)} 页")

    async def handle_navigation(self, interaction: discord.Interaction) -> None:
        """
        处理翻页按钮

        只有歌词消息的发起者可以翻页；条目过期或令牌无效时回复错误且不修改消息。

        Args:
            interaction: 按钮交互对象
        """
        custom_id = (interaction.data or {}).get("custom_id", "")

        try:
            token = NavigationToken.decode(custom_id)
            page, text = self.pagination_cache.advance(token.handle, str(interaction.user.id), token.action)
            entry = self.pagination_cache.get(token.handle)

            embed = EmbedBuilder.create_lyrics_embed(entry.title, text, page, entry.page_count)
            view = LyricsPageView(
                token.handle,
                entry.owner_user_id,
                page=page,
                page_count=entry.page_count,
                timeout=self.pagination_cache.ttl
            )

            await interaction.response.edit_message(embed=embed, view=view)
            self.logger.debug(f"歌词翻页 - 句柄: {token.handle}, 页码: {page + 1}/{entry.page_count}")

        except Exception as e:
            await self.error_handler.handle_error(interaction, e, "lyrics_navigation")
