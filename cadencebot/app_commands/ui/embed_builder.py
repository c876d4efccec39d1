"""
嵌入消息构建器

提供统一的嵌入消息构建功能：
- 标准化的消息格式
- 主题色彩管理
- 队列、正在播放、歌词、帮助等消息模板
"""

import discord
from typing import Iterable, List, Tuple

from cadencebot.core.interfaces import ResolvedTrack


class EmbedBuilder:
    """
    嵌入消息构建器

    提供统一的嵌入消息构建方法，确保UI一致性
    """

    # 主题色彩
    COLORS = {
        'success': discord.Color.green(),
        'error': discord.Color.red(),
        'warning': discord.Color.orange(),
        'info': discord.Color.blue(),
        'lyrics': discord.Color(0xFF7A00),
        'neutral': discord.Color.light_grey()
    }

    @classmethod
    def create_success_embed(cls, title: str, description: str) -> discord.Embed:
        """
        创建成功消息嵌入

        Args:
            title: 标题
            description: 描述

        Returns:
            Discord嵌入消息
        """
        return discord.Embed(
            title=f"✅ {title}",
            description=description,
            color=cls.COLORS['success']
        )

    @classmethod
    def create_error_embed(cls, title: str, description: str) -> discord.Embed:
        """
        创建错误消息嵌入

        Args:
            title: 标题
            description: 描述

        Returns:
            Discord嵌入消息
        """
        return discord.Embed(
            title=f"❌ {title}",
            description=description,
            color=cls.COLORS['error']
        )

    @classmethod
    def create_warning_embed(cls, title: str, description: str) -> discord.Embed:
        return discord.Embed(
            title=f"⚠️ {title}",
            description=description,
            color=cls.COLORS['warning']
        )

    @classmethod
    def create_info_embed(cls, title: str, description: str) -> discord.Embed:
        return discord.Embed(
            title=f"ℹ️ {title}",
            description=description,
            color=cls.COLORS['info']
        )

    @classmethod
    def create_queue_embed(cls, tracks: List[ResolvedTrack]) -> discord.Embed:
        """
        创建队列显示嵌入

        Args:
            tracks: 即将播放的歌曲（最多10首）

        Returns:
            Discord嵌入消息
        """
        lines = [
            f"{index}. **{track.title}** by {track.author} [{cls.format_duration(track.length_ms)}]"
            for index, track in enumerate(tracks, start=1)
        ]

        embed = discord.Embed(
            title="🎵 Current Queue",
            description="\n".join(lines) or "No tracks in queue.",
            color=cls.COLORS['info']
        )
        embed.set_footer(text="Showing up to 10 tracks")
        return embed

    @classmethod
    def create_now_playing_embed(cls, track: ResolvedTrack) -> discord.Embed:
        """
        创建正在播放嵌入

        Args:
            track: 开始播放的歌曲

        Returns:
            Discord嵌入消息
        """
        embed = discord.Embed(
            title="🎶 Now Playing",
            description=f"**{track.title}** by {track.author}",
            url=track.uri or None,
            color=cls.COLORS['info']
        )
        embed.add_field(name="Duration", value=cls.format_duration(track.length_ms))

        if track.artwork:
            embed.set_thumbnail(url=track.artwork)

        return embed

    @classmethod
    def create_lyrics_embed(
        cls,
        title: str,
        text: str,
        page: int,
        page_count: int
    ) -> discord.Embed:
        """
        创建歌词分页嵌入

        Args:
            title: 标题（"Lyrics for ..."）
            text: 当前页文本
            page: 从0开始的页码
            page_count: 总页数

        Returns:
            Discord嵌入消息
        """
        embed = discord.Embed(
            title=title,
            description=text or "No lyrics available.",
            color=cls.COLORS['lyrics']
        )
        embed.set_footer(text=f"Page {page + 1} of {page_count}")
        embed.timestamp = discord.utils.utcnow()
        return embed

    @classmethod
    def create_help_embed(cls, commands: Iterable[Tuple[str, str]]) -> discord.Embed:
        """
        创建帮助嵌入

        Args:
            commands: (命令名, 描述) 序列

        Returns:
            Discord嵌入消息
        """
        embed = discord.Embed(
            title="Music Bot Commands",
            description="List of all available commands and their descriptions.",
            color=cls.COLORS['lyrics']
        )

        for name, description in commands:
            embed.add_field(name=f"/{name}", value=description, inline=False)

        embed.set_footer(text="Use /command for specific usage details")
        embed.timestamp = discord.utils.utcnow()
        return embed

    @staticmethod
    def format_duration(length_ms: int) -> str:
        """
        格式化时长为 mm:ss

        分钟数不按小时折叠，超过一小时的歌曲显示为 75:00 这样的形式。

        Args:
            length_ms: 时长（毫秒）

        Returns:
            格式化的时长字符串
        """
        total_seconds = max(0, int(length_ms or 0)) // 1000
        minutes, seconds = divmod(total_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"
