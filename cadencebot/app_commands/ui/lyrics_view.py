"""
歌词翻页视图

按钮本身不带回调，custom_id 携带翻页令牌，由 on_interaction 监听器统一分发。
视图超时后按下按钮仍会收到"已过期"回复。
"""

import discord

from cadencebot.ui.pagination_cache import NavigationToken, PageDirection


class LyricsPageView(discord.ui.View):
    """歌词翻页视图（Previous / Next）"""

    def __init__(
        self,
        handle: str,
        owner_user_id: str,
        page: int,
        page_count: int,
        timeout: float = 300.0
    ):
        super().__init__(timeout=timeout)

        self.previous_button = discord.ui.Button(
            label="Previous",
            style=discord.ButtonStyle.primary,
            custom_id=NavigationToken(PageDirection.PREV, handle, str(owner_user_id), page).encode(),
            disabled=page <= 0
        )
        self.add_item(self.previous_button)

        self.next_button = discord.ui.Button(
            label="Next",
            style=discord.ButtonStyle.primary,
            custom_id=NavigationToken(PageDirection.NEXT, handle, str(owner_user_id), page).encode(),
            disabled=page >= page_count - 1
        )
        self.add_item(self.next_button)
