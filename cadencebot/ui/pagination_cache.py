"""
分页缓存 - 多页歌词显示的短期状态

每个条目在创建后固定 ttl 秒过期（不滑动续期）：
- 事件循环运行时通过 loop.call_later 安排一次性清除
- 每次查询时再按时钟检查一次，保证定时器未触发时也不会读到过期条目

只有条目的所有者可以翻页；校验失败时不会修改已保存的页码。
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from cadencebot.core.errors import ErrorReason, PaginationError


DEFAULT_TTL = 300.0
TOKEN_PREFIX = "lyrics"


class PageDirection(str, Enum):
    """翻页方向"""
    PREV = "prev"
    NEXT = "next"


@dataclass
class PaginatedText:
    """分页文本条目"""
    chunks: Tuple[str, ...]
    title: str
    owner_user_id: str
    page: int = 0
    created_at: float = field(default=0.0)

    @property
    def page_count(self) -> int:
        return len(self.chunks)

    @property
    def current_text(self) -> str:
        return self.chunks[self.page]


@dataclass(frozen=True)
class NavigationToken:
    """
    翻页按钮的 custom_id

    格式: lyrics:<action>:<handle>:<owner>:<page>
    """
    action: PageDirection
    handle: str
    owner_user_id: str
    page: int

    def encode(self) -> str:
        return f"{TOKEN_PREFIX}:{self.action.value}:{self.handle}:{self.owner_user_id}:{self.page}"

    @classmethod
    def decode(cls, custom_id: str) -> "NavigationToken":
        """
        解析按钮 custom_id

        Args:
            custom_id: 按钮ID

        Returns:
            NavigationToken 实例

        Raises:
            PaginationError: MALFORMED_TOKEN 如果格式不正确
        """
        parts = (custom_id or "").split(":")
        if len(parts) != 5 or parts[0] != TOKEN_PREFIX:
            raise PaginationError(ErrorReason.MALFORMED_TOKEN, custom_id=custom_id)

        _, action, handle, owner, page = parts
        if not handle or not owner:
            raise PaginationError(ErrorReason.MALFORMED_TOKEN, custom_id=custom_id)

        try:
            direction = PageDirection(action)
            page_index = int(page)
        except ValueError:
            raise PaginationError(ErrorReason.MALFORMED_TOKEN, custom_id=custom_id)

        if page_index < 0:
            raise PaginationError(ErrorReason.MALFORMED_TOKEN, custom_id=custom_id)

        return cls(action=direction, handle=handle, owner_user_id=owner, page=page_index)


def is_navigation_token(custom_id: Optional[str]) -> bool:
    return bool(custom_id) and custom_id.startswith(f"{TOKEN_PREFIX}:")


class PaginationCache:
    """
    分页缓存服务

    由命令核心持有并注入到歌词命令，时钟可注入以便测试。
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        """
        初始化分页缓存

        Args:
            ttl: 条目存活时间（秒）
            clock: 单调时钟函数
        """
        if ttl <= 0:
            raise ValueError(f"ttl 必须为正数: {ttl}")

        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, PaginatedText] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self.logger = logging.getLogger("cadencebot.ui.pagination_cache")

    def create(
        self,
        owner_user_id: str,
        title: str,
        chunks: Sequence[str],
        handle: Optional[str] = None
    ) -> str:
        """
        创建分页条目

        Args:
            owner_user_id: 所有者用户ID
            title: 显示标题
            chunks: 分页文本（非空）
            handle: 条目句柄，缺省时自动生成

        Returns:
            条目句柄
        """
        if not chunks:
            raise ValueError("分页文本不能为空")

        handle = str(handle) if handle is not None else uuid.uuid4().hex
        if handle in self._entries:
            self.evict(handle)

        entry = PaginatedText(
            chunks=tuple(chunks),
            title=title,
            owner_user_id=str(owner_user_id),
            created_at=self._clock()
        )
        self._entries[handle] = entry
        self._schedule_eviction(handle, entry)

        self.logger.debug(f"创建分页条目 - 句柄: {handle}, 所有者: {owner_user_id}, 页数: {entry.page_count}")
        return handle

    def _schedule_eviction(self, handle: str, entry: PaginatedText) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # 没有运行中的事件循环时只依赖时钟检查
            return

        self._timers[handle] = loop.call_later(self.ttl, self._on_timer, handle, entry)

    def _on_timer(self, handle: str, entry: PaginatedText) -> None:
        self._timers.pop(handle, None)
        if self._entries.get(handle) is entry:
            del self._entries[handle]
            self.logger.debug(f"分页条目已过期 - 句柄: {handle}")

    def _is_expired(self, entry: PaginatedText) -> bool:
        return self._clock() - entry.created_at >= self.ttl

    def get(self, handle: str) -> Optional[PaginatedText]:
        """
        获取未过期的条目

        Returns:
            条目，不存在或已过期时返回 None
        """
        entry = self._entries.get(str(handle))
        if entry is None:
            return None

        if self._is_expired(entry):
            self.evict(handle)
            return None

        return entry

    def advance(
        self,
        handle: str,
        requester_user_id: str,
        direction: PageDirection
    ) -> Tuple[int, str]:
        """
        翻页

        Args:
            handle: 条目句柄
            requester_user_id: 点击按钮的用户ID
            direction: 翻页方向

        Returns:
            (新页码, 页面文本)

        Raises:
            PaginationError: EXPIRED 条目不存在或已过期；FORBIDDEN 请求者不是所有者
        """
        entry = self.get(handle)
        if entry is None:
            raise PaginationError(ErrorReason.EXPIRED, handle=handle)

        if str(requester_user_id) != entry.owner_user_id:
            raise PaginationError(
                ErrorReason.FORBIDDEN,
                handle=handle,
                requester=requester_user_id
            )

        direction = PageDirection(direction)
        if direction is PageDirection.NEXT:
            entry.page = min(entry.page + 1, entry.page_count - 1)
        else:
            entry.page = max(entry.page - 1, 0)

        return entry.page, entry.current_text

    def evict(self, handle: str) -> bool:
        """
        提前移除条目

        Returns:
            条目存在时返回 True
        """
        handle = str(handle)
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.cancel()
        return self._entries.pop(handle, None) is not None

    def purge_expired(self) -> int:
        """按时钟清除所有过期条目，返回清除数量"""
        expired = [handle for handle, entry in self._entries.items() if self._is_expired(entry)]
        for handle in expired:
            self.evict(handle)

        if expired:
            self.logger.debug(f"清除过期分页条目: {len(expired)}")
        return len(expired)

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, handle: object) -> bool:
        return self.get(str(handle)) is not None
