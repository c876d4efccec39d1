"""
分页缓存测试

测试歌词分页的短期状态：
- 两端饱和
- 非所有者翻页被拒绝且不修改页码
- 超过 ttl 后过期（与请求者无关）
- 翻页令牌编码与解析
"""

import asyncio

import pytest

from cadencebot.core.errors import ErrorReason, PaginationError
from cadencebot.ui.pagination_cache import (
    NavigationToken,
    PageDirection,
    PaginationCache,
    is_navigation_token
)
from fakes import FakeClock


OWNER = "67890"
OTHER = "11111"


class TestPaginationCache:
    """测试分页缓存"""

    def setup_method(self):
        self.clock = FakeClock()
        self.cache = PaginationCache(ttl=300.0, clock=self.clock)
        self.handle = self.cache.create(OWNER, "Lyrics for Song", ["page one", "page two", "page three"])

    def test_create_returns_handle(self):
        entry = self.cache.get(self.handle)

        assert entry is not None
        assert entry.page == 0
        assert entry.page_count == 3
        assert entry.owner_user_id == OWNER
        assert self.handle in self.cache

    def test_create_with_explicit_handle(self):
        handle = self.cache.create(OWNER, "Title", ["only"], handle="424242")
        assert handle == "424242"
        assert self.cache.get("424242").current_text == "only"

    def test_create_rejects_empty_chunks(self):
        with pytest.raises(ValueError):
            self.cache.create(OWNER, "Title", [])

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            PaginationCache(ttl=0)

    def test_next_saturates_at_last_page(self):
        assert self.cache.advance(self.handle, OWNER, PageDirection.NEXT) == (1, "page two")
        assert self.cache.advance(self.handle, OWNER, PageDirection.NEXT) == (2, "page three")
        assert self.cache.advance(self.handle, OWNER, PageDirection.NEXT) == (2, "page three")

    def test_prev_saturates_at_first_page(self):
        assert self.cache.advance(self.handle, OWNER, PageDirection.PREV) == (0, "page one")

        self.cache.advance(self.handle, OWNER, PageDirection.NEXT)
        assert self.cache.advance(self.handle, OWNER, "prev") == (0, "page one")

    def test_forbidden_does_not_change_page(self):
        self.cache.advance(self.handle, OWNER, PageDirection.NEXT)

        with pytest.raises(PaginationError) as exc_info:
            self.cache.advance(self.handle, OTHER, PageDirection.NEXT)

        assert exc_info.value.reason is ErrorReason.FORBIDDEN
        assert exc_info.value.user_message == "This interaction is not for you or has expired."
        assert self.cache.get(self.handle).page == 1

    def test_expired_after_ttl_for_any_requester(self):
        self.clock.advance(299)
        assert self.cache.advance(self.handle, OWNER, PageDirection.NEXT) == (1, "page two")

        self.clock.advance(1)
        for requester in (OWNER, OTHER):
            with pytest.raises(PaginationError) as exc_info:
                self.cache.advance(self.handle, requester, PageDirection.NEXT)
            assert exc_info.value.reason is ErrorReason.EXPIRED

        assert self.cache.get(self.handle) is None

    def test_expiry_is_not_sliding(self):
        self.clock.advance(200)
        self.cache.advance(self.handle, OWNER, PageDirection.NEXT)
        self.clock.advance(100)

        assert self.cache.get(self.handle) is None

    def test_unknown_handle_is_expired(self):
        with pytest.raises(PaginationError) as exc_info:
            self.cache.advance("missing", OWNER, PageDirection.NEXT)
        assert exc_info.value.reason is ErrorReason.EXPIRED

    def test_evict(self):
        assert self.cache.evict(self.handle)
        assert not self.cache.evict(self.handle)
        assert self.handle not in self.cache

    def test_purge_expired(self):
        self.clock.advance(150)
        fresh = self.cache.create(OWNER, "Fresh", ["a"])
        self.clock.advance(150)

        assert self.cache.purge_expired() == 1
        assert len(self.cache) == 1
        assert fresh in self.cache


@pytest.mark.asyncio
async def test_timer_evicts_entry():
    """测试事件循环运行时由定时器清除条目"""
    cache = PaginationCache(ttl=0.05)
    handle = cache.create(OWNER, "Title", ["a", "b"])
    assert len(cache) == 1

    await asyncio.sleep(0.1)

    assert len(cache) == 0
    assert cache.get(handle) is None


@pytest.mark.asyncio
async def test_recreated_handle_keeps_new_entry():
    cache = PaginationCache(ttl=0.05)
    cache.create(OWNER, "Old", ["a"], handle="same")
    cache.create(OWNER, "New", ["b"], handle="same")

    assert cache.get("same").title == "New"
    cache.clear()


class TestNavigationToken:
    """测试翻页令牌"""

    def test_encode(self):
        token = NavigationToken(PageDirection.NEXT, "424242", OWNER, 1)
        assert token.encode() == "lyrics:next:424242:67890:1"

    def test_decode(self):
        token = NavigationToken.decode("lyrics:prev:424242:67890:2")

        assert token.action is PageDirection.PREV
        assert token.handle == "424242"
        assert token.owner_user_id == OWNER
        assert token.page == 2

    @pytest.mark.parametrize("custom_id", [
        "",
        "lyrics:next:424242:67890",
        "queue:next:424242:67890:1",
        "lyrics:jump:424242:67890:1",
        "lyrics:next::67890:1",
        "lyrics:next:424242:67890:one",
        "lyrics:next:424242:67890:-1",
        "lyrics:next:424242:67890:1:extra",
    ])
    def test_decode_rejects_malformed(self, custom_id):
        with pytest.raises(PaginationError) as exc_info:
            NavigationToken.decode(custom_id)
        assert exc_info.value.reason is ErrorReason.MALFORMED_TOKEN

    def test_is_navigation_token(self):
        assert is_navigation_token("lyrics:next:1:2:0")
        assert not is_navigation_token("other:button")
        assert not is_navigation_token(None)
