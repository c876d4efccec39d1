"""
UI状态模块

提供与 Discord 组件无关的界面状态：
- 分页缓存
- 翻页按钮令牌
"""

from .pagination_cache import (
    DEFAULT_TTL,
    NavigationToken,
    PageDirection,
    PaginatedText,
    PaginationCache,
    is_navigation_token
)

__all__ = [
    'DEFAULT_TTL',
    'NavigationToken',
    'PageDirection',
    'PaginatedText',
    'PaginationCache',
    'is_navigation_token'
]
