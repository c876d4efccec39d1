"""
歌单存储测试

测试 JSON 文件歌单存储：
- 创建 / 删除 / 重新创建
- 追加与按位置删除
- 越界删除不修改文件
- 文件缺失时自动初始化
"""

import json

import pytest

from cadencebot.core.errors import ErrorReason, NotFoundError
from cadencebot.core.interfaces import TrackRef
from cadencebot.playlist.playlist_store import JsonPlaylistStore


USER = "67890"


def track(title: str) -> TrackRef:
    return TrackRef(title=title, author="Artist", uri=f"https://music.example.com/{title}", length_ms=200000)


@pytest.mark.asyncio
async def test_missing_file_is_initialized(tmp_path):
    """测试文件不存在时初始化为空文档"""
    path = tmp_path / "nested" / "playlists.json"
    store = JsonPlaylistStore(str(path))

    assert not await store.exists(USER, "road trip")
    assert json.loads(path.read_text(encoding="utf-8")) == {}


@pytest.mark.asyncio
async def test_create_list_delete_recreate(playlist_store):
    await playlist_store.create(USER, "road trip")
    assert await playlist_store.exists(USER, "road trip")
    assert await playlist_store.list(USER, "road trip") == []

    await playlist_store.delete(USER, "road trip")
    assert not await playlist_store.exists(USER, "road trip")

    await playlist_store.create(USER, "road trip")
    assert await playlist_store.exists(USER, "road trip")


@pytest.mark.asyncio
async def test_create_duplicate_fails(playlist_store):
    await playlist_store.create(USER, "mix")

    with pytest.raises(NotFoundError) as exc_info:
        await playlist_store.create(USER, "mix")

    assert exc_info.value.reason is ErrorReason.PLAYLIST_EXISTS
    assert exc_info.value.user_message == "Playlist **mix** already exists!"


@pytest.mark.asyncio
async def test_delete_absent_fails(playlist_store):
    with pytest.raises(NotFoundError) as exc_info:
        await playlist_store.delete(USER, "ghost")

    assert exc_info.value.reason is ErrorReason.PLAYLIST_ABSENT
    assert exc_info.value.user_message == "Playlist **ghost** does not exist!"


@pytest.mark.asyncio
async def test_playlists_are_scoped_per_user(playlist_store):
    await playlist_store.create(USER, "mix")

    assert not await playlist_store.exists("11111", "mix")
    await playlist_store.create("11111", "mix")
    assert await playlist_store.exists("11111", "mix")


@pytest.mark.asyncio
async def test_append_and_remove_at(playlist_store):
    """测试追加与删除往返"""
    await playlist_store.create(USER, "mix")

    assert await playlist_store.append(USER, "mix", track("one")) == 1
    assert await playlist_store.append(USER, "mix", track("two")) == 2

    tracks = await playlist_store.list(USER, "mix")
    assert [t.title for t in tracks] == ["one", "two"]

    removed = await playlist_store.remove_at(USER, "mix", 0)
    assert removed == track("one")
    assert [t.title for t in await playlist_store.list(USER, "mix")] == ["two"]


@pytest.mark.asyncio
async def test_remove_out_of_range_does_not_mutate(playlist_store):
    await playlist_store.create(USER, "mix")
    await playlist_store.append(USER, "mix", track("one"))
    before = playlist_store.file_path.read_text(encoding="utf-8")

    for index in (1, 5, -1):
        with pytest.raises(NotFoundError) as exc_info:
            await playlist_store.remove_at(USER, "mix", index)
        assert exc_info.value.reason is ErrorReason.TRACK_INDEX_OUT_OF_RANGE

    assert exc_info.value.user_message == "Invalid song index. Playlist **mix** has 1 songs."
    assert playlist_store.file_path.read_text(encoding="utf-8") == before


@pytest.mark.asyncio
async def test_file_layout(playlist_store):
    """测试文件结构：用户ID -> 歌单名 -> 歌曲数组"""
    await playlist_store.create(USER, "mix")
    await playlist_store.append(USER, "mix", track("one"))

    data = json.loads(playlist_store.file_path.read_text(encoding="utf-8"))
    assert data == {
        USER: {
            "mix": [
                {
                    "title": "one",
                    "author": "Artist",
                    "uri": "https://music.example.com/one",
                    "length": 200000
                }
            ]
        }
    }


@pytest.mark.asyncio
async def test_hand_written_document_is_valid(tmp_path):
    path = tmp_path / "playlists.json"
    path.write_text("{}", encoding="utf-8")
    store = JsonPlaylistStore(str(path))

    await store.create(12345, "mix")

    assert await store.exists("12345", "mix")
