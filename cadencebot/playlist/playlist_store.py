"""
歌单存储 - 基于单个 JSON 文件的用户歌单持久化

文件结构：
    {
        "<user_id>": {
            "<playlist_name>": [
                {"title": ..., "author": ..., "uri": ..., "length": ...}
            ]
        }
    }

每个操作都是"读取整个文件 → 内存中修改 → 写回整个文件"。
写入先落到同目录的临时文件再 os.replace，读者不会看到半写状态。

已知限制：同一用户并发执行两个修改命令时可能互相覆盖（后写入者生效），
这里不加跨操作的锁。
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from cadencebot.core.errors import ErrorReason, NotFoundError
from cadencebot.core.interfaces import IPlaylistStore, TrackRef


PlaylistDocument = Dict[str, Dict[str, List[Dict[str, Any]]]]


class JsonPlaylistStore(IPlaylistStore):
    """
    JSON 文件歌单存储

    文件不存在时自动初始化为空文档。
    """

    def __init__(self, file_path: str = "data/playlists.json"):
        """
        初始化歌单存储

        Args:
            file_path: 歌单文件路径
        """
        self.logger = logging.getLogger("cadencebot.playlist.store")
        self.file_path = Path(file_path)

        self.logger.info(f"歌单存储初始化完成 - 文件: {self.file_path}")

    def _read_file(self) -> PlaylistDocument:
        if not self.file_path.exists():
            self.logger.info(f"歌单文件不存在，初始化空文档: {self.file_path}")
            self._write_file({})
            return {}

        with open(self.file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        if not content.strip():
            return {}

        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"歌单文件格式错误，顶层必须是对象: {self.file_path}")
        return data

    def _write_file(self, data: PlaylistDocument) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.file_path.name}.",
            suffix=".tmp",
            dir=str(self.file_path.parent)
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def _load(self) -> PlaylistDocument:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_file)

    async def _save(self, data: PlaylistDocument) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write_file, data)

    @staticmethod
    def _require_playlist(data: PlaylistDocument, user_id: str, name: str) -> List[Dict[str, Any]]:
        playlists = data.get(user_id) or {}
        if name not in playlists:
            raise NotFoundError(
                ErrorReason.PLAYLIST_ABSENT,
                f"Playlist **{name}** does not exist!",
                user_id=user_id,
                playlist=name
            )
        return playlists[name]

    async def create(self, user_id: str, name: str) -> None:
        """
        创建空歌单

        Raises:
            NotFoundError: PLAYLIST_EXISTS 如果同名歌单已存在
        """
        user_id = str(user_id)
        data = await self._load()
        playlists = data.setdefault(user_id, {})

        if name in playlists:
            raise NotFoundError(
                ErrorReason.PLAYLIST_EXISTS,
                f"Playlist **{name}** already exists!",
                user_id=user_id,
                playlist=name
            )

        playlists[name] = []
        await self._save(data)
        self.logger.debug(f"创建歌单 - 用户: {user_id}, 歌单: {name}")

    async def delete(self, user_id: str, name: str) -> None:
        """
        删除歌单

        Raises:
            NotFoundError: PLAYLIST_ABSENT 如果歌单不存在
        """
        user_id = str(user_id)
        data = await self._load()
        self._require_playlist(data, user_id, name)

        del data[user_id][name]
        await self._save(data)
        self.logger.debug(f"删除歌单 - 用户: {user_id}, 歌单: {name}")

    async def append(self, user_id: str, name: str, track: TrackRef) -> int:
        """
        追加歌曲到歌单末尾

        Returns:
            追加后的歌单长度
        """
        user_id = str(user_id)
        data = await self._load()
        tracks = self._require_playlist(data, user_id, name)

        tracks.append(track.to_dict())
        await self._save(data)
        self.logger.debug(f"歌单追加歌曲 - 用户: {user_id}, 歌单: {name}, 歌曲: {track.title}")
        return len(tracks)

    async def remove_at(self, user_id: str, name: str, index: int) -> TrackRef:
        """
        按位置删除歌曲

        Args:
            user_id: 用户ID
            name: 歌单名
            index: 从0开始的位置

        Returns:
            被删除的歌曲

        Raises:
            NotFoundError: PLAYLIST_ABSENT 或 TRACK_INDEX_OUT_OF_RANGE
        """
        user_id = str(user_id)
        data = await self._load()
        tracks = self._require_playlist(data, user_id, name)

        if index < 0 or index >= len(tracks):
            raise NotFoundError(
                ErrorReason.TRACK_INDEX_OUT_OF_RANGE,
                f"Invalid song index. Playlist **{name}** has {len(tracks)} songs.",
                user_id=user_id,
                playlist=name,
                index=index
            )

        removed = TrackRef.from_dict(tracks.pop(index))
        await self._save(data)
        self.logger.debug(f"歌单删除歌曲 - 用户: {user_id}, 歌单: {name}, 位置: {index}")
        return removed

    async def list(self, user_id: str, name: str) -> List[TrackRef]:
        """
        获取歌单中的所有歌曲

        Raises:
            NotFoundError: PLAYLIST_ABSENT 如果歌单不存在
        """
        user_id = str(user_id)
        data = await self._load()
        tracks = self._require_playlist(data, user_id, name)
        return [TrackRef.from_dict(item) for item in tracks]

    async def exists(self, user_id: str, name: str) -> bool:
        data = await self._load()
        return name in (data.get(str(user_id)) or {})
