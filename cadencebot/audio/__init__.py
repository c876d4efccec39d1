"""
音频模块 - Lavalink 播放会话适配和滤镜预设

播放、队列和混音都由外部 Lavalink 节点完成，
本模块只负责会话查询/创建、查询解析和滤镜参数。
"""

from .filter_presets import (
    FilterName,
    FilterStage,
    FilterPreset,
    FILTER_PRESETS,
    get_filter_preset,
    available_filter_names
)
from .session_registry import WavelinkAudioClient, WavelinkSession

__all__ = [
    "FilterName",
    "FilterStage",
    "FilterPreset",
    "FILTER_PRESETS",
    "get_filter_preset",
    "available_filter_names",
    "WavelinkAudioClient",
    "WavelinkSession"
]
