"""
音频滤镜预设

每个滤镜名对应一条不可变的参数记录，由 WavelinkSession.apply_filter 统一应用。
参数与 Lavalink v4 的滤镜字段一一对应。
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class FilterName(str, Enum):
    """可用滤镜"""
    NONE = "none"
    BASSBOOST = "bassboost"
    NIGHTCORE = "nightcore"
    VAPORWAVE = "vaporwave"
    EIGHT_D = "8d"
    KARAOKE = "karaoke"
    TREMOLO = "tremolo"
    VIBRATO = "vibrato"
    ROTATION = "rotation"
    DISTORTION = "distortion"
    CHANNEL_MIX = "channelmix"
    LOW_PASS = "lowpass"
    SLOWMODE = "slowmode"


class FilterStage(str, Enum):
    """滤镜作用的 Lavalink 滤镜字段"""
    CLEAR = "clear"
    EQUALIZER = "equalizer"
    TIMESCALE = "timescale"
    ROTATION = "rotation"
    KARAOKE = "karaoke"
    TREMOLO = "tremolo"
    VIBRATO = "vibrato"
    DISTORTION = "distortion"
    CHANNEL_MIX = "channel_mix"
    LOW_PASS = "low_pass"


@dataclass(frozen=True)
class FilterPreset:
    """滤镜预设记录"""
    name: FilterName
    label: str
    stage: FilterStage
    params: Mapping[str, Any]


BASSBOOST_LEVEL = 3
EQUALIZER_BAND_COUNT = 13


def bassboost_bands(level: float) -> Tuple[Mapping[str, Any], ...]:
    """
    计算低音增强的均衡器频段

    所有13个频段使用同一增益：level * (1.25 / 9) - 0.25，等级3约为 +0.167

    Args:
        level: 增强等级（0-5）

    Returns:
        频段设置元组
    """
    if not 0 <= level <= 5:
        raise ValueError(f"低音增强等级必须在0到5之间: {level}")

    gain = level * (1.25 / 9) - 0.25
    return tuple(
        MappingProxyType({"band": band, "gain": gain})
        for band in range(EQUALIZER_BAND_COUNT)
    )


def _preset(name: FilterName, label: str, stage: FilterStage, **params: Any) -> FilterPreset:
    return FilterPreset(name=name, label=label, stage=stage, params=MappingProxyType(params))


FILTER_PRESETS: Mapping[FilterName, FilterPreset] = MappingProxyType({
    FilterName.NONE: _preset(FilterName.NONE, "None", FilterStage.CLEAR),
    FilterName.BASSBOOST: _preset(
        FilterName.BASSBOOST, "Bassboost", FilterStage.EQUALIZER,
        bands=bassboost_bands(BASSBOOST_LEVEL)
    ),
    FilterName.NIGHTCORE: _preset(FilterName.NIGHTCORE, "Nightcore", FilterStage.TIMESCALE, rate=1.5),
    FilterName.VAPORWAVE: _preset(FilterName.VAPORWAVE, "Vaporwave", FilterStage.TIMESCALE, pitch=0.5),
    FilterName.EIGHT_D: _preset(FilterName.EIGHT_D, "8D", FilterStage.ROTATION, rotation_hz=0.2),
    FilterName.KARAOKE: _preset(
        FilterName.KARAOKE, "Karaoke", FilterStage.KARAOKE,
        level=1.0, mono_level=1.0, filter_band=220.0, filter_width=100.0
    ),
    FilterName.TREMOLO: _preset(FilterName.TREMOLO, "Tremolo", FilterStage.TREMOLO, frequency=2.0, depth=0.5),
    FilterName.VIBRATO: _preset(FilterName.VIBRATO, "Vibrato", FilterStage.VIBRATO, frequency=4.0, depth=0.5),
    FilterName.ROTATION: _preset(FilterName.ROTATION, "Rotation", FilterStage.ROTATION, rotation_hz=0.2),
    FilterName.DISTORTION: _preset(
        FilterName.DISTORTION, "Distortion", FilterStage.DISTORTION,
        sin_offset=0.0, sin_scale=1.0, cos_offset=0.0, cos_scale=1.0
    ),
    FilterName.CHANNEL_MIX: _preset(
        FilterName.CHANNEL_MIX, "Channel Mix", FilterStage.CHANNEL_MIX,
        left_to_left=1.0, left_to_right=0.0, right_to_left=0.0, right_to_right=1.0
    ),
    FilterName.LOW_PASS: _preset(FilterName.LOW_PASS, "Low Pass", FilterStage.LOW_PASS, smoothing=20.0),
    FilterName.SLOWMODE: _preset(FilterName.SLOWMODE, "Slowmode", FilterStage.TIMESCALE, rate=0.8),
})


def get_filter_preset(name: str) -> Optional[FilterPreset]:
    """
    按名称查找滤镜预设

    Args:
        name: 滤镜名（大小写不敏感）

    Returns:
        滤镜预设，未知名称返回 None
    """
    try:
        return FILTER_PRESETS[FilterName((name or "").strip().lower())]
    except ValueError:
        return None


def available_filter_names() -> Tuple[str, ...]:
    return tuple(member.value for member in FilterName)
