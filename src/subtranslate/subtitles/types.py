from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class SubtitleFormat(str, Enum):
    SRT = "srt"
    VTT = "vtt"

    @property
    def extension(self) -> str:
        return f".{self.value}"


@dataclass(frozen=True)
class Cue:
    """
    单条字幕。

    timeline 为原始时间轴行（含定位参数），原样保留；
    翻译时只替换 text。
    """

    timeline: str
    text: str

    def with_text(self, text: str) -> "Cue":
        return replace(self, text=text)
