from __future__ import annotations

from .types import Cue, SubtitleFormat
from .parser import detect_format, parse_srt, parse_subtitles, parse_vtt
from .writer import cues_to_srt, cues_to_vtt, write_subtitles

__all__ = [
    "Cue",
    "SubtitleFormat",
    "detect_format",
    "parse_srt",
    "parse_vtt",
    "parse_subtitles",
    "cues_to_srt",
    "cues_to_vtt",
    "write_subtitles",
]
