from __future__ import annotations

from typing import Iterable

from .types import Cue, SubtitleFormat


VTT_HEADER = "WEBVTT\n\n"


def cues_to_srt(cues: Iterable[Cue]) -> str:
    """
    序号总是从 1 开始重新编号，不保留原文件中的序号。
    """
    parts: list[str] = []
    for idx, cue in enumerate(cues, start=1):
        parts.append(f"{idx}\n{cue.timeline}\n{cue.text}\n\n")
    return "".join(parts)


def cues_to_vtt(cues: Iterable[Cue]) -> str:
    parts: list[str] = [VTT_HEADER]
    for cue in cues:
        parts.append(f"{cue.timeline}\n{cue.text}\n\n")
    return "".join(parts)


def write_subtitles(cues: Iterable[Cue], fmt: SubtitleFormat) -> str:
    if fmt is SubtitleFormat.VTT:
        return cues_to_vtt(cues)
    return cues_to_srt(cues)

