from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urlsplit

from subtranslate.logging_utils import get_logger

from .types import Cue, SubtitleFormat


log = get_logger(__name__)

TIMING_SEPARATOR = "-->"

_BLANK_LINES_RE = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)*")
_INDEX_RE = re.compile(r"^\d+$")
# [hh:]mm:ss[.,]fff --> [hh:]mm:ss[.,]fff [cue settings]
_VTT_TIMING_RE = re.compile(
    r"^(?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3}\s*-->\s*(?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3}(?:\s.*)?$"
)
_VTT_SIGNATURE = "WEBVTT"


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _split_blocks(text: str) -> List[List[str]]:
    """
    按空行切分为若干块，每块为去除首尾空白后的行列表（空块被忽略）。
    """
    blocks: List[List[str]] = []
    for raw in _BLANK_LINES_RE.split(_normalize_newlines(text)):
        lines = [line.strip() for line in raw.split("\n")]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        if lines:
            blocks.append(lines)
    return blocks


def parse_srt(text: str) -> List[Cue]:
    cues: List[Cue] = []
    for lines in _split_blocks(text):
        if len(lines) < 2:
            log.debug("丢弃不完整的 SRT 块: %r", lines)
            continue
        if _INDEX_RE.match(lines[0]) and TIMING_SEPARATOR in lines[1]:
            timeline, body = lines[1], lines[2:]
        elif TIMING_SEPARATOR in lines[0]:
            timeline, body = lines[0], lines[1:]
        else:
            log.debug("丢弃缺少时间轴的 SRT 块: %r", lines)
            continue
        cues.append(Cue(timeline=timeline, text="\n".join(body)))
    return cues


def parse_vtt(text: str) -> List[Cue]:
    text = _normalize_newlines(text).lstrip("\ufeff")
    blocks = _split_blocks(text)
    # 第一块以 WEBVTT 开头时为文件头（签名行 + 可选元数据），整体跳过
    if blocks and blocks[0][0].startswith(_VTT_SIGNATURE):
        header = blocks.pop(0)
        # 没有空行分隔的头部：签名行后面直接跟着 cue
        rest = header[1:]
        if any(_VTT_TIMING_RE.match(line) for line in rest):
            blocks.insert(0, rest)

    cues: List[Cue] = []
    for lines in blocks:
        timing_idx: Optional[int] = None
        for idx, line in enumerate(lines):
            if _VTT_TIMING_RE.match(line):
                timing_idx = idx
                break
        if timing_idx is None:
            # NOTE / STYLE / REGION 等非 cue 块
            continue
        cues.append(
            Cue(
                timeline=lines[timing_idx],
                text="\n".join(lines[timing_idx + 1 :]),
            )
        )
    return cues


def parse_subtitles(text: str, fmt: SubtitleFormat) -> List[Cue]:
    if fmt is SubtitleFormat.VTT:
        return parse_vtt(text)
    return parse_srt(text)


def detect_format(hint: Optional[str], text: Optional[str] = None) -> SubtitleFormat:
    """
    根据提示（文件名 / URL / 格式名）判断字幕格式。

    提示无法判断时，若文本以 WEBVTT 开头则视为 WebVTT，否则默认 SRT。
    """
    if hint:
        value = hint.strip().lower()
        if value in {"vtt", "webvtt"}:
            return SubtitleFormat.VTT
        if value == "srt":
            return SubtitleFormat.SRT
        path = urlsplit(value).path if "://" in value else value
        if path.endswith(".vtt"):
            return SubtitleFormat.VTT
        if path.endswith(".srt"):
            return SubtitleFormat.SRT
    if text is not None and text.lstrip("\ufeff \t\r\n").startswith(_VTT_SIGNATURE):
        return SubtitleFormat.VTT
    return SubtitleFormat.SRT
