from __future__ import annotations

from typing import List


def chunk_text(text: str, max_len: int) -> List[str]:
    """
    将文本切分为若干长度不超过 max_len 的连续片段，拼接后与原文完全一致。

    优先在窗口内最后一个空白字符之后断开，避免把单词切成两半；
    窗口内没有空白时直接按长度硬切。
    """
    if max_len < 1:
        raise ValueError(f"max_len must be >= 1, got {max_len}")

    chunks: List[str] = []
    start = 0
    length = len(text)
    while start < length:
        end = start + max_len
        if end >= length:
            chunks.append(text[start:])
            break
        cut = end
        for pos in range(end - 1, start, -1):
            if text[pos].isspace():
                cut = pos + 1
                break
        chunks.append(text[start:cut])
        start = cut
    return chunks
