from __future__ import annotations

"""
翻译后的标点 / 空格修复。

机器翻译经常在标点前留下多余空格（"Hello , world !"），或者把标点与
后面的词粘在一起。这里只做确定性的文本级修复，重复调用结果不变。
"""

import re


PUNCTUATION = ".,:;!?"

# 标点前的水平空白（不含换行，保留字幕内的分行）
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[^\S\n]+([.,:;!?])")
# 标点后直接跟着正文字符：排除空白、连续标点、右引号 / 右括号，
# 以及数字之间的标点（3.14 / 1,000 / 10:30）
_MISSING_SPACE_AFTER_RE = re.compile(
    r"(?<!\d)([.,:;!?])(?=[^\s.,:;!?\"'”’»)\]}…])"
    r"|(?<=\d)([.,:;!?])(?=[^\s\d.,:;!?\"'”’»)\]}…])"
)
_MULTI_SPACE_RE = re.compile(r" {2,}")


def _add_space(match: re.Match[str]) -> str:
    return (match.group(1) or match.group(2)) + " "


def fix_punctuation(text: str) -> str:
    if not text:
        return text
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _MISSING_SPACE_AFTER_RE.sub(_add_space, text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    return text
