from __future__ import annotations

import codecs
from typing import Optional

from charset_normalizer import from_bytes

from subtranslate.logging_utils import get_logger


log = get_logger(__name__)

# 按目标语言的书写系统选择旧式 8 位代码页
_LEGACY_CODEPAGES: dict[str, str] = {
    "he": "cp1255",
    "iw": "cp1255",
    "yi": "cp1255",
    "ar": "cp1256",
    "fa": "cp1256",
    "ur": "cp1256",
    "ru": "cp1251",
    "uk": "cp1251",
    "bg": "cp1251",
    "sr": "cp1251",
    "mk": "cp1251",
    "be": "cp1251",
    "el": "cp1253",
    "tr": "cp1254",
    "pl": "cp1250",
    "cs": "cp1250",
    "sk": "cp1250",
    "hu": "cp1250",
    "ro": "cp1250",
    "hr": "cp1250",
    "sl": "cp1250",
    "th": "cp874",
    "vi": "cp1258",
}
DEFAULT_LEGACY_CODEPAGE = "cp1252"

# UTF-32 的 BOM 以 UTF-16 LE 的 BOM 开头，需先判断
_UNICODE_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def legacy_codepage_for(lang: Optional[str]) -> str:
    if not lang:
        return DEFAULT_LEGACY_CODEPAGE
    primary = lang.strip().lower().replace("_", "-").split("-")[0]
    return _LEGACY_CODEPAGES.get(primary, DEFAULT_LEGACY_CODEPAGE)


def decode_subtitle_bytes(data: bytes, target_lang: Optional[str] = None) -> str:
    """
    将字幕原始字节解码为文本，永不抛出异常。

    依次尝试：
      1. UTF-8（自动去除 BOM），结果非空白即采用；
      2. 带 UTF-16 / UTF-32 BOM 时按对应编码解码；
      3. 与目标语言书写系统对应的旧式代码页（如希伯来语 cp1255），含 NUL 字节时跳过；
      4. charset-normalizer 猜测的编码；
      5. latin-1：逐字节映射，保证总能得到文本。
    """
    if not data:
        return ""

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = ""
    if text.strip():
        return text

    for bom, encoding in _UNICODE_BOMS:
        if data.startswith(bom):
            try:
                text = data.decode(encoding)
            except UnicodeDecodeError:
                continue
            if text.strip():
                log.debug("检测到 BOM，使用 %s", encoding)
                return text
            break

    # 含 NUL 字节的多半是无 BOM 的 UTF-16/32，8 位代码页只会得到乱码
    if b"\x00" not in data:
        codepage = legacy_codepage_for(target_lang)
        try:
            text = data.decode(codepage)
        except UnicodeDecodeError:
            text = ""
        if text.strip():
            log.debug("UTF-8 解码失败，使用 %s", codepage)
            return text

    best = from_bytes(data).best()
    if best is not None:
        guessed = str(best)
        if guessed.strip():
            log.debug("使用 charset-normalizer 猜测的编码 %s", best.encoding)
            return guessed

    log.debug("所有编码尝试失败，回退到 latin-1 逐字节映射")
    return data.decode("latin-1")
