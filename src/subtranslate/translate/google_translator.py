from __future__ import annotations

import json
import re
from typing import Any

import requests

from subtranslate.errors import TranslationBackendError

from .translator import TranslationEngine


DEFAULT_BASE_URL = "https://translate.googleapis.com"

# JavaScript 稀疏数组中的空位：[,1] / [1,,2] / [1,]
_SPARSE_HOLE_RE = re.compile(r"(?<=,)\s*(?=[,\]])|(?<=\[)\s*(?=,)")


def _loads_lenient(raw: str) -> Any:
    """
    解析后端返回的嵌套数组。

    先按严格 JSON 解析；失败时将稀疏数组空位补为 null 再解析一次。
    字符串字面量内部的逗号不会被改写。绝不执行响应内容。
    """
    try:
        return json.loads(raw)
    except ValueError:
        pass

    out: list[str] = []
    pos = 0
    # 只在字符串字面量之外的片段里补空位
    for match in re.finditer(r'"(?:[^"\\]|\\.)*"', raw):
        out.append(_SPARSE_HOLE_RE.sub("null", raw[pos : match.start()]))
        out.append(match.group(0))
        pos = match.end()
    out.append(_SPARSE_HOLE_RE.sub("null", raw[pos:]))
    try:
        return json.loads("".join(out))
    except ValueError as exc:
        raise TranslationBackendError(f"无法解析翻译响应: {exc}") from exc


def extract_translation(data: Any) -> str:
    """
    从 [[["译文", "原文", ...], ...], ...] 结构中按顺序拼接所有译文片段。
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        raise TranslationBackendError("翻译响应结构不符合预期")
    parts: list[str] = []
    for segment in data[0]:
        if isinstance(segment, list) and segment and segment[0]:
            parts.append(str(segment[0]))
    if not parts:
        raise TranslationBackendError("翻译响应中没有译文片段")
    return "".join(parts)


class GoogleTranslator(TranslationEngine):
    """
    使用 Google 翻译兼容接口（translate_a/single, client=gtx）的翻译引擎。

    默认使用官方接口：
      - https://translate.googleapis.com
    也可通过 SUBTRANSLATE_GOOGLE_TRANSLATE_URL 指向自建代理。
    每次调用只翻译一个分块，限速与重试策略由 Pipeline 负责。
    """

    name = "google"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 20.0,
        proxies: dict[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.proxies = proxies or None
        # 未指定 session 时每次请求单独调用 requests.get，多线程下互不共享连接状态
        self.session = session
        self.headers = {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) subtranslate/0.1.0",
        }

    def _endpoint(self) -> str:
        return f"{self.base_url}/translate_a/single"

    def translate_text(
        self,
        text: str,
        target_lang: str,
        source_lang: str = "auto",
    ) -> str:
        if not text.strip():
            return text
        params = {
            "client": "gtx",
            "sl": source_lang or "auto",
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }
        http = self.session if self.session is not None else requests
        try:
            resp = http.get(
                self._endpoint(),
                params=params,
                headers=self.headers,
                timeout=self.timeout,
                proxies=self.proxies,
            )
        except requests.RequestException as exc:
            raise TranslationBackendError(f"翻译请求失败: {exc}") from exc

        if not resp.ok:
            raise TranslationBackendError(
                f"翻译接口返回 HTTP {resp.status_code}"
            )
        return extract_translation(_loads_lenient(resp.text))
