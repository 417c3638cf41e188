from __future__ import annotations

from urllib.parse import urlsplit

import requests

from subtranslate.errors import FetchError


USER_AGENT = "subtranslate/0.1.0"


def is_http_url(value: str) -> bool:
    parts = urlsplit(value.strip())
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def fetch_subtitle_bytes(
    url: str,
    timeout: float = 20.0,
    proxies: dict[str, str] | None = None,
    session: requests.Session | None = None,
) -> bytes:
    """
    下载原始字幕文件，返回未解码的字节。

    非 http(s) 地址、网络错误或非 2xx 响应都会抛出 FetchError。
    """
    if not is_http_url(url):
        raise FetchError(f"unsupported subtitle url: {url}")
    getter = session.get if session is not None else requests.get
    try:
        resp = getter(
            url,
            timeout=timeout,
            proxies=proxies,
            headers={"User-Agent": USER_AGENT},
        )
    except requests.RequestException as exc:
        raise FetchError(f"failed to fetch original subtitle: {exc}") from exc
    if not resp.ok:
        raise FetchError(
            f"failed to fetch original subtitle: {resp.status_code}",
            status_code=resp.status_code,
        )
    return resp.content
