from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Optional


DEFAULT_TARGET_LANG = "he"
DEFAULT_CHUNK_SIZE = 2500
DEFAULT_REQUEST_DELAY = 0.15
DEFAULT_REQUEST_TIMEOUT = 20.0
DEFAULT_WEB_PORT = 7000


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "no", "off"}


@dataclass
class SubtranslateConfig:
    """
    核心配置对象。

    所有字段都可以通过 SUBTRANSLATE_* 环境变量（或 .env）提供默认值，
    CLI / Web 层再用显式参数覆盖。
    """

    target_lang: str = DEFAULT_TARGET_LANG
    source_lang: str = "auto"
    translation_engine: str = "google"
    # 单次发送给翻译后端的最大字符数
    chunk_size: int = DEFAULT_CHUNK_SIZE
    # 相邻两次后端调用之间的间隔（秒），0 表示不等待
    request_delay: float = DEFAULT_REQUEST_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    google_base_url: Optional[str] = None
    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    cache_backend: str = "file"
    cache_dir: Path = Path("cache")
    # 缓存过期时间（小时），0 表示永不过期
    cache_max_age_hours: float = 0.0
    strict: bool = False
    web_host: str = "0.0.0.0"
    web_port: int = DEFAULT_WEB_PORT

    @property
    def proxies(self) -> dict[str, str] | None:
        proxies: dict[str, str] = {}
        if self.http_proxy:
            proxies["http"] = self.http_proxy
        if self.https_proxy:
            proxies["https"] = self.https_proxy
        return proxies or None

    @classmethod
    def from_env(cls, **overrides: Any) -> "SubtranslateConfig":
        """
        从环境变量构造配置，overrides 中值不为 None 的字段优先。
        """
        # PORT 兼容常见 PaaS 平台（Render / Heroku 等）的约定
        port_default = _env_int("PORT", DEFAULT_WEB_PORT)

        values: dict[str, Any] = {
            "target_lang": _env_str("SUBTRANSLATE_TARGET_LANG", DEFAULT_TARGET_LANG),
            "source_lang": _env_str("SUBTRANSLATE_SOURCE_LANG", "auto"),
            "translation_engine": _env_str("SUBTRANSLATE_ENGINE", "google").lower(),
            "chunk_size": max(1, _env_int("SUBTRANSLATE_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)),
            "request_delay": max(0.0, _env_float("SUBTRANSLATE_REQUEST_DELAY", DEFAULT_REQUEST_DELAY)),
            "request_timeout": _env_float("SUBTRANSLATE_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            "google_base_url": os.getenv("SUBTRANSLATE_GOOGLE_TRANSLATE_URL") or None,
            "http_proxy": os.getenv("SUBTRANSLATE_HTTP_PROXY") or None,
            "https_proxy": os.getenv("SUBTRANSLATE_HTTPS_PROXY") or None,
            "cache_backend": _env_str("SUBTRANSLATE_CACHE", "file").lower(),
            "cache_dir": Path(_env_str("SUBTRANSLATE_CACHE_DIR", "cache")).expanduser(),
            "cache_max_age_hours": _env_float("SUBTRANSLATE_CACHE_MAX_AGE_HOURS", 0.0),
            "strict": _env_bool("SUBTRANSLATE_STRICT", False),
            "web_host": _env_str("SUBTRANSLATE_WEB_HOST", "0.0.0.0"),
            "web_port": _env_int("SUBTRANSLATE_WEB_PORT", port_default),
        }

        for key, value in overrides.items():
            if key not in values:
                raise TypeError(f"Unknown config field: {key}")
            if value is not None:
                values[key] = value

        if not isinstance(values["cache_dir"], Path):
            values["cache_dir"] = Path(values["cache_dir"]).expanduser()
        return cls(**values)
