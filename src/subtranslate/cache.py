from __future__ import annotations

"""
翻译结果缓存。

键由原始字幕 URL、目标语言与输出格式共同决定；值为渲染好的完整字幕文本。
"""

from abc import ABC, abstractmethod
import hashlib
import os
from pathlib import Path
import tempfile
import threading
import time
from typing import Dict, Optional
from urllib.parse import quote

from subtranslate.config import SubtranslateConfig
from subtranslate.errors import CacheWriteError
from subtranslate.logging_utils import get_logger
from subtranslate.subtitles import SubtitleFormat


log = get_logger(__name__)

# 常见文件系统单个文件名上限为 255 字节，这里留出余量
MAX_KEY_LENGTH = 200


def make_cache_key(url: str, target_lang: str, fmt: SubtitleFormat) -> str:
    """
    URL 与语言分别做百分号编码后拼接扩展名，例如：
      https%3A%2F%2Fexample.com%2Fa.srt.he.srt

    编码后过长时改用 URL 的 SHA-256 摘要。
    """
    suffix = f".{quote(target_lang.strip().lower(), safe='')}{fmt.extension}"
    encoded = quote(url, safe="")
    if len(encoded) + len(suffix) > MAX_KEY_LENGTH:
        encoded = hashlib.sha256(url.encode("utf-8")).hexdigest()
    return encoded + suffix


class TranslationCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """命中时返回缓存文本，否则返回 None。"""

    @abstractmethod
    def put(self, key: str, text: str) -> None:
        """写入缓存，失败时抛出 CacheWriteError。"""


class MemoryTranslationCache(TranslationCache):
    """进程内缓存，主要用于测试与无持久化需求的部署。"""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, text: str) -> None:
        with self._lock:
            self._data[key] = text

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class FileTranslationCache(TranslationCache):
    """
    每个键对应缓存目录下的一个 UTF-8 文件。

    - 写入时先写临时文件再原子替换，避免并发读到半个文件；
    - max_age_hours > 0 时，超过该时间的缓存视为未命中（会被重新翻译并覆盖）；
      为 0 时永不过期。
    """

    def __init__(self, directory: str | Path, max_age_hours: float = 0.0) -> None:
        self.directory = Path(directory).expanduser().resolve()
        self.max_age_hours = max_age_hours

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            if self.max_age_hours > 0:
                age = time.time() - path.stat().st_mtime
                if age > self.max_age_hours * 3600.0:
                    log.debug("缓存已过期: %s", key)
                    return None
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("读取缓存失败 %s: %s", path, exc)
            return None

    def put(self, key: str, text: str) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".part")
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f_out:
                f_out.write(text)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise CacheWriteError(f"写入缓存失败 {path}: {exc}") from exc


def build_cache(config: SubtranslateConfig) -> TranslationCache:
    """
    根据配置创建缓存实例：
      - "file"   : FileTranslationCache（默认）
      - "memory" : MemoryTranslationCache
    """
    backend = config.cache_backend.strip().lower()
    if backend == "file":
        return FileTranslationCache(config.cache_dir, max_age_hours=config.cache_max_age_hours)
    if backend == "memory":
        return MemoryTranslationCache()
    raise ValueError(f"Unknown cache backend: {config.cache_backend}")
