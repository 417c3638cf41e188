from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import partial
import threading
import time
from typing import Callable, Dict, Iterator, List, Optional

from .cache import TranslationCache, make_cache_key
from .chunking import chunk_text
from .config import SubtranslateConfig
from .decoding import decode_subtitle_bytes
from .errors import CacheWriteError, TranslationBackendError, TranslationUnavailableError
from .fetch import fetch_subtitle_bytes
from .logging_utils import get_logger
from .normalize import fix_punctuation
from .subtitles import Cue, SubtitleFormat, detect_format, parse_subtitles, write_subtitles
from .translate import TranslationEngine, get_translation_engine


log = get_logger(__name__)

Fetcher = Callable[[str], bytes]


@dataclass
class TranslationStats:
    cues: int = 0
    chunks: int = 0
    failed_chunks: int = 0

    @property
    def all_failed(self) -> bool:
        return self.chunks > 0 and self.failed_chunks == self.chunks


@dataclass
class PipelineResult:
    text: str
    cues: List[Cue]
    format: SubtitleFormat
    stats: TranslationStats = field(default_factory=TranslationStats)


@dataclass
class _InflightEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


class SubtitlePipeline:
    """
    字幕翻译主流程：

      解码 → 判断格式 → 解析 cue → 逐条 cue（分块 → 翻译 → 拼接 → 标点修复）→ 重新输出

    单次运行内严格串行，相邻两次后端调用之间按 config.request_delay 等待；
    不同请求之间互不共享状态，可以并行执行。
    """

    def __init__(
        self,
        config: SubtranslateConfig | None = None,
        translator: TranslationEngine | None = None,
        cache: TranslationCache | None = None,
        fetcher: Fetcher | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or SubtranslateConfig()
        if translator is None:
            translator = get_translation_engine(self.config.translation_engine, self.config)
        self.translator = translator
        self.cache = cache
        if fetcher is None:
            fetcher = partial(
                fetch_subtitle_bytes,
                timeout=self.config.request_timeout,
                proxies=self.config.proxies,
            )
        self.fetcher = fetcher
        self._sleep = sleep
        self._inflight: Dict[str, _InflightEntry] = {}
        self._inflight_guard = threading.Lock()

    def _pace(self, stats: TranslationStats) -> None:
        delay = self.config.request_delay
        if delay > 0 and stats.chunks > 0:
            self._sleep(delay)

    def translate_text(
        self,
        text: str,
        target_lang: str,
        stats: TranslationStats | None = None,
    ) -> str:
        """
        翻译单条 cue 的正文。

        某个分块翻译失败时保留该分块原文，不影响其它分块与其它 cue。
        """
        if stats is None:
            stats = TranslationStats()
        if not text.strip():
            return text

        parts: List[str] = []
        for chunk in chunk_text(text, self.config.chunk_size):
            self._pace(stats)
            stats.chunks += 1
            try:
                parts.append(
                    self.translator.translate_text(
                        chunk,
                        target_lang,
                        source_lang=self.config.source_lang,
                    )
                )
            except TranslationBackendError as exc:
                stats.failed_chunks += 1
                log.warning("分块翻译失败，保留原文（%d 字符）: %s", len(chunk), exc)
                parts.append(chunk)
        return fix_punctuation("".join(parts))

    def translate_cues(
        self,
        cues: List[Cue],
        target_lang: str,
        stats: TranslationStats | None = None,
    ) -> List[Cue]:
        if stats is None:
            stats = TranslationStats()
        translated: List[Cue] = []
        for cue in cues:
            translated.append(cue.with_text(self.translate_text(cue.text, target_lang, stats)))
            stats.cues += 1
        return translated

    def run(
        self,
        source_bytes: bytes,
        format_hint: Optional[str],
        target_lang: Optional[str] = None,
    ) -> PipelineResult:
        lang = target_lang or self.config.target_lang
        text = decode_subtitle_bytes(source_bytes, lang)
        fmt = detect_format(format_hint, text)
        cues = parse_subtitles(text, fmt)
        if not cues:
            log.warning("未解析到任何字幕条目（格式: %s），将输出空字幕", fmt.value)

        stats = TranslationStats()
        translated = self.translate_cues(cues, lang, stats)
        output = write_subtitles(translated, fmt)
        log.info(
            "翻译完成: %d 条字幕, %d 个分块, %d 个失败 (-> %s)",
            stats.cues,
            stats.chunks,
            stats.failed_chunks,
            lang,
        )
        if stats.all_failed and self.config.strict:
            raise TranslationUnavailableError(
                f"translation backend failed for all {stats.chunks} chunks"
            )
        return PipelineResult(text=output, cues=translated, format=fmt, stats=stats)

    def translate_subtitle(
        self,
        source_bytes: bytes,
        format_hint: Optional[str],
        target_lang: Optional[str] = None,
    ) -> str:
        return self.run(source_bytes, format_hint, target_lang).text

    @contextmanager
    def _key_lock(self, key: str) -> Iterator[None]:
        """
        同一缓存键的请求串行执行，后到的请求在拿到锁后会先命中缓存。
        """
        with self._inflight_guard:
            entry = self._inflight.get(key)
            if entry is None:
                entry = self._inflight[key] = _InflightEntry()
            entry.waiters += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._inflight_guard:
                entry.waiters -= 1
                if entry.waiters == 0:
                    self._inflight.pop(key, None)

    def translate_url(
        self,
        url: str,
        target_lang: Optional[str] = None,
        format_hint: Optional[str] = None,
    ) -> str:
        """
        带缓存的完整流程：命中缓存时直接返回，不下载也不调用翻译后端。
        """
        lang = target_lang or self.config.target_lang
        hint = format_hint or url
        if self.cache is None:
            return self.run(self.fetcher(url), hint, lang).text

        key = make_cache_key(url, lang, detect_format(hint))
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("缓存命中: %s", key)
            return cached

        with self._key_lock(key):
            cached = self.cache.get(key)
            if cached is not None:
                log.debug("缓存命中（等待同键请求后）: %s", key)
                return cached

            result = self.run(self.fetcher(url), hint, lang)
            if result.stats.all_failed:
                log.warning("所有分块均翻译失败，本次结果不写入缓存: %s", url)
                return result.text
            if not result.cues:
                log.warning("未解析到字幕条目，本次结果不写入缓存: %s", url)
                return result.text
            try:
                self.cache.put(key, result.text)
            except CacheWriteError as exc:
                log.warning("%s", exc)
            return result.text
