from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

import pytest

from subtranslate.config import SubtranslateConfig
from subtranslate.errors import TranslationBackendError
from subtranslate.translate import TranslationEngine


SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,000\n"
    "Hello , world !\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:04,000\n"
    "Goodbye.\n"
)


class StubTranslator(TranslationEngine):
    """按字典映射翻译；failures 中的文本抛出 TranslationBackendError。"""

    name = "stub"

    def __init__(
        self,
        mapping: Optional[Dict[str, str]] = None,
        failures: Optional[Set[str]] = None,
        fail_all: bool = False,
    ) -> None:
        self.mapping = mapping or {}
        self.failures = failures or set()
        self.fail_all = fail_all
        self.calls: List[Tuple[str, str]] = []

    def translate_text(self, text: str, target_lang: str, source_lang: str = "auto") -> str:
        self.calls.append((text, target_lang))
        if self.fail_all or text in self.failures:
            raise TranslationBackendError(f"stub failure for {text!r}")
        return self.mapping.get(text, f"[{target_lang}] {text}")


@pytest.fixture
def config() -> SubtranslateConfig:
    return SubtranslateConfig(request_delay=0.0, cache_backend="memory")


@pytest.fixture
def stub_translator() -> StubTranslator:
    return StubTranslator()


@pytest.fixture
def sample_srt_bytes() -> bytes:
    return SAMPLE_SRT.encode("utf-8")


@pytest.fixture
def make_translator():
    return StubTranslator
