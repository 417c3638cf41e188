from __future__ import annotations

from subtranslate.config import SubtranslateConfig

from .google_translator import GoogleTranslator
from .translator import PassthroughTranslator, TranslationEngine


def get_translation_engine(
    name: str,
    config: SubtranslateConfig | None = None,
) -> TranslationEngine:
    """
    根据名称返回对应的翻译引擎实例。

    支持：
      - "google" : GoogleTranslator
      - "none"   : PassthroughTranslator（不翻译，原样输出）
    """
    config = config or SubtranslateConfig()
    key = name.strip().lower()
    if key == "google":
        return GoogleTranslator(
            base_url=config.google_base_url,
            timeout=config.request_timeout,
            proxies=config.proxies,
        )
    if key in {"none", "passthrough"}:
        return PassthroughTranslator()
    raise ValueError(f"Unknown translation engine: {name}")
