from __future__ import annotations

"""
Web 层与核心 Pipeline 之间的集成点。

负责按配置组装翻译引擎、缓存与 Pipeline，以及 Stremio 插件所需的
manifest / 字幕条目结构。
"""

from typing import Any, Dict, List
from urllib.parse import quote

from subtranslate import __version__
from subtranslate.cache import build_cache
from subtranslate.config import SubtranslateConfig
from subtranslate.pipeline import SubtitlePipeline
from subtranslate.translate import get_translation_engine


def build_pipeline(config: SubtranslateConfig) -> SubtitlePipeline:
    """
    Web 入口使用的 Pipeline：总是带缓存，翻译引擎由配置决定。
    """
    return SubtitlePipeline(
        config=config,
        translator=get_translation_engine(config.translation_engine, config),
        cache=build_cache(config),
    )


def build_manifest(config: SubtranslateConfig) -> Dict[str, Any]:
    lang = config.target_lang.upper()
    return {
        "id": "org.custom.stremio.translate_subs",
        "version": __version__,
        "name": f"Translate Subtitles (-> {lang})",
        "description": (
            f"Translates subtitle files to {lang} on-the-fly, "
            "keeping the original timing and format."
        ),
        "resources": ["subtitles"],
        "types": ["movie", "series", "episode"],
        "idPrefixes": [],
        "catalogs": [],
    }


def build_subtitle_entries(
    base_url: str,
    source_url: str | None,
    config: SubtranslateConfig,
) -> List[Dict[str, Any]]:
    """
    为直接提供的字幕 URL 生成一条指向 /translate 的字幕条目；
    未提供 URL 时返回空列表。
    """
    if not source_url:
        return []
    encoded = quote(source_url, safe="")
    lang = config.target_lang.lower()
    return [
        {
            "id": encoded,
            "name": f"Translated subtitle ({lang.upper()})",
            "lang": lang,
            "url": f"{base_url.rstrip('/')}/translate?url={encoded}",
            "encoding": "utf-8",
            "rel": "subtitle",
        }
    ]
