from __future__ import annotations

from .config import SubtranslateConfig
from .pipeline import PipelineResult, SubtitlePipeline

__all__ = ["SubtranslateConfig", "SubtitlePipeline", "PipelineResult"]

__version__ = "0.1.0"
