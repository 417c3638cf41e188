from __future__ import annotations

"""
subtranslate Web 子模块

提供基于 FastAPI 的字幕翻译服务（兼容 Stremio 插件协议）。
"""

from .app import app, create_app, main

__all__ = ["app", "create_app", "main"]
