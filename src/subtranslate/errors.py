from __future__ import annotations


class SubtranslateError(Exception):
    """subtranslate 所有异常的基类。"""


class FetchError(SubtranslateError):
    """
    原始字幕无法获取（网络错误或非 2xx 响应）。

    对单个请求而言是致命错误，会直接反馈给调用方。
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TranslationBackendError(SubtranslateError):
    """翻译后端调用失败或响应无法解析（按分块处理，Pipeline 内部降级为原文）。"""


class TranslationUnavailableError(SubtranslateError):
    """严格模式下，所有分块均翻译失败。"""


class CacheWriteError(SubtranslateError):
    """翻译结果写入缓存失败。"""
