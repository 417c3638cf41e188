from __future__ import annotations

from abc import ABC, abstractmethod


class TranslationEngine(ABC):
    """
    翻译引擎抽象接口。

    Pipeline 只依赖「发送一段文本，返回译文；可能失败」这一能力，
    具体实现失败时必须抛出 TranslationBackendError。
    """

    name: str = "base"

    @abstractmethod
    def translate_text(
        self,
        text: str,
        target_lang: str,
        source_lang: str = "auto",
    ) -> str:
        """
        翻译单个分块，返回译文。
        """


class PassthroughTranslator(TranslationEngine):
    """
    原样返回文本，用于试运行（只做解析 / 规范化 / 重新输出）。
    """

    name = "none"

    def translate_text(
        self,
        text: str,
        target_lang: str,
        source_lang: str = "auto",
    ) -> str:
        return text
