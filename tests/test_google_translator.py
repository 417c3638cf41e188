"""Unit tests for the Google-compatible translation engine."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from subtranslate.errors import TranslationBackendError
from subtranslate.translate import GoogleTranslator, PassthroughTranslator, get_translation_engine
from subtranslate.translate.google_translator import _loads_lenient, extract_translation
from subtranslate.config import SubtranslateConfig


def _response(body: str, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = body
    return resp


def _translator(resp=None, side_effect=None) -> tuple[GoogleTranslator, MagicMock]:
    session = MagicMock()
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = resp
    return GoogleTranslator(base_url="https://tr.example.com/", session=session), session


class TestExtractTranslation:
    def test_concatenates_segments_in_order(self):
        data = [[["Hola, ", "Hello, ", None], ["mundo", "world", None]], None, "en"]
        assert extract_translation(data) == "Hola, mundo"

    def test_skips_empty_and_non_list_segments(self):
        data = [[["A", "a"], None, [], ["", "x"], ["B", "b"]]]
        assert extract_translation(data) == "AB"

    @pytest.mark.parametrize("data", [None, [], {"a": 1}, [None], ["text"], [[]], [[[None, "x"]]]])
    def test_uninterpretable_shapes(self, data):
        with pytest.raises(TranslationBackendError):
            extract_translation(data)


class TestLoadsLenient:
    def test_strict_json(self):
        assert _loads_lenient('[[["a","b"]],null,"en"]') == [[["a", "b"]], None, "en"]

    def test_sparse_array_holes(self):
        raw = '[[["שלום","Hello",,,1]],,"en",[,1]]'
        assert _loads_lenient(raw) == [[["שלום", "Hello", None, None, 1]], None, "en", [None, 1]]

    def test_commas_inside_strings_are_untouched(self):
        raw = '[[["a,,b","x",,]],,"en"]'
        assert _loads_lenient(raw)[0][0][0] == "a,,b"

    def test_rejects_non_json(self):
        with pytest.raises(TranslationBackendError):
            _loads_lenient("<html>rate limited</html>")

    def test_never_evaluates_code(self):
        with pytest.raises(TranslationBackendError):
            _loads_lenient("__import__('os').system('echo hi')")


class TestGoogleTranslator:
    def test_builds_request_and_parses_response(self):
        translator, session = _translator(_response('[[["שלום , עולם !","Hello , world !",null]],null,"en"]'))
        assert translator.translate_text("Hello , world !", "he") == "שלום , עולם !"

        args, kwargs = session.get.call_args
        assert args[0] == "https://tr.example.com/translate_a/single"
        assert kwargs["params"] == {
            "client": "gtx",
            "sl": "auto",
            "tl": "he",
            "dt": "t",
            "q": "Hello , world !",
        }

    def test_target_language_is_passed_through(self):
        translator, session = _translator(_response('[[["Привет","Hello"]]]'))
        assert translator.translate_text("Hello", "ru", source_lang="en") == "Привет"
        params = session.get.call_args.kwargs["params"]
        assert params["tl"] == "ru"
        assert params["sl"] == "en"

    def test_http_error_raises_backend_error(self):
        translator, _ = _translator(_response("Too Many Requests", status=429))
        with pytest.raises(TranslationBackendError, match="429"):
            translator.translate_text("Hello", "he")

    def test_transport_error_raises_backend_error(self):
        translator, _ = _translator(side_effect=requests.ConnectionError("boom"))
        with pytest.raises(TranslationBackendError):
            translator.translate_text("Hello", "he")

    def test_unparsable_body_raises_backend_error(self):
        translator, _ = _translator(_response("not json at all"))
        with pytest.raises(TranslationBackendError):
            translator.translate_text("Hello", "he")

    def test_without_session_each_call_uses_requests_get(self):
        translator = GoogleTranslator(base_url="https://tr.example.com")
        with patch(
            "subtranslate.translate.google_translator.requests.get",
            return_value=_response('[[["Hola","Hello"]]]'),
        ) as get:
            assert translator.translate_text("Hello", "es") == "Hola"
            assert translator.translate_text("Hello", "es") == "Hola"

        assert get.call_count == 2
        assert get.call_args.args[0] == "https://tr.example.com/translate_a/single"
        assert "User-Agent" in get.call_args.kwargs["headers"]
        assert translator.session is None

    def test_blank_text_skips_request(self):
        translator, session = _translator(_response("[]"))
        assert translator.translate_text("   ", "he") == "   "
        session.get.assert_not_called()


class TestFactory:
    def test_google(self):
        config = SubtranslateConfig(google_base_url="https://proxy.example.com", request_timeout=5.0)
        engine = get_translation_engine("Google", config)
        assert isinstance(engine, GoogleTranslator)
        assert engine.base_url == "https://proxy.example.com"
        assert engine.timeout == 5.0

    def test_none(self):
        engine = get_translation_engine("none")
        assert isinstance(engine, PassthroughTranslator)
        assert engine.translate_text("Hello", "he") == "Hello"

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_translation_engine("babelfish")
