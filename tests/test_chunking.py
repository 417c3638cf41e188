from __future__ import annotations

import pytest

from subtranslate.chunking import chunk_text


SAMPLES = [
    "",
    "short",
    "The quick brown fox jumps over the lazy dog.",
    "a" * 37,
    "line one\nline two\n\nline four with more words",
    "שלום עולם, מה שלומך היום?",
    "  leading and trailing  ",
]


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("max_len", [1, 2, 5, 10, 2500])
def test_chunks_reconstruct_original(text, max_len):
    chunks = chunk_text(text, max_len)
    assert "".join(chunks) == text
    assert all(0 < len(chunk) <= max_len for chunk in chunks)


def test_prefers_whitespace_boundaries():
    assert chunk_text("hello brave new world", 12) == ["hello brave ", "new world"]


def test_hard_cut_without_whitespace():
    assert chunk_text("abcdefghij", 4) == ["abcd", "efgh", "ij"]


def test_text_shorter_than_limit_is_single_chunk():
    assert chunk_text("Goodbye.", 2500) == ["Goodbye."]


def test_empty_text_has_no_chunks():
    assert chunk_text("", 10) == []


def test_invalid_max_len():
    with pytest.raises(ValueError):
        chunk_text("abc", 0)
