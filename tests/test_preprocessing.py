"""
Tests for input document filtering.
"""

import pytest

from docluster.preprocessing import is_likely_binary, prepare_documents


class TestIsLikelyBinary:
    @pytest.mark.parametrize(
        "text",
        [
            "data:image/png;base64,iVBORw0KGgo=",
            "PK\x03\x04 zipped content",
            "%PDF-1.7 binary stream",
            "normal start \x00\x01 then garbage",
            "File: report.pdf\nType: application/pdf\nSize: 1024 bytes",
        ],
    )
    def test_binary(self, text):
        assert is_likely_binary(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "A perfectly ordinary paragraph about clustering.",
            "Tabs\tand\nnewlines\r\nare fine",
            "File: notes\nType: memo\nSize: large\n" + "line\n" * 12,
        ],
    )
    def test_text(self, text):
        assert is_likely_binary(text) is False

    def test_control_characters_after_first_100_ignored(self):
        assert is_likely_binary("a" * 100 + "\x00") is False


class TestPrepareDocuments:
    def test_filters_and_keeps_positions(self):
        documents = [
            "First valid document text.",
            None,
            42,
            "    \n\t  ",
            "short",
            "%PDF-1.4 header",
            "Second valid document text.",
        ]
        texts, indices = prepare_documents(documents)
        assert texts == ["First valid document text.", "Second valid document text."]
        assert indices == [0, 6]

    def test_min_length(self):
        texts, indices = prepare_documents(["abcd", "abcdefgh"], min_length=5)
        assert texts == ["abcdefgh"]
        assert indices == [1]

    def test_empty(self):
        assert prepare_documents([]) == ([], [])
