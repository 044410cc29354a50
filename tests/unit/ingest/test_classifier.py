"""Tests for the format classifier."""

from __future__ import annotations

import pytest

from docchat.ingest.classifier import (
    ACCEPTED_EXTENSIONS,
    DOCX_MIME,
    FormatTag,
    classify,
    extension_of,
)

# ------------------------------------------------------------------
# Extension rules
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("notes.txt", FormatTag.PLAIN_TEXT),
        ("notes.md", FormatTag.MARKDOWN),
        ("data.csv", FormatTag.CSV),
        ("letter.docx", FormatTag.DOCX),
        ("paper.pdf", FormatTag.PDF),
        ("NOTES.MD", FormatTag.MARKDOWN),
        ("Report.Final.DocX", FormatTag.DOCX),
    ],
)
def test_known_extensions(filename, expected):
    assert classify(filename, "") == expected


def test_markdown_with_empty_mime():
    # browsers commonly report '' for .md uploads
    assert classify("notes.md", "") == FormatTag.MARKDOWN


def test_markdown_declared_as_plain_text():
    assert classify("notes.md", "text/plain") == FormatTag.MARKDOWN


def test_extension_wins_over_conflicting_mime():
    assert classify("data.csv", "application/pdf") == FormatTag.CSV


def test_unknown_extension_is_unsupported_even_with_text_mime():
    assert classify("report.doc", "application/msword") == FormatTag.UNSUPPORTED
    assert classify("script.py", "text/plain") == FormatTag.UNSUPPORTED


# ------------------------------------------------------------------
# MIME fallback (no extension)
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "mime, expected",
    [
        ("text/plain", FormatTag.PLAIN_TEXT),
        ("text/markdown", FormatTag.MARKDOWN),
        ("text/csv", FormatTag.CSV),
        ("application/vnd.ms-excel", FormatTag.CSV),
        (DOCX_MIME, FormatTag.DOCX),
        ("application/pdf", FormatTag.PDF),
        ("text/plain; charset=utf-8", FormatTag.PLAIN_TEXT),
        ("TEXT/CSV", FormatTag.CSV),
        ("text/x-log", FormatTag.PLAIN_TEXT),
    ],
)
def test_mime_used_without_extension(mime, expected):
    assert classify("README", mime) == expected


def test_no_extension_no_mime_is_unsupported():
    assert classify("README", "") == FormatTag.UNSUPPORTED


def test_binary_mime_is_unsupported():
    assert classify("blob", "application/octet-stream") == FormatTag.UNSUPPORTED


def test_dotfile_has_no_extension():
    assert extension_of(".env") == ""
    assert classify(".env", "text/plain") == FormatTag.PLAIN_TEXT


def test_trailing_dot_has_no_extension():
    assert extension_of("notes.") == ""


def test_accepted_extensions():
    assert set(ACCEPTED_EXTENSIONS) == {".txt", ".pdf", ".md", ".csv", ".docx"}
