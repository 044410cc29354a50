"""Tests for the CSV parser."""

from __future__ import annotations

import pytest

from docchat.errors import ParseError
from docchat.ingest.csv_parser import CsvParser


def _parse(raw: str, name: str = "data.csv"):
    return CsvParser().parse(raw.encode("utf-8"), name)


def test_simple_table_layout():
    result = _parse("A,B\n1,2")
    assert result.text == (
        "CSV Data from data.csv\n"
        "\n"
        "Total rows: 1\n"
        "Columns: A, B\n"
        "\n"
        "Data:\n"
        + "-" * 50
        + "\n"
        "\n"
        "Row 1:\n"
        "  A: 1\n"
        "  B: 2\n"
    )
    assert result.warnings == []


def test_each_row_listed_with_values():
    result = _parse("name,age\nAda,36\nGrace,45\n", "people.csv")
    assert "CSV Data from people.csv" in result.text
    assert "Total rows: 2" in result.text
    assert "Row 2:\n  name: Grace\n  age: 45" in result.text


def test_quoted_fields_with_commas_and_newlines():
    result = _parse('title,notes\n"Hello, world","line1\nline2"\n')
    assert "  title: Hello, world" in result.text
    assert "  notes: line1\nline2" in result.text


def test_blank_lines_are_skipped():
    result = _parse("A,B\n\n1,2\n\n")
    assert "Total rows: 1" in result.text
    assert result.warnings == []


def test_short_row_padded_with_warning():
    result = _parse("A,B,C\n1,2\n")
    assert "  C: \n" in result.text
    assert result.warnings == ["Line 2: expected 3 fields, got 2 (missing values left empty)"]


def test_long_row_keeps_extra_values():
    result = _parse("A,B\n1,2,3,4\n")
    assert "  (extra): 3, 4" in result.text
    assert result.warnings == ["Line 2: expected 2 fields, got 4 (extra values kept)"]


def test_blank_header_gets_placeholder_name():
    result = _parse("A,,C\n1,2,3\n")
    assert "Columns: A, Column 2, C" in result.text
    assert "  Column 2: 2" in result.text


def test_header_only_has_zero_rows():
    result = _parse("A,B\n")
    assert "Total rows: 0" in result.text


def test_bom_is_not_part_of_first_header():
    result = CsvParser().parse("\ufeffA,B\n1,2\n".encode("utf-8"), "bom.csv")
    assert "Columns: A, B" in result.text


def test_empty_file_is_parse_error():
    with pytest.raises(ParseError, match="no header row"):
        _parse("")


def test_whitespace_only_file_is_parse_error():
    with pytest.raises(ParseError):
        _parse("\n  \n,\n")


def test_duplicate_headers_keep_every_value():
    result = _parse("name,name\nAda,Lovelace\n")
    assert "Columns: name, name_1" in result.text
    assert "  name: Ada\n  name_1: Lovelace" in result.text


def test_renamed_header_does_not_clash_with_existing_column():
    result = _parse("a,a,a_1\n1,2,3\n")
    assert "Columns: a, a_2, a_1" in result.text
    assert "  a: 1\n  a_2: 2\n  a_1: 3" in result.text
