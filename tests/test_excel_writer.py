#!/usr/bin/env python3
"""
Tests for Excel writer formatting helpers.
"""

from __future__ import annotations

import pytest
from openpyxl import load_workbook

from rtparse import ExcelSheetData, ParseResult, write_excel_workbook, write_results_workbook
from rtparse.excel_writer import failed_row, result_rows


def test_excel_writer_bolds_header_and_highlights_rows(tmp_path):
    output_path = tmp_path / "out.xlsx"
    sheet = ExcelSheetData(
        name="Test",
        headers=["a", "b"],
        rows=[[1, 2], [3, 4]],
        highlight_row=lambda row: row[0] == 3,
    )

    write_excel_workbook(output_path, [sheet])

    wb = load_workbook(output_path)
    try:
        ws = wb["Test"]
        assert ws.cell(row=1, column=1).font.bold is True
        assert ws.cell(row=2, column=1).fill.fgColor.rgb != "00FFFF00"
        assert ws.cell(row=3, column=1).fill.fgColor.rgb == "00FFFF00"
        assert "TestTable" in ws.tables
    finally:
        wb.close()


def test_excel_writer_requires_a_sheet(tmp_path):
    with pytest.raises(ValueError):
        write_excel_workbook(tmp_path / "out.xlsx", [])


def test_result_rows_flatten_lists_and_append_error():
    headers, rows = result_rows(
        ["Movie 2019", "bad"],
        [ParseResult(title="Movie", year="2019", audio=["DTS", "AAC"]), ParseResult(error="boom")],
    )

    assert headers[0] == "input"
    assert headers[-1] == "error"
    assert "3d" in headers

    first = dict(zip(headers, rows[0]))
    assert first["input"] == "Movie 2019"
    assert first["audio"] == "DTS, AAC"
    assert first["error"] == ""
    assert failed_row(rows[0]) is False
    assert failed_row(rows[1]) is True


def test_write_results_workbook(tmp_path):
    output_path = write_results_workbook(
        tmp_path / "reports" / "results.xlsx",
        ["The.Movie.2023"],
        [ParseResult(title="The Movie", year="2023")],
    )

    wb = load_workbook(output_path)
    try:
        ws = wb["Results"]
        headers = [cell.value for cell in ws[1]]
        values = dict(zip(headers, [cell.value for cell in ws[2]]))
        assert values["input"] == "The.Movie.2023"
        assert values["title"] == "The Movie"
        assert values["year"] == "2023"
    finally:
        wb.close()
