#!/usr/bin/env python3
"""
Excel reports for batches of parse results.

Thin wrappers around openpyxl: one sheet per report, header row, auto column
widths, a table style and highlighting of rows whose parse failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from .result import ParseResult


RowPredicate = Callable[[Sequence[Any]], bool]

MAX_COLUMN_WIDTH = 50


@dataclass(frozen=True)
class ExcelSheetData:
    """
    Describes a sheet to be written to the workbook.

    Attributes:
        name: Sheet/tab name.
        headers: Ordered list of column headers.
        rows: Row values already ordered to match headers.
        highlight_row: Optional predicate; matching rows get a yellow fill.
    """

    name: str
    headers: Sequence[str]
    rows: Sequence[Sequence[Any]]
    highlight_row: Optional[RowPredicate] = None


def _cell_value(value: Any) -> Any:
    """Flatten list values into comma separated text for a single cell."""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return value


def result_rows(
    titles: Sequence[str], results: Sequence[ParseResult]
) -> Tuple[List[str], List[List[Any]]]:
    """
    Convert parse results into sheet headers and rows.

    The first column holds the input title, followed by one column per
    result key and a trailing error column.

    Returns:
        (headers, rows)
    """
    keys = list(ParseResult().to_dict().keys())
    headers = ["input"] + keys + ["error"]

    rows = []
    for title, result in zip(titles, results):
        data = result.to_dict()
        row = [title] + [_cell_value(data.get(key)) for key in keys] + [result.error or ""]
        rows.append(row)
    return headers, rows


def failed_row(row: Sequence[Any]) -> bool:
    """Highlight predicate for rows produced by result_rows."""
    return bool(row) and bool(row[-1])


def _write_excel_sheet(ws, sheet: ExcelSheetData) -> None:
    ws.title = sheet.name

    headers = list(sheet.headers)
    header_font = Font(bold=True)
    for col_idx, header in enumerate(headers, 1):
        ws.cell(row=1, column=col_idx, value=header).font = header_font

    yellow_fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")

    for row_idx, row in enumerate(sheet.rows, 2):
        highlight = sheet.highlight_row is not None and sheet.highlight_row(row)
        for col_idx, value in enumerate(row, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if highlight:
                cell.fill = yellow_fill

    for col_idx in range(1, len(headers) + 1):
        col_letter = get_column_letter(col_idx)
        max_length = len(headers[col_idx - 1])

        for cell in ws[col_letter]:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))

        ws.column_dimensions[col_letter].width = min(max_length + 2, MAX_COLUMN_WIDTH)

    if sheet.rows:
        last_col = get_column_letter(len(headers))
        table = Table(
            displayName="".join(ch for ch in sheet.name if ch.isalnum()) + "Table",
            ref=f"A1:{last_col}{len(sheet.rows) + 1}",
        )
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium9",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False,
        )
        ws.add_table(table)


def write_excel_workbook(output_path: Path | str, sheets: Sequence[ExcelSheetData]) -> Path:
    """
    Write a workbook consisting of the provided sheets.

    Args:
        output_path: Destination path for the workbook.
        sheets: Ordered sheet definitions to render.

    Returns:
        Path to the written workbook.
    """
    if not sheets:
        raise ValueError("At least one sheet must be provided to write a workbook.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    for idx, sheet in enumerate(sheets):
        ws = wb.active if idx == 0 else wb.create_sheet()
        _write_excel_sheet(ws, sheet)

    wb.save(output_path)
    return output_path


def write_results_workbook(
    output_path: Path | str, titles: Sequence[str], results: Sequence[ParseResult]
) -> Path:
    """Write a single-sheet report of parse results, failed rows highlighted."""
    headers, rows = result_rows(titles, results)
    sheet = ExcelSheetData(name="Results", headers=headers, rows=rows, highlight_row=failed_row)
    return write_excel_workbook(output_path, [sheet])
