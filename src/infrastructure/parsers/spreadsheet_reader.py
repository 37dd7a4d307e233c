"""Decode xlsx/xls/csv bytes into a raw grid of cell values."""

import csv
import io
from typing import Any

import pandas as pd
from loguru import logger

from domain.exceptions import FileParseError, UnsupportedFormatError

Grid = list[list[Any]]

_EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}


def _frame_to_grid(frame: pd.DataFrame) -> Grid:
    frame = frame.astype(object).where(pd.notna(frame), None)
    grid = frame.values.tolist()
    # Trailing empty cells come from ragged rows
    for row in grid:
        while row and row[-1] is None:
            row.pop()
    return [row for row in grid if row]


def _read_csv(data: bytes) -> Grid:
    text = data.decode("utf-8-sig", errors="replace")
    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as e:
        raise FileParseError(f"Failed to parse CSV file: {e}", "csv") from e
    return [row for row in rows if any(cell.strip() for cell in row)]


def read_grid(data: bytes, extension: str) -> Grid:
    """First sheet of a workbook (or the CSV) as rows of cells, no header inference."""
    extension = extension.lower()
    if extension == "csv":
        grid = _read_csv(data)
        logger.debug(f"Decoded csv grid with {len(grid)} row(s)")
        return grid

    engine = _EXCEL_ENGINES.get(extension)
    if engine is None:
        raise UnsupportedFormatError(f"*.{extension}")

    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, engine=engine)
    except Exception as e:
        logger.error(f"Failed to decode {extension} workbook: {e}")
        raise FileParseError(
            f"Failed to parse {extension.upper()} file. Check that it is a valid spreadsheet: {e}",
            extension,
        ) from e

    grid = _frame_to_grid(frame)
    logger.debug(f"Decoded {extension} grid with {len(grid)} row(s)")
    return grid
