"""Turn a decoded spreadsheet grid into problem records."""

from typing import Any, Sequence

from loguru import logger

from domain.models import Difficulty, ProblemRecord, Status

from .url_parser import URLParser, slug_to_title, title_to_slug

HEADER_SCAN_ROWS = 10
HEADER_KEYWORDS = ("title", "problem", "link", "url", "name")

COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Problem Name", "Title", "Name", "Problem"),
    "url": ("Link", "URL", "Url", "Slug"),
    "difficulty": ("Difficulty", "Diff", "Level"),
    "status": ("Status", "State"),
    "type": ("Topic", "Type", "Category", "Tags"),
}

DONE_VALUES = {"done", "solved", "ac"}

Row = dict[str, Any]


def _cell_text(value: Any) -> str | None:
    """Normalise a cell to stripped text; blanks become None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def find_header_row(grid: Sequence[Sequence[Any]]) -> int:
    """Index of the first of the leading rows that looks like a header, else 0."""
    for index, row in enumerate(grid[:HEADER_SCAN_ROWS]):
        for cell in row:
            text = _cell_text(cell)
            if text and any(keyword in text.lower() for keyword in HEADER_KEYWORDS):
                return index
    return 0


def grid_to_rows(grid: Sequence[Sequence[Any]]) -> list[Row]:
    """Zip rows after the header against the header labels."""
    if not grid:
        return []

    header_index = find_header_row(grid)
    headers = [_cell_text(cell) or "" for cell in grid[header_index]]
    logger.debug(f"Header row {header_index}: {headers}")

    rows = []
    for raw in grid[header_index + 1 :]:
        row: Row = {}
        for label, value in zip(headers, raw):
            if label and label not in row:
                row[label] = value
        rows.append(row)
    return rows


def get_value(row: Row, aliases: Sequence[str]) -> str | None:
    """Value of the first alias present as a column (case-insensitive)."""
    keys = {key.lower().strip(): key for key in reversed(list(row))}
    for alias in aliases:
        key = keys.get(alias.lower())
        if key is not None:
            return _cell_text(row[key])
    return None


def row_to_record(row: Row, source: str | None = None, host: str | None = None) -> ProblemRecord | None:
    """Build a record from one row; rows with neither name nor URL yield None."""
    name = get_value(row, COLUMN_ALIASES["name"])
    url = get_value(row, COLUMN_ALIASES["url"])
    if not name and not url:
        return None

    # A URL without a usable slug falls back to the title
    slug = (URLParser.slug_from_url(url) if url else "") or title_to_slug(name or "")
    if not slug:
        return None

    title = name or slug_to_title(slug)
    status_text = get_value(row, COLUMN_ALIASES["status"])
    status = Status.DONE if status_text and status_text.lower() in DONE_VALUES else Status.TODO

    record = ProblemRecord(
        title=title,
        title_slug=slug,
        difficulty=Difficulty.parse(get_value(row, COLUMN_ALIASES["difficulty"])),
        type=get_value(row, COLUMN_ALIASES["type"]),
        url=URLParser.build_problem_url(slug, host),
        source_sheets={source} if source else set(),
    )
    record.set_status(status)
    return record


def parse_grid(
    grid: Sequence[Sequence[Any]], source: str | None = None, host: str | None = None
) -> list[ProblemRecord]:
    """Records for every usable row of a grid, in row order."""
    records = []
    dropped = 0
    for row in grid_to_rows(grid):
        record = row_to_record(row, source, host)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    logger.info(f"Parsed {len(records)} problem(s) from grid ({dropped} row(s) skipped)")
    return records
