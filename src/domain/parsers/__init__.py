"""Pure parsers for problem URLs and spreadsheet grids."""

from .spreadsheet import find_header_row, grid_to_rows, parse_grid, row_to_record
from .url_parser import URLParser, extract_slugs, slug_to_title, title_to_slug

__all__ = [
    "URLParser",
    "extract_slugs",
    "find_header_row",
    "grid_to_rows",
    "parse_grid",
    "row_to_record",
    "slug_to_title",
    "title_to_slug",
]
