"""Table rectangle sizing from column content."""

from typing import List

from ..schema.abstraction import Dimension, Table

HEADER_HEIGHT = 40.0
ROW_HEIGHT = 25.0
MIN_WIDTH = 200.0
PADDING = 2.5 * 20  # horizontal padding around the widest text line
NAME_CHAR_WIDTH = 8.0
COLUMN_CHAR_WIDTH = 7.0


def calculate_dimension(table: Table) -> Dimension:
    """Estimate the rendered size of a table.

    Width fits the longest of the table name and the ``name + type`` text of
    each column, never narrower than MIN_WIDTH. Height is the header plus one
    row per column; a table without columns is header-only.
    """
    content_width = len(table.name) * NAME_CHAR_WIDTH
    for column in table.columns:
        column_width = (len(column.name) + len(column.type)) * COLUMN_CHAR_WIDTH
        content_width = max(content_width, column_width)

    width = max(MIN_WIDTH, content_width + PADDING)
    height = HEADER_HEIGHT + len(table.columns) * ROW_HEIGHT
    return Dimension(width=width, height=height)


def calculate_dimensions(tables: List[Table]) -> List[Dimension]:
    return [calculate_dimension(t) for t in tables]
