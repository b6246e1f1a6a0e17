from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from da_register.row_assembler import Cell, Page, Row, assemble_rows

# "nn/n" through "nn/nnnn", e.g. "17/67" or "17/1231".
APPLICATION_NUMBER_PATTERN = re.compile(r"^[0-9][0-9]/[0-9]{1,4}$")


@dataclass(frozen=True)
class TableLayout:
    key_column: int = 2
    min_cells: int = 3
    heading_prefixes: Tuple[str, ...] = ("Development Application Register", "- Page")
    heading_exact: Tuple[str, ...] = ("Applicant Name", "Address")
    column_tolerance: float = 0.1


DEFAULT_LAYOUT = TableLayout()


@dataclass(frozen=True)
class IgnoredText:
    """A continuation cell that did not line up with any column."""

    text: str
    x: float
    page: int
    row: Tuple[str, ...]

    def describe(self) -> str:
        return f'Ignored the text "{self.text}" from the row: {list(self.row)}'


@dataclass
class Reconstruction:
    records: List[List[str]] = field(default_factory=list)
    warnings: List[IgnoredText] = field(default_factory=list)


def is_application_number(text: str) -> bool:
    return bool(APPLICATION_NUMBER_PATTERN.fullmatch(text))


def is_heading_row(row: Row, layout: TableLayout = DEFAULT_LAYOUT) -> bool:
    """Document title, page footer or column heading rows."""
    if not row.cells:
        return False
    first = row.cells[0].text.strip()
    if first in layout.heading_exact:
        return True
    return any(first.startswith(prefix) for prefix in layout.heading_prefixes)


def is_key_row(row: Row, layout: TableLayout = DEFAULT_LAYOUT) -> bool:
    if len(row.cells) < max(layout.min_cells, layout.key_column + 1):
        return False
    return is_application_number(row.cells[layout.key_column].text.strip())


def _find_column(key_row: Row, x: float, tolerance: float) -> Optional[Cell]:
    for cell in key_row.cells:
        if abs(cell.x - x) < tolerance:
            return cell
    return None


def reconstruct_table(
    pages_rows: Iterable[Sequence[Row]],
    layout: TableLayout = DEFAULT_LAYOUT,
) -> Reconstruction:
    """Fold continuation rows into the application row above them.

    Each application row calibrates the column positions (by X co-ordinate)
    for the rows that follow it, including rows on later pages, until the
    next application row is found.
    """
    key_rows: List[Row] = []
    warnings: List[IgnoredText] = []
    current: Optional[Row] = None

    for page_index, rows in enumerate(pages_rows):
        for row in rows:
            if is_heading_row(row, layout):
                continue

            if is_key_row(row, layout):
                current = Row(y=row.y, cells=[Cell(text=c.text, x=c.x) for c in row.cells])
                key_rows.append(current)
                continue

            if current is None:
                continue

            for cell in row.cells:
                column = _find_column(current, cell.x, layout.column_tolerance)
                if column is None:
                    warnings.append(
                        IgnoredText(
                            text=cell.text,
                            x=cell.x,
                            page=page_index,
                            row=tuple(row.texts()),
                        )
                    )
                    continue
                column.text += "\n" + cell.text

    return Reconstruction(records=[row.texts() for row in key_rows], warnings=warnings)


def convert_pages_to_records(
    pages: Iterable[Page],
    layout: TableLayout = DEFAULT_LAYOUT,
) -> Reconstruction:
    return reconstruct_table(assemble_rows(pages), layout)
