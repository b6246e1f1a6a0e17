from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class TextFragment:
    page: int
    x: float
    y: float
    runs: Tuple[str, ...]


@dataclass
class Page:
    texts: List[TextFragment] = field(default_factory=list)


@dataclass
class Cell:
    text: str
    x: float


@dataclass
class Row:
    y: float
    cells: List[Cell] = field(default_factory=list)

    def texts(self) -> List[str]:
        return [cell.text for cell in self.cells]


def page_tolerance(fragments: Sequence[TextFragment]) -> float:
    """Smallest vertical gap between two fragments that share an X position.

    Fragments stacked in the same column are roughly one line apart, so this
    approximates the line height of the page. Returns 0.0 when no two
    fragments share an X position.
    """
    by_x: Dict[float, List[TextFragment]] = defaultdict(list)
    for fragment in fragments:
        by_x[fragment.x].append(fragment)

    smallest: Optional[float] = None
    for group in by_x.values():
        for i, first in enumerate(group):
            for j, second in enumerate(group):
                if i == j:
                    continue
                distance = abs(second.y - first.y)
                if smallest is None or distance < smallest:
                    smallest = distance
    return smallest if smallest is not None else 0.0


def _cells_for(fragment: TextFragment) -> List[Cell]:
    return [Cell(text=run, x=fragment.x) for run in fragment.runs]


def assemble_page_rows(
    fragments: Iterable[TextFragment],
    tolerance: float | None = None,
) -> List[Row]:
    fragments = list(fragments)
    if tolerance is None:
        tolerance = page_tolerance(fragments)

    rows: List[Row] = []
    for fragment in fragments:
        # Newest row first: on dense pages the most recently opened row wins.
        target = next(
            (
                row
                for row in reversed(rows)
                if row.y - tolerance < fragment.y < row.y + tolerance
            ),
            None,
        )
        if target is None:
            target = Row(y=fragment.y)
            rows.append(target)
        target.cells.extend(_cells_for(fragment))

    for row in rows:
        row.cells.sort(key=lambda cell: cell.x)
    rows.sort(key=lambda row: row.y)
    return rows


def assemble_rows(pages: Iterable[Page]) -> List[List[Row]]:
    """Group each page's fragments into rows ordered top to bottom."""
    return [assemble_page_rows(page.texts) for page in pages]
