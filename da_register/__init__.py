"""
Scraper for the Adelaide Hills Council development application register.

The register is published as a PDF whose table has no ruling lines, so the
rows and columns are rebuilt from the positions of the decoded text:
  * grouping text fragments into visual rows (`row_assembler.assemble_rows`)
  * anchoring continuation lines to application rows (`table_reconstructor`)
  * mapping the rebuilt rows to applications (`record_mapper.map_records`)
  * running the fetch/decode/store loop (`pipeline.scrape_register`)
"""

from .row_assembler import Cell, Page, Row, TextFragment, assemble_rows
from .table_reconstructor import (
    DEFAULT_LAYOUT,
    IgnoredText,
    Reconstruction,
    TableLayout,
    convert_pages_to_records,
    is_application_number,
    reconstruct_table,
)
from .record_mapper import DevelopmentApplication, map_records, parse_received_date

__all__ = [
    "Cell",
    "DEFAULT_LAYOUT",
    "DevelopmentApplication",
    "IgnoredText",
    "Page",
    "Reconstruction",
    "Row",
    "TableLayout",
    "TextFragment",
    "assemble_rows",
    "convert_pages_to_records",
    "is_application_number",
    "map_records",
    "parse_received_date",
    "reconstruct_table",
]
