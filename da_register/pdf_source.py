from __future__ import annotations

from io import BytesIO
from typing import List

import pdfplumber

from da_register.row_assembler import Page, TextFragment

COORDINATE_PRECISION = 3


class DocumentDecodeError(RuntimeError):
    pass


def _fragment_from_word(page_index: int, word: dict) -> TextFragment | None:
    text = str(word.get("text", ""))
    if not text.strip():
        return None
    return TextFragment(
        page=page_index,
        x=round(float(word.get("x0", 0.0)), COORDINATE_PRECISION),
        y=round(float(word.get("top", 0.0)), COORDINATE_PRECISION),
        runs=(text,),
    )


def pages_from_pdf(pdf: pdfplumber.PDF) -> List[Page]:
    pages: List[Page] = []
    for page_index, page in enumerate(pdf.pages):
        # Blank characters are kept so that a phrase in one cell stays one fragment.
        words = page.extract_words(
            keep_blank_chars=True,
            use_text_flow=True,
        )
        texts: List[TextFragment] = []
        for word in words or []:
            fragment = _fragment_from_word(page_index, word)
            if fragment is not None:
                texts.append(fragment)
        pages.append(Page(texts=texts))
    return pages


def decode_pdf(pdf_bytes: bytes) -> List[Page]:
    """Decode a PDF into positioned text fragments, one `Page` per PDF page."""
    if not pdf_bytes:
        raise DocumentDecodeError("Document is empty.")
    try:
        with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
            return pages_from_pdf(pdf)
    except DocumentDecodeError:
        raise
    except Exception as exc:
        raise DocumentDecodeError(f"Failed to decode document: {exc}") from exc
