"""
extractor — turns a page's positioned text runs into tags and raw text.

Public interface:
    extract_page(page, settings)        — one page, pure function
    iter_document(pages, settings)      — page results in page order
    extract_document(pages, settings)   — all pages + cross-page OPC links
    PageInput, PageResult, DocumentResult, ExtractionWarning, WarningCode

Single passes (usable on their own, each takes and returns a ConsumedSet):
    build_tokens, match_instruments, classify_tokens,
    select_drawing_number, link_off_page_connectors

Geometry:
    normalize_bbox / denormalize_bbox / text_item_bbox

Typical use:
    from extractor import PageInput, extract_document

    pages  = [PageInput(page_number=1, items=items, rotation=0,
                        view_box=(0, 0, 1190, 842))]
    result = extract_document(pages, settings)
    for tag in result.tags:
        print(tag.category, tag.text, tag.bbox)
"""

from .types import (
    ConsumedSet,
    ExtractionWarning,
    PageInput,
    PageResult,
    PassResult,
    Token,
    ViewBox,
    WarningCode,
)
from .normalizer import (
    build_tokens,
    denormalize_bbox,
    normalize_bbox,
    normalize_rotation,
    pdf_bbox,
    text_item_bbox,
)
from .instruments import match_instruments
from .classifier import CLASSIFIER_ORDER, classify_tokens
from .drawing_number import reference_corner, select_drawing_number
from .offpage import link_off_page_connectors
from .text import clean_tag_text, remove_whitespace, strip_whitespace
from .pipeline import DocumentResult, extract_document, extract_page, iter_document

__all__ = [
    "ConsumedSet",
    "ExtractionWarning",
    "PageInput",
    "PageResult",
    "PassResult",
    "Token",
    "ViewBox",
    "WarningCode",
    "build_tokens",
    "denormalize_bbox",
    "normalize_bbox",
    "normalize_rotation",
    "pdf_bbox",
    "text_item_bbox",
    "match_instruments",
    "CLASSIFIER_ORDER",
    "classify_tokens",
    "reference_corner",
    "select_drawing_number",
    "link_off_page_connectors",
    "clean_tag_text",
    "remove_whitespace",
    "strip_whitespace",
    "DocumentResult",
    "extract_document",
    "extract_page",
    "iter_document",
]
