"""Public package API for billing document PDFs."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .models import Attachment, BundleItem, CompanyInfo, Customer, DocumentData, DocumentItem


def render_document(document: Any, company_info: Any) -> bytes:
    from .rendering import render_document as _render_document

    return _render_document(document, company_info)


def render_attachment(document: Any, company_info: Any, doc_type: Optional[str] = None) -> Attachment:
    from .rendering import render_attachment as _render_attachment

    return _render_attachment(document, company_info, doc_type=doc_type)


def render_bundle(items: Iterable[Any], company_info: Any) -> List[Attachment]:
    from .rendering import render_bundle as _render_bundle

    return _render_bundle(items, company_info)


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "Attachment",
    "BundleItem",
    "CompanyInfo",
    "Customer",
    "DocumentData",
    "DocumentItem",
    "render_attachment",
    "render_bundle",
    "render_document",
    "run",
]
