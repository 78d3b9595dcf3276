"""Document PDF rendering entry points."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .canvas import Canvas
from .config import PAGE_FORMAT, PAGE_UNIT
from .layout import draw_modern_template
from .models import (
    Attachment,
    CompanyInfo,
    DocumentData,
    attachment_filename,
    coerce_bundle,
    coerce_company,
    coerce_document,
)
from .pdf_canvas import FpdfCanvas

logger = logging.getLogger(__name__)

TemplateFn = Callable[[Canvas, DocumentData, CompanyInfo], None]

DEFAULT_TEMPLATE = "modern"
TEMPLATES: Dict[str, TemplateFn] = {
    DEFAULT_TEMPLATE: draw_modern_template,
}


def resolve_template(template_id: str) -> TemplateFn:
    key = (template_id or DEFAULT_TEMPLATE).strip().lower()
    template = TEMPLATES.get(key)
    if template is None:
        logger.debug("Unknown template %r, using %s", template_id, DEFAULT_TEMPLATE)
        template = TEMPLATES[DEFAULT_TEMPLATE]
    return template


class DocumentRenderer:
    def __init__(
        self,
        document: DocumentData,
        company_info: CompanyInfo,
        page_format: str = PAGE_FORMAT,
        page_unit: str = PAGE_UNIT,
    ) -> None:
        self.document = document
        self.company_info = company_info
        self.canvas = FpdfCanvas(page_format, page_unit)

    def render(self) -> bytes:
        template = resolve_template(self.document.template_id)
        template(self.canvas, self.document, self.company_info)
        return self.canvas.output()


def render_document(document: Any, company_info: Any) -> bytes:
    return DocumentRenderer(coerce_document(document), coerce_company(company_info)).render()


def render_attachment(
    document: Any,
    company_info: Any,
    doc_type: Optional[str] = None,
) -> Attachment:
    data = coerce_document(document)
    content = render_document(data, company_info)
    return Attachment(
        filename=attachment_filename(doc_type or data.type, data.doc_number),
        content=content,
    )


def render_bundle(items: Iterable[Any], company_info: Any) -> List[Attachment]:
    """Render every included bundle item, in order, as an attachment."""
    company = coerce_company(company_info)
    attachments: List[Attachment] = []
    for item in coerce_bundle(list(items)):
        if not item.included:
            continue
        attachments.append(render_attachment(item.data, company, doc_type=item.type))
    return attachments


def company_from_payload(payload: Mapping[str, Any]) -> CompanyInfo:
    raw = payload.get("companyInfo")
    if raw is None:
        raw = payload.get("company_info")
    return coerce_company(raw)


def render_document_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Process-pool entry point for ``POST /render`` and the CLI."""
    attachment = render_attachment(payload.get("document"), company_from_payload(payload))
    return {"filename": attachment.filename, "content": attachment.content}


def render_bundle_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Process-pool entry point for ``POST /attachments``."""
    bundle = payload.get("bundle") or {}
    attachments = render_bundle(bundle.get("items") or [], company_from_payload(payload))
    return {"attachments": [attachment.to_dict() for attachment in attachments]}
