"""Value objects consumed by the renderer.

Every constructor here is tolerant: payloads come straight from JSON request
bodies or database rows, so missing keys, ``None`` and non-numeric strings
degrade to empty text or zero instead of raising.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .formatting import safe_float

DOCUMENT_TYPES = ("Invoice", "Quote", "Proposal", "Contract", "SLA")
PDF_CONTENT_TYPE = "application/pdf"


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return str(value)


def _number(payload: Mapping[str, Any], key: str) -> float:
    return safe_float(payload.get(key) or 0)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class CompanyInfo:
    name: str = ""
    address: str = ""
    email: str = ""
    abn: str = ""
    logo: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "CompanyInfo":
        data = _mapping(payload)
        return cls(
            name=_text(data, "name"),
            address=_text(data, "address"),
            email=_text(data, "email"),
            abn=_text(data, "abn"),
            logo=_text(data, "logo"),
        )


@dataclass(frozen=True)
class Customer:
    name: str = ""
    email: str = ""
    address: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "Customer":
        data = _mapping(payload)
        return cls(
            name=_text(data, "name"),
            email=_text(data, "email"),
            address=_text(data, "address"),
        )


@dataclass(frozen=True)
class DocumentItem:
    description: str = ""
    quantity: float = 0.0
    price: float = 0.0

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    @classmethod
    def from_dict(cls, payload: Any) -> "DocumentItem":
        data = _mapping(payload)
        return cls(
            description=_text(data, "description"),
            quantity=_number(data, "quantity"),
            price=_number(data, "price"),
        )


@dataclass(frozen=True)
class DocumentData:
    doc_number: str = ""
    type: str = ""
    customer: Customer = field(default_factory=Customer)
    items: Tuple[DocumentItem, ...] = ()
    issue_date: str = ""
    due_date: str = ""
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    notes: str = ""
    template_id: str = ""

    @property
    def tax_amount(self) -> float:
        return self.subtotal * self.tax / 100

    @classmethod
    def from_dict(cls, payload: Any) -> "DocumentData":
        data = _mapping(payload)
        raw_items = data.get("items") or []
        if not isinstance(raw_items, (list, tuple)):
            raw_items = []
        return cls(
            doc_number=_text(data, "doc_number"),
            type=_text(data, "type"),
            customer=Customer.from_dict(data.get("customer")),
            items=tuple(DocumentItem.from_dict(item) for item in raw_items),
            issue_date=_text(data, "issue_date"),
            due_date=_text(data, "due_date"),
            subtotal=_number(data, "subtotal"),
            tax=_number(data, "tax"),
            total=_number(data, "total"),
            notes=_text(data, "notes"),
            template_id=_text(data, "template_id"),
        )


def attachment_filename(doc_type: str, doc_number: str) -> str:
    return f"{doc_type}-{doc_number or 'draft'}.pdf"


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    content_type: str = PDF_CONTENT_TYPE

    def to_dict(self) -> Dict[str, str]:
        return {
            "filename": self.filename,
            "content": base64.b64encode(self.content).decode("ascii"),
            "content_type": self.content_type,
        }


@dataclass(frozen=True)
class BundleItem:
    """One document of a proposal bundle; ``type`` names the attachment."""

    type: str
    data: DocumentData
    included: bool = False

    @classmethod
    def from_dict(cls, payload: Any) -> "BundleItem":
        data = _mapping(payload)
        document = DocumentData.from_dict(data.get("data"))
        return cls(
            type=_text(data, "type") or document.type,
            data=document,
            included=bool(data.get("included")),
        )


def coerce_document(value: Any) -> DocumentData:
    if isinstance(value, DocumentData):
        return value
    return DocumentData.from_dict(value)


def coerce_company(value: Optional[Any]) -> CompanyInfo:
    if isinstance(value, CompanyInfo):
        return value
    return CompanyInfo.from_dict(value)


def coerce_bundle(values: Any) -> List[BundleItem]:
    if not isinstance(values, (list, tuple)):
        return []
    return [v if isinstance(v, BundleItem) else BundleItem.from_dict(v) for v in values]
