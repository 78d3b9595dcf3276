import base64
import unittest

from invoicy_pdf.models import (
    Attachment,
    BundleItem,
    CompanyInfo,
    DocumentData,
    DocumentItem,
    attachment_filename,
    coerce_bundle,
)


class DocumentDataTests(unittest.TestCase):
    def test_from_dict_defaults_missing_fields(self) -> None:
        document = DocumentData.from_dict({})

        self.assertEqual(document.doc_number, "")
        self.assertEqual(document.type, "")
        self.assertEqual(document.items, ())
        self.assertEqual(document.subtotal, 0.0)
        self.assertEqual(document.notes, "")
        self.assertEqual(document.customer.name, "")

    def test_from_dict_tolerates_none_and_bad_numbers(self) -> None:
        document = DocumentData.from_dict(
            {
                "doc_number": None,
                "customer": None,
                "items": [{"description": None, "quantity": "2", "price": "oops"}, None],
                "subtotal": None,
                "tax": "10",
                "total": "",
            }
        )

        self.assertEqual(document.doc_number, "")
        self.assertEqual(document.items[0], DocumentItem(description="", quantity=2.0, price=0.0))
        self.assertEqual(document.items[1], DocumentItem())
        self.assertEqual(document.tax, 10.0)
        self.assertEqual(document.total, 0.0)

    def test_items_keep_input_order(self) -> None:
        document = DocumentData.from_dict(
            {"items": [{"description": "b"}, {"description": "a"}, {"description": "c"}]}
        )
        self.assertEqual([item.description for item in document.items], ["b", "a", "c"])

    def test_non_list_items_are_ignored(self) -> None:
        self.assertEqual(DocumentData.from_dict({"items": "nope"}).items, ())

    def test_tax_amount_ignores_total(self) -> None:
        document = DocumentData(subtotal=100, tax=10, total=5)
        self.assertEqual(document.tax_amount, 10.0)

    def test_line_total(self) -> None:
        self.assertEqual(DocumentItem(quantity=3, price=2.5).line_total, 7.5)


class CompanyInfoTests(unittest.TestCase):
    def test_from_dict(self) -> None:
        company = CompanyInfo.from_dict({"name": "Acme Co", "abn": 123, "logo": None})

        self.assertEqual(company.name, "Acme Co")
        self.assertEqual(company.abn, "123")
        self.assertEqual(company.logo, "")

    def test_from_non_mapping(self) -> None:
        self.assertEqual(CompanyInfo.from_dict("Acme"), CompanyInfo())


class AttachmentTests(unittest.TestCase):
    def test_filename_uses_draft_without_number(self) -> None:
        self.assertEqual(attachment_filename("Invoice", "INV-001"), "Invoice-INV-001.pdf")
        self.assertEqual(attachment_filename("Quote", ""), "Quote-draft.pdf")

    def test_to_dict_base64_encodes_content(self) -> None:
        attachment = Attachment(filename="Invoice-1.pdf", content=b"%PDF-1.4")
        payload = attachment.to_dict()

        self.assertEqual(payload["filename"], "Invoice-1.pdf")
        self.assertEqual(payload["content_type"], "application/pdf")
        self.assertEqual(base64.b64decode(payload["content"]), b"%PDF-1.4")


class BundleItemTests(unittest.TestCase):
    def test_type_falls_back_to_document_type(self) -> None:
        item = BundleItem.from_dict({"data": {"type": "Quote"}})

        self.assertEqual(item.type, "Quote")
        self.assertFalse(item.included)

    def test_included_flag_is_coerced(self) -> None:
        self.assertTrue(BundleItem.from_dict({"included": 1}).included)
        self.assertFalse(BundleItem.from_dict({"included": None}).included)

    def test_coerce_bundle(self) -> None:
        items = coerce_bundle([{"type": "invoice", "data": {}, "included": False}])

        self.assertEqual(len(items), 1)
        self.assertFalse(items[0].included)
        self.assertEqual(coerce_bundle(None), [])


if __name__ == "__main__":
    unittest.main()
