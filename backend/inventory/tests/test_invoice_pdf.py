from decimal import Decimal

from django.test import TestCase

from ..invoice_pdf import generate_invoice_pdf, split_gst
from ..models import CompanyInfo, SellerParty
from ..services.sales import post_sale
from . import create_item


class InvoicePdfTests(TestCase):
    def setUp(self):
        self.seller = SellerParty.objects.create(
            party_name="Acme Corp",
            mobile_number="9876543210",
            gst_number="29ABCDE1234F1Z5",
        )
        self.item = create_item("Cable", sale_rate=Decimal("118.00"), purchase_rate=Decimal("90.00"), quantity=5)

    def _sale(self, with_gst):
        return post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": self.item.id, "quantity": 2, "discount": Decimal("5.00")}],
            payment_status="partially_paid",
            paid_amount=Decimal("100.00"),
            previous_balance_paid=Decimal("20.00"),
            with_gst=with_gst,
        )

    def test_tax_invoice_renders(self):
        company = CompanyInfo.load()
        company.address = "12 Market Street"
        company.gst_number = "29AAAAA0000A1Z5"
        company.save()

        buffer = generate_invoice_pdf(self._sale(with_gst=True))

        self.assertTrue(buffer.getvalue().startswith(b"%PDF"))

    def test_plain_invoice_renders(self):
        buffer = generate_invoice_pdf(self._sale(with_gst=False))

        self.assertTrue(buffer.getvalue().startswith(b"%PDF"))

    def test_gst_split_adds_back_up(self):
        cgst, sgst = split_gst(Decimal("18.01"))

        self.assertEqual(cgst + sgst, Decimal("18.01"))
        self.assertEqual(split_gst(Decimal("18.00")), (Decimal("9.00"), Decimal("9.00")))
