"""Tests covering the sales and returns reports and their exports."""

from datetime import timedelta
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework.test import APIClient

from ..models import SellerParty, StaffProfile
from ..services.returns import post_return
from ..services.sales import post_sale
from . import create_item, create_staff_user


class ReportTests(TestCase):
    def setUp(self):
        self.super_admin = create_staff_user("owner", StaffProfile.ROLE_SUPER_ADMIN)
        self.sales = create_staff_user("clerk")
        self.client = APIClient()
        self.client.force_authenticate(user=self.super_admin)

        self.seller = SellerParty.objects.create(party_name="Acme Corp")
        self.bolt = create_item("Bolt", quantity=20)
        self.cable = create_item("Cable", sale_rate=Decimal("118.00"), purchase_rate=Decimal("90.00"), quantity=5)

        post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": self.bolt.id, "quantity": 3}],
            payment_status="partially_paid",
            paid_amount=Decimal("10.00"),
        )
        post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": self.cable.id, "quantity": 1}],
            payment_status="fully_paid",
            with_gst=True,
        )
        post_return(
            party_type="seller",
            party_id=self.seller.id,
            lines=[{"item_id": self.bolt.id, "quantity": 1}],
            reason="Damaged",
        )

    def test_sales_report_defaults_to_today(self):
        response = self.client.get("/api/reports/sales/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["from_date"], str(timezone.localdate()))
        summary = response.data["summary"]
        self.assertEqual(summary["total_transactions"], 2)
        self.assertEqual(summary["with_gst_count"], 1)
        self.assertEqual(summary["without_gst_count"], 1)
        self.assertEqual(summary["total_sales"], Decimal("148.00"))
        self.assertEqual(summary["total_tax"], Decimal("18.00"))
        self.assertEqual(summary["total_paid"], Decimal("128.00"))
        self.assertEqual(summary["total_balance"], Decimal("20.00"))
        self.assertEqual(summary["total_profit"], Decimal("40.00"))
        self.assertEqual(len(response.data["transactions"]), 2)

    def test_profit_is_hidden_from_other_roles(self):
        self.client.force_authenticate(user=self.sales)

        response = self.client.get("/api/reports/sales/")

        self.assertIsNone(response.data["summary"]["total_profit"])

    def test_gst_filter(self):
        response = self.client.get("/api/reports/sales/", {"gst_filter": "with_gst"})

        self.assertEqual(response.data["summary"]["total_transactions"], 1)
        self.assertEqual(response.data["transactions"][0]["with_gst"], True)

        response = self.client.get("/api/reports/sales/", {"gst_filter": "everything"})
        self.assertEqual(response.status_code, 400)

    def test_date_range_excludes_other_days(self):
        yesterday = timezone.localdate() - timedelta(days=1)

        response = self.client.get(
            "/api/reports/sales/",
            {"from_date": str(yesterday), "to_date": str(yesterday)},
        )

        self.assertEqual(response.data["summary"]["total_transactions"], 0)
        self.assertEqual(response.data["summary"]["total_sales"], Decimal("0"))

    def test_invalid_dates_are_rejected(self):
        today = timezone.localdate()

        bad = self.client.get("/api/reports/sales/", {"from_date": "31-01-2024"})
        reversed_range = self.client.get(
            "/api/reports/sales/",
            {"from_date": str(today), "to_date": str(today - timedelta(days=1))},
        )

        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.data["code"], "invalid_argument")
        self.assertEqual(reversed_range.status_code, 400)

    def test_sales_report_excel_export(self):
        response = self.client.get("/api/reports/sales/", {"export_format": "xlsx"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Content-Type"],
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        workbook = load_workbook(BytesIO(response.content))
        worksheet = workbook.active
        self.assertEqual(worksheet["A1"].value, "Sales Report")
        self.assertEqual(worksheet["D5"].value, "Acme Corp")
        labels = [row[3] for row in worksheet.iter_rows(values_only=True)]
        self.assertIn("Total Profit", labels)

    def test_sales_report_pdf_export(self):
        response = self.client.get("/api/reports/sales/", {"export_format": "pdf"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_returns_report(self):
        response = self.client.get("/api/reports/returns/", {"party_type": "seller"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["summary"]["total_transactions"], 1)
        self.assertEqual(response.data["summary"]["total_quantity"], 1)
        self.assertEqual(response.data["summary"]["total_returns"], Decimal("10.00"))
        self.assertEqual(response.data["transactions"][0]["reason"], "Damaged")

        response = self.client.get("/api/reports/returns/", {"party_type": "buyer"})
        self.assertEqual(response.data["summary"]["total_transactions"], 0)

    def test_returns_report_excel_export(self):
        response = self.client.get("/api/reports/returns/", {"export_format": "excel"})

        self.assertEqual(response.status_code, 200)
        worksheet = load_workbook(BytesIO(response.content)).active
        self.assertEqual(worksheet["A1"].value, "Returns Report")
        self.assertEqual(worksheet["E5"].value, "Bolt")
        self.assertEqual(worksheet["F5"].value, 1)
