from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from ..models import OrderSheetEntry, SaleItem, SaleTransaction, SellerParty, StaffProfile
from ..services.errors import Conflict, InvalidArgument, NotFound
from ..services.sales import next_bill_number, post_sale
from . import create_item, create_staff_user


class PostSaleTests(TestCase):
    def setUp(self):
        self.user = create_staff_user("cashier")
        self.seller = SellerParty.objects.create(party_name="Acme", opening_balance=Decimal("100.00"))
        self.item = create_item("Bolt", quantity=20, alert_quantity=5)

    def _sell(self, quantity, **kwargs):
        kwargs.setdefault("payment_status", "fully_paid")
        return post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": self.item.id, "quantity": quantity}],
            user=self.user,
            **kwargs,
        )

    def test_fully_paid_sale_reduces_stock_and_records_payment(self):
        sale = self._sell(3)

        self.item.refresh_from_db()
        self.seller.refresh_from_db()
        self.assertTrue(sale.bill_number.startswith("BILL-"))
        self.assertEqual(sale.total_amount, Decimal("30.00"))
        self.assertEqual(sale.paid_amount, Decimal("30.00"))
        self.assertEqual(sale.balance_amount, Decimal("0.00"))
        self.assertEqual(self.item.quantity, 17)
        self.assertEqual(self.seller.balance_amount, Decimal("100.00"))
        self.assertEqual(self.seller.paid_amount, Decimal("30.00"))
        self.assertEqual(SaleItem.objects.filter(sale=sale).count(), 1)

    def test_partial_payment_leaves_balance_on_the_seller(self):
        sale = self._sell(3, payment_status="partially_paid", paid_amount=Decimal("10.00"))

        self.seller.refresh_from_db()
        self.assertEqual(sale.balance_amount, Decimal("20.00"))
        self.assertEqual(self.seller.balance_amount, Decimal("120.00"))
        self.assertEqual(self.seller.paid_amount, Decimal("10.00"))

    def test_previous_balance_payment_reduces_seller_balance(self):
        sale = self._sell(3, previous_balance_paid=Decimal("50.00"))

        self.seller.refresh_from_db()
        self.assertEqual(sale.total_amount, Decimal("80.00"))
        self.assertEqual(sale.paid_amount, Decimal("80.00"))
        self.assertEqual(self.seller.balance_amount, Decimal("50.00"))

    def test_insufficient_stock_writes_nothing(self):
        with self.assertRaises(Conflict) as ctx:
            self._sell(21)

        self.assertIn("Insufficient stock for Bolt", str(ctx.exception.detail))
        self.item.refresh_from_db()
        self.seller.refresh_from_db()
        self.assertEqual(self.item.quantity, 20)
        self.assertEqual(self.seller.balance_amount, Decimal("100.00"))
        self.assertEqual(SaleTransaction.objects.count(), 0)

    def test_one_short_line_rejects_the_whole_sale(self):
        nut = create_item("Nut", quantity=1)

        with self.assertRaises(Conflict):
            post_sale(
                seller_party_id=self.seller.id,
                lines=[
                    {"item_id": self.item.id, "quantity": 2},
                    {"item_id": nut.id, "quantity": 2},
                ],
                payment_status="fully_paid",
            )

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 20)
        self.assertEqual(SaleItem.objects.count(), 0)

    def test_sale_queues_low_stock_item_for_reorder(self):
        self._sell(16)

        entry = OrderSheetEntry.objects.get(item=self.item)
        self.assertEqual(entry.current_quantity, 4)
        self.assertEqual(entry.required_quantity, 1)
        self.assertEqual(entry.status, OrderSheetEntry.STATUS_PENDING)

    def test_selling_out_updates_the_existing_entry(self):
        self._sell(16)
        self._sell(4)

        entry = OrderSheetEntry.objects.get(item=self.item)
        self.assertEqual(entry.current_quantity, 0)
        self.assertEqual(entry.required_quantity, 5)
        self.assertEqual(OrderSheetEntry.objects.count(), 1)

    def test_gst_sale_splits_tax_out_of_the_rate(self):
        taxed = create_item("Cable", sale_rate=Decimal("118.00"), purchase_rate=Decimal("80.00"), quantity=5)

        sale = post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": taxed.id, "quantity": 1}],
            payment_status="fully_paid",
            with_gst=True,
        )

        line = sale.items.get()
        self.assertEqual(sale.subtotal, Decimal("100.00"))
        self.assertEqual(sale.tax_amount, Decimal("18.00"))
        self.assertEqual(sale.invoice_amount, Decimal("118.00"))
        self.assertEqual(line.tax_rate, Decimal("18"))

    def test_gst_sale_of_exempt_item_carries_no_tax(self):
        exempt = create_item("Rice", sale_rate=Decimal("100.00"), purchase_rate=Decimal("80.00"), tax_rate=Decimal("0"))

        sale = post_sale(
            seller_party_id=self.seller.id,
            lines=[{"item_id": exempt.id, "quantity": 1}],
            payment_status="fully_paid",
            with_gst=True,
        )

        line = sale.items.get()
        self.assertEqual(sale.subtotal, Decimal("100.00"))
        self.assertEqual(sale.tax_amount, Decimal("0.00"))
        self.assertEqual(sale.invoice_amount, Decimal("100.00"))
        self.assertEqual(line.tax_rate, Decimal("0"))
        self.assertEqual(line.tax_amount, Decimal("0.00"))

    def test_overpayment_writes_nothing(self):
        pump = create_item("Pump", sale_rate=Decimal("1000.00"), purchase_rate=Decimal("600.00"), quantity=5)

        with self.assertRaises(InvalidArgument):
            post_sale(
                seller_party_id=self.seller.id,
                lines=[{"item_id": pump.id, "quantity": 1}],
                payment_status="partially_paid",
                paid_amount=Decimal("1200.00"),
            )

        pump.refresh_from_db()
        self.seller.refresh_from_db()
        self.assertEqual(pump.quantity, 5)
        self.assertEqual(self.seller.balance_amount, Decimal("100.00"))
        self.assertEqual(self.seller.paid_amount, Decimal("0.00"))
        self.assertEqual(SaleTransaction.objects.count(), 0)
        self.assertEqual(SaleItem.objects.count(), 0)

    def test_line_rate_and_percentage_discount_override_catalog(self):
        sale = post_sale(
            seller_party_id=self.seller.id,
            lines=[{
                "item_id": self.item.id,
                "quantity": 2,
                "sale_rate": Decimal("12.50"),
                "discount_percentage": Decimal("10"),
            }],
            payment_status="fully_paid",
        )

        line = sale.items.get()
        self.assertEqual(line.discount_type, SaleItem.DISCOUNT_PERCENTAGE)
        self.assertEqual(line.discount, Decimal("2.50"))
        self.assertEqual(line.total_amount, Decimal("22.50"))
        self.assertEqual(sale.discount, Decimal("2.50"))

    def test_bill_numbers_are_unique(self):
        first = self._sell(1)
        second = self._sell(1)

        self.assertNotEqual(first.bill_number, second.bill_number)

    def test_bill_number_suffix_counts_within_the_same_millisecond(self):
        now = datetime(2026, 1, 1, 9, 30, tzinfo=dt_timezone.utc)
        stamp = int(now.timestamp() * 1000)

        self.assertEqual(next_bill_number(now), f"BILL-{stamp}-1")

        sale = self._sell(1)
        SaleTransaction.objects.filter(pk=sale.pk).update(bill_number=f"BILL-{stamp}-1")
        self.assertEqual(next_bill_number(now), f"BILL-{stamp}-2")

    def test_unknown_seller_is_not_found(self):
        with self.assertRaises(NotFound):
            post_sale(
                seller_party_id=99999,
                lines=[{"item_id": self.item.id, "quantity": 1}],
                payment_status="fully_paid",
            )

    def test_unknown_item_is_not_found(self):
        with self.assertRaises(NotFound):
            post_sale(
                seller_party_id=self.seller.id,
                lines=[{"item_id": 99999, "quantity": 1}],
                payment_status="fully_paid",
            )

    def test_repeated_item_lines_are_rejected(self):
        with self.assertRaises(InvalidArgument):
            post_sale(
                seller_party_id=self.seller.id,
                lines=[
                    {"item_id": self.item.id, "quantity": 1},
                    {"item_id": self.item.id, "quantity": 2},
                ],
                payment_status="fully_paid",
            )


class SaleApiTests(TestCase):
    def setUp(self):
        self.user = create_staff_user("seller-desk", StaffProfile.ROLE_SALES)
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.seller = SellerParty.objects.get(party_name="Retail Seller")
        self.item = create_item("Bolt", quantity=5)

    def _payload(self, quantity, **extra):
        payload = {
            "seller_party_id": self.seller.id,
            "items": [{"item_id": self.item.id, "quantity": quantity}],
        }
        payload.update(extra)
        return payload

    def test_create_sale(self):
        response = self.client.post("/api/sales/", self._payload(2), format="json")

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["party_name"], "Retail Seller")
        self.assertEqual(response.data["total_amount"], "20.00")
        self.assertEqual(len(response.data["items"]), 1)
        self.assertEqual(response.data["items"][0]["product_name"], "Bolt")

    def test_insufficient_stock_returns_conflict(self):
        response = self.client.post("/api/sales/", self._payload(6), format="json")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "conflict")
        self.assertEqual(
            response.data["error"],
            "Insufficient stock for Bolt. Available: 5, Requested: 6",
        )

    def test_partial_payment_without_amount_is_invalid(self):
        response = self.client.post(
            "/api/sales/",
            self._payload(1, payment_status="partially_paid"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "invalid_argument")

    def test_paying_more_than_the_grand_total_is_invalid(self):
        response = self.client.post(
            "/api/sales/",
            self._payload(2, payment_status="partially_paid", paid_amount="25.00"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "invalid_argument")
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 5)
        self.assertEqual(SaleTransaction.objects.count(), 0)
        self.assertEqual(SaleItem.objects.count(), 0)

    def test_empty_items_are_invalid(self):
        response = self.client.post(
            "/api/sales/",
            {"seller_party_id": self.seller.id, "items": []},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("details", response.data)

    def test_list_filters_by_seller(self):
        other = SellerParty.objects.create(party_name="Other")
        self.client.post("/api/sales/", self._payload(1), format="json")

        response = self.client.get("/api/sales/", {"seller_party_id": other.id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [])

        response = self.client.get(f"/api/parties/sellers/{self.seller.id}/sales/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

    def test_invoice_pdf(self):
        created = self.client.post("/api/sales/", self._payload(1), format="json")

        response = self.client.get(f"/api/sales/{created.data['id']}/invoice-pdf/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        content = b"".join(response.streaming_content)
        self.assertTrue(content.startswith(b"%PDF"))
