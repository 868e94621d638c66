from io import BytesIO, StringIO

from django.core.management import call_command
from django.test import TestCase
from openpyxl import load_workbook
from rest_framework.test import APIClient

from ..models import Item, OrderSheetEntry
from ..services.reorder import refresh_reorder_entry, sync_order_sheet
from . import create_item, create_staff_user


class RefreshReorderEntryTests(TestCase):
    def test_entry_lifecycle_follows_stock(self):
        item = create_item("Bolt", quantity=3, alert_quantity=5)

        self.assertEqual(refresh_reorder_entry(item), "created")
        self.assertEqual(refresh_reorder_entry(item), "unchanged")
        self.assertEqual(OrderSheetEntry.objects.get(item=item).required_quantity, 2)

        item.quantity = 1
        self.assertEqual(refresh_reorder_entry(item), "updated")
        self.assertEqual(OrderSheetEntry.objects.get(item=item).required_quantity, 4)

        item.quantity = 6
        self.assertEqual(refresh_reorder_entry(item), "removed")
        self.assertFalse(OrderSheetEntry.objects.filter(item=item).exists())

    def test_stock_at_threshold_still_asks_for_one(self):
        item = create_item("Nut", quantity=5, alert_quantity=5)

        refresh_reorder_entry(item)

        self.assertEqual(OrderSheetEntry.objects.get(item=item).required_quantity, 1)

    def test_zero_alert_quantity_never_queues(self):
        item = create_item("Washer", quantity=0, alert_quantity=0)

        self.assertEqual(refresh_reorder_entry(item), "unchanged")
        self.assertFalse(OrderSheetEntry.objects.exists())

    def test_sync_picks_up_bulk_changes(self):
        low = create_item("Bolt", quantity=2, alert_quantity=5)
        high = create_item("Nut", quantity=50, alert_quantity=5)
        OrderSheetEntry.objects.create(item=high, required_quantity=3, current_quantity=2)

        counts = sync_order_sheet()

        self.assertEqual(counts["created"], 1)
        self.assertEqual(counts["removed"], 1)
        self.assertEqual(list(OrderSheetEntry.objects.values_list("item_id", flat=True)), [low.id])

        self.assertEqual(sync_order_sheet()["unchanged"], 2)

    def test_management_command_reports_counts(self):
        create_item("Bolt", quantity=2, alert_quantity=5)
        out = StringIO()

        call_command("sync_order_sheet", stdout=out)

        self.assertIn("Order sheet synced: 1 created", out.getvalue())


class OrderSheetApiTests(TestCase):
    def setUp(self):
        self.user = create_staff_user("storekeeper")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.item = create_item("Bolt", quantity=2, alert_quantity=5, rack_number="A1")

    def test_list_syncs_before_listing(self):
        response = self.client.get("/api/orders/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["product_name"], "Bolt")
        self.assertEqual(response.data[0]["required_quantity"], 3)

    def test_complete_removes_entry(self):
        entry = OrderSheetEntry.objects.create(item=self.item, required_quantity=3, current_quantity=2)

        response = self.client.post(f"/api/orders/{entry.id}/complete/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(OrderSheetEntry.objects.filter(pk=entry.id).exists())
        self.assertTrue(Item.objects.filter(pk=self.item.id).exists())

    def test_export_workbook(self):
        response = self.client.get("/api/orders/export/")

        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment;", response["Content-Disposition"])
        workbook = load_workbook(BytesIO(response.content))
        sheet = workbook.active
        self.assertEqual(sheet["A1"].value, "Order Sheet")
        self.assertEqual(sheet["B5"].value, "Bolt")
        self.assertEqual(sheet["H5"].value, 3)
