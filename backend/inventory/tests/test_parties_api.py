from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from ..models import BuyerParty, SellerParty, StaffProfile
from . import create_staff_user


class PartyApiTests(TestCase):
    def setUp(self):
        self.admin = create_staff_user("manager", StaffProfile.ROLE_ADMIN)
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_default_retail_parties_exist(self):
        sellers = self.client.get("/api/parties/sellers/")
        buyers = self.client.get("/api/parties/buyers/")

        self.assertEqual([row["party_name"] for row in sellers.data], ["Retail Seller"])
        self.assertEqual([row["party_name"] for row in buyers.data], ["Retail Buyer"])

    def test_opening_balance_seeds_running_balance(self):
        response = self.client.post(
            "/api/parties/sellers/",
            {"party_name": "Acme", "mobile_number": "9876543210", "opening_balance": "250.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["balance_amount"], "250.00")
        self.assertEqual(response.data["paid_amount"], "0.00")

    def test_opening_balance_is_fixed_after_creation(self):
        party = BuyerParty.objects.create(party_name="Supplier", opening_balance=Decimal("40.00"))

        response = self.client.patch(
            f"/api/parties/buyers/{party.id}/",
            {"opening_balance": "999.00", "address": "Main Road"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        party.refresh_from_db()
        self.assertEqual(party.opening_balance, Decimal("40.00"))
        self.assertEqual(party.address, "Main Road")

    def test_mobile_number_must_have_ten_digits(self):
        response = self.client.post(
            "/api/parties/buyers/",
            {"party_name": "Supplier", "mobile_number": "12345"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.data["error"].startswith("mobile_number:"))

    def test_blank_name_is_rejected(self):
        response = self.client.post("/api/parties/sellers/", {"party_name": "   "}, format="json")

        self.assertEqual(response.status_code, 400)

    def test_sales_role_cannot_create_parties(self):
        self.client.force_authenticate(user=create_staff_user("clerk"))

        response = self.client.post("/api/parties/sellers/", {"party_name": "Acme"}, format="json")

        self.assertEqual(response.status_code, 403)

    def test_parties_cannot_be_deleted(self):
        party = SellerParty.objects.create(party_name="Acme")

        response = self.client.delete(f"/api/parties/sellers/{party.id}/")

        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.data["code"], "method_not_allowed")
        self.assertTrue(SellerParty.objects.filter(pk=party.id).exists())

    def test_search_by_name(self):
        SellerParty.objects.create(party_name="Acme Traders")

        response = self.client.get("/api/parties/sellers/", {"search": "acme"})

        self.assertEqual([row["party_name"] for row in response.data], ["Acme Traders"])
