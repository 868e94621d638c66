from django.conf import settings
from django.test import TestCase
from rest_framework.test import APIClient

from ..models import Activity, StaffProfile
from . import create_staff_user


class HealthCheckTests(TestCase):
    def test_health_is_public(self):
        response = APIClient().get("/api/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "OK")
        self.assertEqual(response.data["database"], "connected")


class CompanyInfoTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_defaults_to_configured_name(self):
        self.client.force_authenticate(user=create_staff_user("clerk"))

        response = self.client.get("/api/company-info/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], settings.COMPANY_NAME)

    def test_admin_updates_letterhead(self):
        self.client.force_authenticate(user=create_staff_user("manager", StaffProfile.ROLE_ADMIN))

        response = self.client.post(
            "/api/company-info/",
            {"name": "Bright Hardware", "gst_number": "29AAAAA0000A1Z5"},
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data["name"], "Bright Hardware")

    def test_sales_role_cannot_update_letterhead(self):
        self.client.force_authenticate(user=create_staff_user("clerk"))

        response = self.client.post("/api/company-info/", {"name": "Other"}, format="json")

        self.assertEqual(response.status_code, 403)


class ActivityTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = create_staff_user("owner", StaffProfile.ROLE_SUPER_ADMIN)
        self.manager = create_staff_user("manager", StaffProfile.ROLE_ADMIN)
        self.client.force_authenticate(user=self.manager)
        self.client.post("/api/parties/sellers/", {"party_name": "Acme"}, format="json")

    def test_users_see_their_own_activity(self):
        response = self.client.get("/api/activities/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["action_type"], "created")
        self.assertEqual(response.data[0]["user"], "manager")

        self.client.force_authenticate(user=create_staff_user("clerk"))
        self.assertEqual(self.client.get("/api/activities/").data, [])

    def test_super_admin_sees_everything(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.get("/api/activities/")

        self.assertEqual(len(response.data), Activity.objects.count())
        self.assertEqual(len(response.data), 1)
