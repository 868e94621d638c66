from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from ..models import StaffProfile
from ..permissions import get_role
from . import create_staff_user


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = create_staff_user("manager", StaffProfile.ROLE_ADMIN, password="secret123")

    def test_login_returns_tokens_carrying_the_role(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "manager", "password": "secret123"},
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data["user"]["role"], "admin")
        token = AccessToken(response.data["access"])
        self.assertEqual(token["role"], "admin")
        self.assertEqual(token["username"], "manager")

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get("/api/auth/me/")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["username"], "manager")

    def test_wrong_password_is_rejected(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "manager", "password": "nope"},
            format="json",
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["code"], "not_authenticated")

    def test_refresh_issues_a_new_access_token(self):
        login = self.client.post(
            "/api/auth/login/",
            {"username": "manager", "password": "secret123"},
            format="json",
        )

        response = self.client.post("/api/auth/refresh/", {"refresh": login.data["refresh"]}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)

    def test_anonymous_requests_are_rejected(self):
        response = self.client.get("/api/items/")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["code"], "not_authenticated")


class RoleTests(TestCase):
    def test_superuser_is_super_admin(self):
        user = User.objects.create_superuser(username="root", password="pw", email="root@example.com")

        self.assertEqual(get_role(user), StaffProfile.ROLE_SUPER_ADMIN)

    def test_user_without_profile_has_no_role(self):
        user = User.objects.create_user(username="ghost", password="pw")

        self.assertIsNone(get_role(user))


class RegisterUserTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.super_admin = create_staff_user("owner", StaffProfile.ROLE_SUPER_ADMIN)

    def test_super_admin_registers_staff(self):
        self.client.force_authenticate(user=self.super_admin)

        response = self.client.post(
            "/api/auth/register/",
            {"username": "clerk", "password": "secret123", "role": "sales"},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["role"], "sales")
        self.assertEqual(response.data["detail"], "User registered successfully.")
        user = User.objects.get(username="clerk")
        self.assertTrue(user.check_password("secret123"))
        self.assertEqual(user.staff_profile.role, "sales")

    def test_admin_cannot_register_users(self):
        self.client.force_authenticate(user=create_staff_user("manager", StaffProfile.ROLE_ADMIN))

        response = self.client.post(
            "/api/auth/register/",
            {"username": "clerk", "password": "secret123", "role": "sales"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)
        self.assertFalse(User.objects.filter(username="clerk").exists())

    def test_short_password_and_unknown_role_are_rejected(self):
        self.client.force_authenticate(user=self.super_admin)

        short = self.client.post(
            "/api/auth/register/",
            {"username": "clerk", "password": "12345", "role": "sales"},
            format="json",
        )
        bad_role = self.client.post(
            "/api/auth/register/",
            {"username": "clerk", "password": "secret123", "role": "owner"},
            format="json",
        )

        self.assertEqual(short.status_code, 400)
        self.assertEqual(bad_role.status_code, 400)

    def test_duplicate_username_is_rejected(self):
        self.client.force_authenticate(user=self.super_admin)

        response = self.client.post(
            "/api/auth/register/",
            {"username": "owner", "password": "secret123", "role": "admin"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)


class ChangePasswordTests(TestCase):
    def setUp(self):
        self.user = create_staff_user("clerk", password="secret123")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_change_password(self):
        response = self.client.post(
            "/api/auth/change-password/",
            {"current_password": "secret123", "new_password": "Fresh-Pass-2024"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Fresh-Pass-2024"))

    def test_wrong_current_password(self):
        response = self.client.post(
            "/api/auth/change-password/",
            {"current_password": "wrong", "new_password": "Fresh-Pass-2024"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "current_password: Current password is incorrect.")
