# users/tests/test_pin.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from users.services.pin import PinVerification, verify_manager_pin

User = get_user_model()


class VerifyManagerPinTests(TestCase):
    """
    GUARANTEES:
    - Correct PIN of an approving user resolves to that user
    - Wrong PINs, blank PINs, and PINs of non-approvers fail
    - Inactive users cannot authorize
    """

    def setUp(self):
        self.manager = User.objects.create_user(
            username="manager", password="x", role="manager", pin="2468"
        )

    def test_correct_pin_returns_manager(self):
        result = verify_manager_pin("2468")
        self.assertEqual(result, PinVerification(success=True, user_id=str(self.manager.pk)))

    def test_wrong_pin_fails(self):
        self.assertFalse(verify_manager_pin("0000").success)

    def test_blank_pin_fails(self):
        self.assertFalse(verify_manager_pin("").success)
        self.assertFalse(verify_manager_pin(None).success)

    def test_cashier_pin_cannot_authorize(self):
        User.objects.create_user(username="cash", password="x", role="cashier", pin="1357")
        self.assertFalse(verify_manager_pin("1357").success)

    def test_inactive_manager_cannot_authorize(self):
        self.manager.is_active = False
        self.manager.save()
        self.assertFalse(verify_manager_pin("2468").success)


class VerifyPinAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.cashier = User.objects.create_user(username="cashier", password="x", role="cashier")
        self.manager = User.objects.create_user(
            username="manager", password="x", role="manager", pin="2468"
        )
        self.url = reverse("users:pin-verify")

    def test_valid_pin(self):
        self.client.force_authenticate(self.cashier)
        response = self.client.post(self.url, {"pin": "2468"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user_id"], str(self.manager.pk))

    def test_invalid_pin_is_forbidden(self):
        self.client.force_authenticate(self.cashier)
        response = self.client.post(self.url, {"pin": "9999"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data["success"])
