import json
from datetime import timedelta

from django.test import TestCase
from django.urls import reverse

from incentives.models import DiscountCode
from incentives.tests.helpers import make_business, make_code, make_completed_entity


class IncentivesViewTests(TestCase):
    def setUp(self):
        self.business = make_business()
        self.client.force_login(self.business.owner)

    def _post_json(self, url, payload):
        return self.client.post(url, json.dumps(payload), content_type="application/json")

    def test_dashboard_lists_codes(self):
        make_code(self.business, "SAVEACTIVE22")
        make_code(self.business, "SAVEEXPIRE22", expires_in=timedelta(days=-1))

        response = self.client.get(reverse("incentives:dashboard"))
        self.assertContains(response, "SAVEACTIVE22")
        self.assertContains(response, "SAVEEXPIRE22")

        response = self.client.get(reverse("incentives:dashboard"), {"status": "expired"})
        self.assertNotContains(response, "SAVEACTIVE22")
        self.assertContains(response, "SAVEEXPIRE22")

    def test_redeem_form(self):
        make_code(self.business, "SAVEACTIVE22")

        response = self.client.post(reverse("incentives:redeem"), {"code": "saveactive22"}, follow=True)

        self.assertContains(response, "Discount code redeemed successfully")
        self.assertTrue(DiscountCode.objects.get(code="SAVEACTIVE22").is_redeemed)

    def test_redeem_api_status_codes(self):
        make_code(self.business, "SAVEACTIVE22")
        make_code(self.business, "SAVEEXPIRE22", expires_in=timedelta(days=-1))
        url = reverse("incentives:api_redeem")

        response = self._post_json(url, {"code": "SAVEACTIVE22"})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["is_redeemed"])

        response = self._post_json(url, {"code": "SAVEACTIVE22"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "already_redeemed")

        response = self._post_json(url, {"code": "SAVEEXPIRE22"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "code_expired")

        response = self._post_json(url, {"code": "SAVENOPE2222"})
        self.assertEqual(response.status_code, 404)

        other = make_business(email="other@example.com", name="Other Shop")
        response = self._post_json(url, {"code": "SAVEACTIVE22", "business_id": other.id})
        self.assertEqual(response.status_code, 403)

        response = self.client.post(url, "not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_list_api(self):
        for index in range(3):
            make_code(self.business, f"SAVELIST{index}AAA")

        response = self.client.get(reverse("incentives:api_list"), {"page": 1, "limit": 2})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(len(data["items"]), 2)
        self.assertEqual(data["pagination"], {"total": 3, "page": 1, "limit": 2, "total_pages": 2})
        self.assertEqual(data["items"][0]["response_entity"]["type"], "DIRECT_SMS")

        response = self.client.get(reverse("incentives:api_list"), {"limit": 500})
        self.assertEqual(response.status_code, 400)

    def test_issue_api(self):
        entity = make_completed_entity(self.business)
        url = reverse("incentives:api_issue")
        payload = {
            "response_entity_id": str(entity.id),
            "discount_type": "FIXED_AMOUNT",
            "discount_value": "5.00",
            "expires_at": "2030-01-01T00:00:00",
        }

        response = self._post_json(url, payload)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["discount_value"], "5.00")

        response = self._post_json(url, payload)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["data"]["code"], DiscountCode.objects.get().code)

        response = self._post_json(url, dict(payload, discount_value="-1"))
        self.assertEqual(response.status_code, 400)

        response = self._post_json(url, dict(payload, expires_at="tomorrow"))
        self.assertEqual(response.status_code, 400)

    def test_anonymous_is_redirected_to_login(self):
        self.client.logout()

        response = self.client.get(reverse("incentives:dashboard"))

        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("users:login"), response["Location"])
