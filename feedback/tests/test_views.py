import json
from unittest.mock import patch

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import Response, ResponseEntity
from feedback.tests.helpers import make_owner, make_survey
from incentives.models import DiscountCode
from surveys.choices import SurveyStatus


class PublicSurveyViewTests(TestCase):
    def setUp(self):
        cache.clear()
        self.owner = make_owner()
        self.survey = make_survey(self.owner)
        self.url = reverse("feedback:public_survey", args=[self.survey.id])

    def test_landing_page_renders_markdown_description(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "<strong>visiting</strong>", html=False)

    def test_landing_page_escapes_raw_html_in_description(self):
        self.survey.description = "<script>alert(1)</script> **Welcome**"
        self.survey.save(update_fields=["description"])

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, "<script>alert(1)</script>", html=False)
        self.assertContains(response, "&lt;script&gt;alert(1)&lt;/script&gt;", html=False)
        self.assertContains(response, "<strong>Welcome</strong>", html=False)

    def test_start_now_creates_qr_link(self):
        response = self.client.post(self.url, {"action": "start"})

        entity = ResponseEntity.objects.get()
        self.assertEqual(entity.type, ResponseType.QR)
        self.assertRedirects(response, reverse("feedback:form", args=[entity.id]))

    @patch("feedback.services.distribution.SMSService.send_message", return_value=(True, None))
    def test_request_link_by_sms(self, mock_send):
        response = self.client.post(self.url, {"action": "sms", "phone_number": "+998123456789"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["sms_sent"])
        self.assertEqual(ResponseEntity.objects.get().type, ResponseType.QR_INITIATED_SMS)

        response = self.client.post(self.url, {"action": "sms", "phone_number": "+998123456789"})
        self.assertEqual(response.status_code, 429)
        self.assertEqual(ResponseEntity.objects.count(), 1)

    def test_inactive_survey_landing(self):
        self.survey.status = SurveyStatus.CLOSED
        self.survey.save()

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 404)


class FeedbackFormViewTests(TestCase):
    def setUp(self):
        self.owner = make_owner()
        self.survey = make_survey(self.owner)
        self.questions = list(self.survey.questions.order_by("seq"))
        self.entity = ResponseEntity.objects.create(
            survey=self.survey,
            type=ResponseType.DIRECT_SMS,
            phone_number="+998123456789",
        )
        self.form_url = reverse("feedback:form", args=[self.entity.id])
        self.submit_url = reverse("feedback:submit", args=[self.entity.id])

    def _form_data(self):
        return {
            f"question_{self.questions[0].id}": "4",
            f"question_{self.questions[1].id}": "Yes",
            f"question_{self.questions[2].id}": "",
        }

    def test_form_page(self):
        response = self.client.get(self.form_url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "How was the coffee?")
        self.assertContains(response, self.submit_url)

    def test_owner_sees_notice_instead_of_form(self):
        self.client.force_login(self.owner)

        response = self.client.get(self.form_url)

        self.assertContains(response, "feedback link for your own survey")
        self.assertNotContains(response, self.submit_url)

    def test_owner_cannot_submit_own_link(self):
        self.client.force_login(self.owner)

        response = self.client.post(self.submit_url, self._form_data())

        self.assertContains(response, "Only customers can submit it", status_code=403)
        response = self.client.post(
            self.submit_url,
            json.dumps(
                {
                    "survey_id": str(self.survey.id),
                    "answers": [{"question_id": self.questions[0].id, "answer": "5"}],
                }
            ),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "owner_submission")

        self.entity.refresh_from_db()
        self.assertEqual(self.entity.status, ResponseStatus.PENDING)
        self.assertFalse(Response.objects.filter(response_entity=self.entity).exists())
        self.assertFalse(DiscountCode.objects.exists())

    def test_other_owner_can_still_submit(self):
        self.client.force_login(make_owner(email="other@example.com", name="Other Shop"))

        response = self.client.post(self.submit_url, self._form_data())

        self.assertEqual(response.status_code, 200)
        self.entity.refresh_from_db()
        self.assertEqual(self.entity.status, ResponseStatus.COMPLETED)

    def test_unknown_link(self):
        response = self.client.get(reverse("feedback:form", args=["00000000-0000-0000-0000-000000000000"]))

        self.assertEqual(response.status_code, 404)
        self.assertContains(response, "Invalid feedback link", status_code=404)

    def test_form_submission_renders_thanks_with_code(self):
        response = self.client.post(self.submit_url, self._form_data())

        self.assertEqual(response.status_code, 200)
        code = DiscountCode.objects.get(response_entity=self.entity)
        self.assertContains(response, code.code)
        self.assertEqual(Response.objects.filter(response_entity=self.entity).count(), 2)

        response = self.client.get(self.form_url)
        self.assertContains(response, "already been submitted", status_code=409)

    def test_form_submission_requires_required_questions(self):
        data = self._form_data()
        data[f"question_{self.questions[1].id}"] = ""

        response = self.client.post(self.submit_url, data)

        self.assertEqual(response.status_code, 400)
        self.entity.refresh_from_db()
        self.assertEqual(self.entity.status, ResponseStatus.PENDING)

    def test_json_submission(self):
        payload = {
            "survey_id": str(self.survey.id),
            "answers": [
                {"question_id": self.questions[0].id, "answer": "5"},
                {"question_id": self.questions[2].id, "answer": "Lovely staff"},
            ],
        }

        response = self.client.post(self.submit_url, json.dumps(payload), content_type="application/json")

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["response_entity_id"], str(self.entity.id))
        self.assertTrue(data["discount_code"]["code"].startswith("SAVE"))

        response = self.client.post(self.submit_url, json.dumps(payload), content_type="application/json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "already_submitted")

    def test_json_submission_validation_errors(self):
        response = self.client.post(
            self.submit_url,
            json.dumps({"survey_id": str(self.survey.id), "answers": []}),
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("answers", response.json()["details"])

    def test_json_submission_for_qr_link_has_no_code(self):
        entity = ResponseEntity.objects.create(survey=self.survey, type=ResponseType.QR)

        response = self.client.post(
            reverse("feedback:submit", args=[entity.id]),
            json.dumps(
                {
                    "survey_id": str(self.survey.id),
                    "answers": [{"question_id": self.questions[0].id, "answer": "3"}],
                }
            ),
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["data"]["discount_code"])
