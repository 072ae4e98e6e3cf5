from unittest.mock import patch

from django.core.cache import cache
from django.db import connection
from django.test import TestCase, override_settings

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import ResponseEntity
from feedback.services.distribution import (
    DistributionAccessDeniedError,
    DistributionSurveyNotFoundError,
    InvalidPhoneNumberError,
    SmsDeliveryError,
    SmsRateLimitedError,
    normalize_phone_number,
    request_qr_sms_link,
    send_direct_feedback_sms,
    start_qr_response,
)
from feedback.tests.helpers import make_owner, make_survey
from surveys.choices import SurveyStatus
from users import choices
from users.models import CustomUser

SEND_MESSAGE = "feedback.services.distribution.SMSService.send_message"


@override_settings(WEB_BASE_URL="https://feedback.example.com/")
class DistributionServiceTests(TestCase):
    def setUp(self):
        cache.clear()
        self.owner = make_owner()
        self.survey = make_survey(self.owner)

    def test_normalize_phone_number(self):
        self.assertEqual(normalize_phone_number(" +998123456789 "), "+998123456789")
        self.assertEqual(normalize_phone_number("1234567890"), "1234567890")
        for bad in ["", "123456789", "+1234567890123456", "99812-345678", "++998123456789"]:
            with self.assertRaises(InvalidPhoneNumberError):
                normalize_phone_number(bad)

    @patch(SEND_MESSAGE, return_value=(True, None))
    def test_send_direct_feedback_sms(self, mock_send):
        result = send_direct_feedback_sms(
            user=self.owner,
            survey_id=self.survey.id,
            phone_number="+998123456789",
        )

        entity = result.response_entity
        self.assertEqual(entity.type, ResponseType.DIRECT_SMS)
        self.assertEqual(entity.status, ResponseStatus.PENDING)
        self.assertEqual(entity.phone_number, "+998123456789")
        self.assertEqual(result.feedback_url, f"https://feedback.example.com/feedback/{entity.id}/")
        phone, body = mock_send.call_args[0]
        self.assertEqual(phone, "+998123456789")
        self.assertIn("Visit survey", body)
        self.assertIn(result.feedback_url, body)

    @patch(SEND_MESSAGE, return_value=(False, "SMS provider error: 0"))
    def test_failed_send_leaves_no_link(self, mock_send):
        with self.assertRaises(SmsDeliveryError):
            send_direct_feedback_sms(
                user=self.owner,
                survey_id=self.survey.id,
                phone_number="+998123456789",
            )

        self.assertFalse(ResponseEntity.objects.exists())

    def test_sms_is_sent_outside_an_atomic_block(self):
        baseline = len(connection.savepoint_ids)
        seen = {}

        def fake_send(phone, body):
            seen["savepoints"] = len(connection.savepoint_ids)
            seen["link_saved"] = ResponseEntity.objects.filter(phone_number=phone).exists()
            return True, None

        with patch(SEND_MESSAGE, side_effect=fake_send):
            send_direct_feedback_sms(
                user=self.owner,
                survey_id=self.survey.id,
                phone_number="+998123456789",
            )

        self.assertEqual(seen["savepoints"], baseline)
        self.assertTrue(seen["link_saved"])

    def test_unexpected_send_error_removes_link(self):
        with patch(SEND_MESSAGE, side_effect=RuntimeError("provider crashed")):
            with self.assertRaises(RuntimeError):
                send_direct_feedback_sms(
                    user=self.owner,
                    survey_id=self.survey.id,
                    phone_number="+998123456789",
                )

        self.assertFalse(ResponseEntity.objects.exists())

    @patch(SEND_MESSAGE, return_value=(True, None))
    def test_send_direct_feedback_sms_guards(self, mock_send):
        admin = CustomUser.objects.create_user(
            email="admin@example.com",
            password="secret1",
            role=choices.UserRole.ADMIN,
        )
        with self.assertRaises(DistributionAccessDeniedError):
            send_direct_feedback_sms(user=admin, survey_id=self.survey.id, phone_number="+998123456789")

        with self.assertRaises(InvalidPhoneNumberError):
            send_direct_feedback_sms(user=self.owner, survey_id=self.survey.id, phone_number="555")

        other = make_owner(email="other@example.com", name="Other Shop")
        make_survey(other)
        with self.assertRaises(DistributionSurveyNotFoundError):
            send_direct_feedback_sms(user=other, survey_id=self.survey.id, phone_number="+998123456789")

        self.survey.status = SurveyStatus.CLOSED
        self.survey.save()
        with self.assertRaises(DistributionSurveyNotFoundError):
            send_direct_feedback_sms(user=self.owner, survey_id=self.survey.id, phone_number="+998123456789")

        mock_send.assert_not_called()
        self.assertFalse(ResponseEntity.objects.exists())

    def test_start_qr_response(self):
        entity = start_qr_response(self.survey.id)

        self.assertEqual(entity.type, ResponseType.QR)
        self.assertEqual(entity.status, ResponseStatus.PENDING)
        self.assertEqual(entity.phone_number, "")

        self.survey.status = SurveyStatus.DRAFT
        self.survey.save()
        with self.assertRaises(DistributionSurveyNotFoundError):
            start_qr_response(self.survey.id)

    @patch(SEND_MESSAGE, return_value=(True, None))
    def test_request_qr_sms_link_is_rate_limited_per_phone(self, mock_send):
        result = request_qr_sms_link(self.survey.id, "+998123456789")
        self.assertEqual(result.response_entity.type, ResponseType.QR_INITIATED_SMS)

        with self.assertRaises(SmsRateLimitedError):
            request_qr_sms_link(self.survey.id, "+998123456789")

        request_qr_sms_link(self.survey.id, "+998987654321")
        self.assertEqual(ResponseEntity.objects.count(), 2)
        self.assertEqual(mock_send.call_count, 2)

    def test_request_qr_sms_link_failure_releases_rate_limit(self):
        with patch(SEND_MESSAGE, return_value=(False, "network")):
            with self.assertRaises(SmsDeliveryError):
                request_qr_sms_link(self.survey.id, "+998123456789")

        with patch(SEND_MESSAGE, return_value=(True, None)):
            result = request_qr_sms_link(self.survey.id, "+998123456789")

        self.assertEqual(ResponseEntity.objects.get().pk, result.response_entity.pk)
