from unittest.mock import MagicMock, patch

import requests
from django.core.cache import cache
from django.test import TestCase, override_settings

from messaging.services import SMSService

HTTP_CONFIG = {
    "BACKEND": "http",
    "API_URL": "https://sms.example.com/SendMessageStr",
    "ORG_ID": "100",
    "USERNAME": "feedback",
    "PASSWORD": "secret",
    "SIGNATURE": "[FeedbackPro]",
    "TIMEOUT_SECONDS": 5,
    "RATE_LIMIT_SECONDS": 60,
}


class SMSServiceTests(TestCase):
    def setUp(self):
        cache.clear()

    @override_settings(SMS_CONFIG={"BACKEND": "console", "SIGNATURE": ""})
    def test_console_backend_logs_message(self):
        with self.assertLogs("messaging.services.sms", level="INFO") as logs:
            success, error = SMSService.send_message("+998123456789", "Hello")

        self.assertTrue(success)
        self.assertIsNone(error)
        self.assertIn("+998123456789", logs.output[0])

    @override_settings(SMS_CONFIG=HTTP_CONFIG)
    @patch("messaging.services.sms.requests.get")
    def test_http_backend_success(self, mock_get):
        mock_get.return_value = MagicMock(text="State:1, Id:35, FailPhone:")

        success, error = SMSService.send_message("+998123456789", "Hello")

        self.assertTrue(success)
        self.assertIsNone(error)
        params = mock_get.call_args.kwargs["params"]
        self.assertEqual(params["Phone"], "+998123456789")
        self.assertEqual(params["Message"], "[FeedbackPro]Hello")
        self.assertEqual(mock_get.call_args.kwargs["timeout"], 5)

    @override_settings(SMS_CONFIG=HTTP_CONFIG)
    @patch("messaging.services.sms.requests.get")
    def test_http_backend_provider_error(self, mock_get):
        mock_get.return_value = MagicMock(text="State:-3")

        success, error = SMSService.send_message("+998123456789", "Hello")

        self.assertFalse(success)
        self.assertIn("-3", error)

    @override_settings(SMS_CONFIG=HTTP_CONFIG)
    @patch("messaging.services.sms.requests.get", side_effect=requests.ConnectionError("down"))
    def test_http_backend_network_error(self, mock_get):
        success, error = SMSService.send_message("+998123456789", "Hello")

        self.assertFalse(success)
        self.assertEqual(error, "SMS provider request failed")

    @override_settings(SMS_CONFIG=HTTP_CONFIG)
    def test_rate_limit_per_phone(self):
        self.assertTrue(SMSService.check_rate_limit("+998123456789"))
        self.assertFalse(SMSService.check_rate_limit("+998123456789"))
        self.assertTrue(SMSService.check_rate_limit("+998987654321"))

        SMSService.release_rate_limit("+998123456789")
        self.assertTrue(SMSService.check_rate_limit("+998123456789"))
