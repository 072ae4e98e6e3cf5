"""Feedback submission service tests."""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase, override_settings
from django.utils import timezone

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import Response, ResponseEntity
from feedback.schemas import AnswerInput, SubmitFeedbackRequest
from feedback.services import (
    AlreadySubmittedError,
    InvalidLinkError,
    InvalidQuestionError,
    SurveyInactiveError,
    SurveyMismatchError,
    get_feedback_link,
    submit_feedback,
)
from feedback.tests.helpers import make_owner, make_survey
from incentives.choices import DiscountType
from incentives.models import DiscountCode
from incentives.services import CodeUnavailableError
from surveys.choices import SurveyStatus


class SubmitFeedbackTests(TestCase):
    def setUp(self):
        self.owner = make_owner()
        self.survey = make_survey(self.owner)
        self.questions = list(self.survey.questions.order_by("seq"))

    def _entity(self, response_type=ResponseType.DIRECT_SMS, survey=None, **kwargs):
        kwargs.setdefault("phone_number", "+998123456789")
        return ResponseEntity.objects.create(
            survey=survey or self.survey,
            type=response_type,
            **kwargs,
        )

    def _request(self, entity, survey_id=None, answers=None):
        if answers is None:
            answers = [
                AnswerInput(question_id=self.questions[0].id, answer="5"),
                AnswerInput(question_id=self.questions[1].id, answer="Yes"),
            ]
        return SubmitFeedbackRequest(
            survey_id=survey_id or self.survey.id,
            response_entity_id=entity.id,
            answers=tuple(answers),
        )

    def test_direct_sms_submission_issues_discount_code(self):
        entity = self._entity(ResponseType.DIRECT_SMS)

        result = submit_feedback(self._request(entity))

        entity.refresh_from_db()
        self.assertEqual(entity.status, ResponseStatus.COMPLETED)
        self.assertIsNotNone(entity.submitted_at)
        self.assertEqual(
            dict(Response.objects.filter(response_entity=entity).values_list("question_id", "value")),
            {self.questions[0].id: "5", self.questions[1].id: "Yes"},
        )

        code = result.discount_code
        self.assertIsNotNone(code)
        self.assertTrue(code.code.startswith("SAVE"))
        self.assertEqual(len(code.code), len("SAVE") + 8)
        self.assertEqual(code.discount_type, DiscountType.PERCENTAGE)
        self.assertEqual(code.discount_value, Decimal("10"))
        self.assertEqual(code.business, self.survey.business)
        self.assertFalse(code.is_redeemed)
        expected_expiry = timezone.now() + timedelta(days=30)
        self.assertLess(abs((code.expires_at - expected_expiry).total_seconds()), 60)

    def test_qr_submission_has_no_discount_code(self):
        entity = self._entity(ResponseType.QR, phone_number="")

        result = submit_feedback(self._request(entity))

        self.assertIsNone(result.discount_code)
        self.assertEqual(result.response_entity.status, ResponseStatus.COMPLETED)
        self.assertFalse(DiscountCode.objects.exists())

    def test_qr_initiated_sms_has_no_discount_code_by_default(self):
        entity = self._entity(ResponseType.QR_INITIATED_SMS)

        result = submit_feedback(self._request(entity))

        self.assertIsNone(result.discount_code)

    @override_settings(
        FEEDBACK_REWARD={
            "QUALIFYING_TYPES": ["DIRECT_SMS", "QR"],
            "DISCOUNT_TYPE": "FIXED_AMOUNT",
            "DISCOUNT_VALUE": "5",
            "VALID_DAYS": 7,
        }
    )
    def test_reward_qualifying_types_are_configurable(self):
        entity = self._entity(ResponseType.QR, phone_number="")

        result = submit_feedback(self._request(entity))

        self.assertIsNotNone(result.discount_code)
        self.assertEqual(result.discount_code.discount_type, DiscountType.FIXED_AMOUNT)
        self.assertEqual(result.discount_code.discount_value, Decimal("5"))

    def test_second_submission_is_rejected(self):
        entity = self._entity()
        submit_feedback(self._request(entity))

        with self.assertRaises(AlreadySubmittedError):
            submit_feedback(self._request(entity))

        self.assertEqual(Response.objects.filter(response_entity=entity).count(), 2)
        self.assertEqual(DiscountCode.objects.filter(response_entity=entity).count(), 1)

    def test_concurrent_winner_rolls_back_answers(self):
        entity = self._entity()
        original_bulk_create = Response.objects.bulk_create

        def racing_bulk_create(objs, *args, **kwargs):
            # 另一请求在本事务写答案期间先完成了提交
            ResponseEntity.objects.filter(pk=entity.pk).update(status=ResponseStatus.COMPLETED)
            return original_bulk_create(objs, *args, **kwargs)

        with patch.object(Response.objects, "bulk_create", side_effect=racing_bulk_create):
            with self.assertRaises(AlreadySubmittedError):
                submit_feedback(self._request(entity))

        self.assertFalse(Response.objects.filter(response_entity=entity).exists())
        self.assertFalse(DiscountCode.objects.exists())

    def test_missing_link(self):
        ghost = ResponseEntity(id=uuid.uuid4(), survey=self.survey, type=ResponseType.QR)

        with self.assertRaises(InvalidLinkError):
            submit_feedback(self._request(ghost))

    def test_completed_link_wins_over_inactive_survey(self):
        entity = self._entity(status=ResponseStatus.COMPLETED)
        self.survey.status = SurveyStatus.CLOSED
        self.survey.save()

        with self.assertRaises(AlreadySubmittedError):
            submit_feedback(self._request(entity))

    def test_inactive_survey(self):
        entity = self._entity()
        self.survey.status = SurveyStatus.CLOSED
        self.survey.save()

        with self.assertRaises(SurveyInactiveError):
            submit_feedback(self._request(entity))
        with self.assertRaises(SurveyInactiveError):
            submit_feedback(self._request(entity, survey_id=uuid.uuid4()))

    def test_survey_mismatch(self):
        other_survey = make_survey(self.owner, name="Other survey")
        entity = self._entity(survey=other_survey)

        with self.assertRaises(SurveyMismatchError):
            submit_feedback(self._request(entity))

        entity.refresh_from_db()
        self.assertEqual(entity.status, ResponseStatus.PENDING)

    def test_question_from_another_survey(self):
        other_survey = make_survey(self.owner, name="Other survey")
        foreign_question = other_survey.questions.first()
        entity = self._entity()

        with self.assertRaises(InvalidQuestionError):
            submit_feedback(
                self._request(
                    entity,
                    answers=[
                        AnswerInput(question_id=self.questions[0].id, answer="4"),
                        AnswerInput(question_id=foreign_question.id, answer="No"),
                    ],
                )
            )

        self.assertFalse(Response.objects.exists())
        entity.refresh_from_db()
        self.assertEqual(entity.status, ResponseStatus.PENDING)

    def test_reward_failure_does_not_fail_submission(self):
        entity = self._entity()

        with patch(
            "feedback.services.submission.issue_discount_code",
            side_effect=CodeUnavailableError(),
        ):
            with self.assertLogs("feedback.services.submission", level="ERROR"):
                result = submit_feedback(self._request(entity))

        self.assertIsNone(result.discount_code)
        entity.refresh_from_db()
        self.assertEqual(entity.status, ResponseStatus.COMPLETED)

    def test_unexpected_database_error_during_reward_keeps_submission(self):
        entity = self._entity()

        with patch(
            "incentives.services.discount.generate_unique_discount_code",
            side_effect=OperationalError("database is locked"),
        ):
            with self.assertLogs("feedback.services.submission", level="ERROR"):
                result = submit_feedback(self._request(entity))

        self.assertIsNone(result.discount_code)
        entity.refresh_from_db()
        self.assertEqual(entity.status, ResponseStatus.COMPLETED)
        self.assertEqual(Response.objects.filter(response_entity=entity).count(), 2)
        self.assertFalse(DiscountCode.objects.filter(response_entity=entity).exists())


class GetFeedbackLinkTests(TestCase):
    def setUp(self):
        self.owner = make_owner()
        self.survey = make_survey(self.owner)

    def test_pending_link_loads_questions(self):
        entity = ResponseEntity.objects.create(survey=self.survey, type=ResponseType.QR)

        loaded = get_feedback_link(entity.id)

        self.assertEqual(loaded.pk, entity.pk)
        self.assertEqual(len(loaded.survey.questions.all()), 3)

    def test_link_errors(self):
        with self.assertRaises(InvalidLinkError):
            get_feedback_link(uuid.uuid4())
        with self.assertRaises(InvalidLinkError):
            get_feedback_link("not-a-uuid")

        done = ResponseEntity.objects.create(
            survey=self.survey,
            type=ResponseType.QR,
            status=ResponseStatus.COMPLETED,
        )
        with self.assertRaises(AlreadySubmittedError):
            get_feedback_link(done.id)

        pending = ResponseEntity.objects.create(survey=self.survey, type=ResponseType.QR)
        self.survey.status = SurveyStatus.CLOSED
        self.survey.save()
        with self.assertRaises(SurveyInactiveError):
            get_feedback_link(pending.id)
