from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import ResponseEntity
from incentives.choices import DiscountType
from incentives.models import DiscountCode
from surveys.models import Survey
from users.models import Business, CustomUser


def make_business(email="owner@example.com", name="Corner Cafe"):
    owner = CustomUser.objects.create_user(email=email, password="secret1", name=name)
    return Business.objects.create(owner=owner, name=name)


def make_completed_entity(business, response_type=ResponseType.DIRECT_SMS):
    survey = Survey.objects.filter(business=business).first()
    if survey is None:
        survey = Survey.objects.create(business=business, name="Visit survey")
    return ResponseEntity.objects.create(
        survey=survey,
        type=response_type,
        phone_number="+998123456789",
        status=ResponseStatus.COMPLETED,
        submitted_at=timezone.now(),
    )


def make_code(business, code, expires_in=timedelta(days=30), is_redeemed=False, **kwargs):
    return DiscountCode.objects.create(
        code=code,
        discount_type=kwargs.pop("discount_type", DiscountType.PERCENTAGE),
        discount_value=kwargs.pop("discount_value", Decimal("10")),
        expires_at=timezone.now() + expires_in if expires_in is not None else None,
        is_redeemed=is_redeemed,
        redeemed_at=timezone.now() if is_redeemed else None,
        business=business,
        response_entity=make_completed_entity(business),
        **kwargs,
    )
