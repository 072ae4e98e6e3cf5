"""
FeedbackPro 后台站点。

- 首页按 `ADMIN_APP_ORDER` 排列应用，未列出的应用按名称追加在后；
- 首页顶部展示运营概览：问卷数、待提交链接、已提交链接、未核销与已核销优惠码。
"""

from django.conf import settings
from django.contrib.admin import AdminSite
from django.contrib.admin.apps import AdminConfig
from django.utils import timezone


class FeedbackProAdminSite(AdminSite):
    site_header = "FeedbackPro Administration"
    site_title = "FeedbackPro"
    index_title = "Operations overview"

    def get_app_list(self, request, app_label=None):
        apps = self._build_app_dict(request, app_label)
        rank = {label: index for index, label in enumerate(getattr(settings, "ADMIN_APP_ORDER", []))}
        return sorted(
            apps.values(),
            key=lambda app: (rank.get(app["app_label"], len(rank)), app["name"].lower()),
        )

    def feedback_overview(self) -> list[tuple[str, int]]:
        """后台首页概览数据，(标题, 数量) 列表。"""

        from feedback.choices import ResponseStatus
        from feedback.models import ResponseEntity
        from incentives.models import DiscountCode
        from surveys.choices import SurveyStatus
        from surveys.models import Survey

        now = timezone.now()
        active_codes = DiscountCode.objects.filter(is_redeemed=False).exclude(expires_at__lte=now)
        return [
            ("Active surveys", Survey.objects.filter(status=SurveyStatus.ACTIVE).count()),
            ("Pending feedback links", ResponseEntity.objects.filter(status=ResponseStatus.PENDING).count()),
            ("Completed feedback", ResponseEntity.objects.filter(status=ResponseStatus.COMPLETED).count()),
            ("Active discount codes", active_codes.count()),
            ("Redeemed discount codes", DiscountCode.objects.filter(is_redeemed=True).count()),
        ]

    def index(self, request, extra_context=None):
        extra_context = {**(extra_context or {}), "feedback_overview": self.feedback_overview()}
        return super().index(request, extra_context)


class FeedbackProAdminConfig(AdminConfig):
    default_site = "feedback_pro.admin_site.FeedbackProAdminSite"
