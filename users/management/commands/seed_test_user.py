"""
【业务说明】开发环境初始化测试商家账号（test@example.com / password123），已存在则跳过。
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from users import choices
from users.models import CustomUser

TEST_USER_EMAIL = "test@example.com"
TEST_USER_PASSWORD = "password123"


class Command(BaseCommand):
    help = "Create the development business owner account."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Allow running when DEBUG is off.",
        )

    def handle(self, *args, **options):
        if not settings.DEBUG and not options["force"]:
            raise CommandError("seed_test_user is only available in development (DEBUG=True).")

        existing = CustomUser.objects.filter(email=TEST_USER_EMAIL).first()
        if existing:
            self.stdout.write(self.style.SUCCESS(f"Test user already exists (id={existing.id}). Skipping."))
            return

        user = CustomUser.objects.create_user(
            email=TEST_USER_EMAIL,
            password=TEST_USER_PASSWORD,
            name="Test User",
            role=choices.UserRole.BUSINESS_OWNER,
            is_active=True,
        )
        self.stdout.write(self.style.SUCCESS(f"Test user created successfully (id={user.id})."))
