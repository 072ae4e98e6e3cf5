from django.contrib.auth.base_user import BaseUserManager

from users import choices


class CustomUserManager(BaseUserManager):
    """
    【业务说明】封装自定义用户的创建流程，统一处理邮箱规范化、密码设定与字段校验。
    【用法】通过 `CustomUser.objects.create_user` 或 `create_superuser` 调用。
    【使用示例】`CustomUser.objects.create_user(email="owner@example.com", password="secret1", name="Cafe")`。
    """

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        """
        【业务说明】统一的底层建号逻辑，负责邮箱规范化、密码处理与持久化。
        【用法】外部不要直接调用，使用 `create_user` / `create_superuser`。
        """

        if not email:
            raise ValueError("Users must have an email address.")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_user(self, email=None, password=None, **extra_fields):
        """
        【业务说明】创建普通账号，默认 role=商家 且无后台权限。
        【用法】注册流程或测试数据构造时调用。
        """

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", choices.UserRole.BUSINESS_OWNER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        """
        【业务说明】创建平台管理员账号，强制开启后台权限。
        【用法】`python manage.py createsuperuser` 会调用。
        """

        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", choices.UserRole.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)
