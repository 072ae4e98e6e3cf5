"""
Django settings for feedback_pro project.

所有可变配置均从环境变量读取（本地开发可写入 .env，由 python-dotenv 加载）。
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-feedback-pro-dev-key")

DEBUG = _env_bool("DJANGO_DEBUG", True)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]


# Application definition

INSTALLED_APPS = [
    "feedback_pro.admin_site.FeedbackProAdminConfig",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "users",
    "surveys",
    "feedback",
    "incentives",
    "messaging",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "feedback_pro.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "feedback_pro.wsgi.application"


# Database
# 默认 SQLite；生产环境设置 DB_ENGINE=mysql，驱动由 PyMySQL 提供。

if os.getenv("DB_ENGINE", "sqlite").lower() == "mysql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.mysql",
            "NAME": os.getenv("DB_NAME", "feedback_pro"),
            "USER": os.getenv("DB_USER", "root"),
            "PASSWORD": os.getenv("DB_PASSWORD", ""),
            "HOST": os.getenv("DB_HOST", "127.0.0.1"),
            "PORT": os.getenv("DB_PORT", "3306"),
            "OPTIONS": {"charset": "utf8mb4"},
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / os.getenv("SQLITE_NAME", "db.sqlite3"),
        }
    }


# Cache
# 短信频率限制依赖缓存；配置 REDIS_URL 时使用 django-redis。

REDIS_URL = os.getenv("REDIS_URL")
if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": REDIS_URL,
            "OPTIONS": {"CLIENT_CLASS": "django_redis.client.DefaultClient"},
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "feedback-pro",
        }
    }


AUTH_USER_MODEL = "users.CustomUser"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator", "OPTIONS": {"min_length": 6}},
]

LOGIN_URL = "users:login"
LOGIN_REDIRECT_URL = "users:dashboard"


# Internationalization

LANGUAGE_CODE = "en-us"

TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "UTC")

USE_I18N = True

USE_TZ = True


STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Admin 首页应用排序
ADMIN_APP_ORDER = ["users", "surveys", "feedback", "incentives"]


# ---------------------------------------------------------------------------
# 业务配置
# ---------------------------------------------------------------------------

# 对外可访问的站点根地址，用于拼接短信中的反馈链接与二维码内容。
WEB_BASE_URL = os.getenv("WEB_BASE_URL", "http://localhost:8000")

SMS_CONFIG = {
    # console: 仅记录日志（模拟发送）；http: 调用短信供应商 HTTP 接口
    "BACKEND": os.getenv("SMS_BACKEND", "console"),
    "API_URL": os.getenv("SMS_API_URL", ""),
    "ORG_ID": os.getenv("SMS_ORG_ID", ""),
    "USERNAME": os.getenv("SMS_USERNAME", ""),
    "PASSWORD": os.getenv("SMS_PASSWORD", ""),
    "SIGNATURE": os.getenv("SMS_SIGNATURE", ""),
    "TIMEOUT_SECONDS": int(os.getenv("SMS_TIMEOUT_SECONDS", "5")),
    "RATE_LIMIT_SECONDS": int(os.getenv("SMS_RATE_LIMIT_SECONDS", "60")),
}

DISCOUNT_CODE = {
    "LENGTH": int(os.getenv("DISCOUNT_CODE_LENGTH", "8")),
    "PREFIX": os.getenv("DISCOUNT_CODE_PREFIX", "SAVE"),
    "MAX_ATTEMPTS": int(os.getenv("DISCOUNT_CODE_MAX_ATTEMPTS", "10")),
}

# 提交反馈后自动发放的奖励。QUALIFYING_TYPES 为 ResponseEntity.type 的取值，
# 默认仅商家直发短信的链接发放；如需扫码来源也发放，加入 "QR_INITIATED_SMS" / "QR"。
FEEDBACK_REWARD = {
    "QUALIFYING_TYPES": [
        item.strip()
        for item in os.getenv("FEEDBACK_REWARD_TYPES", "DIRECT_SMS").split(",")
        if item.strip()
    ],
    "DISCOUNT_TYPE": os.getenv("FEEDBACK_REWARD_DISCOUNT_TYPE", "PERCENTAGE"),
    "DISCOUNT_VALUE": os.getenv("FEEDBACK_REWARD_DISCOUNT_VALUE", "10"),
    "VALID_DAYS": int(os.getenv("FEEDBACK_REWARD_VALID_DAYS", "30")),
}


# Logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
    },
}
