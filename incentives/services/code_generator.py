"""
优惠码生成。

generate_discount_code 为纯函数；generate_unique_discount_code 在其外层做有限次数的唯一性重试，
次数用尽时抛出 CodeGenerationExhaustedError，不会返回可能重复的结果。
"""

import secrets
from typing import Callable, Optional

from django.conf import settings

from incentives.models import DiscountCode

# 去掉易混淆的 0/O/1/I
DISCOUNT_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_CODE_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 10


class CodeGenerationExhaustedError(Exception):
    """在允许的尝试次数内未能生成未被占用的优惠码。"""

    code = "code_generation_exhausted"

    def __init__(self, attempts: int):
        super().__init__(
            f"Failed to generate a unique discount code after {attempts} attempts"
        )
        self.attempts = attempts


def _config() -> dict:
    return getattr(settings, "DISCOUNT_CODE", {}) or {}


def generate_discount_code(length: int = DEFAULT_CODE_LENGTH, prefix: str = "") -> str:
    """
    【业务说明】生成一个随机优惠码：prefix + length 位字符，字符均匀取自 DISCOUNT_CODE_ALPHABET。
    【参数】length: 随机部分长度（不含前缀），必须 >= 1；prefix: 可选前缀。
    【返回值】优惠码字符串。
    """

    if length < 1:
        raise ValueError("length must be a positive integer")
    body = "".join(secrets.choice(DISCOUNT_CODE_ALPHABET) for _ in range(length))
    return f"{prefix or ''}{body}"


def code_exists(code: str) -> bool:
    return DiscountCode.objects.filter(code=code).exists()


def generate_unique_discount_code(
    exists: Optional[Callable[[str], bool]] = None,
    length: Optional[int] = None,
    prefix: Optional[str] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """
    【业务说明】生成当前未被占用的优惠码。
    【参数】
    - exists: 判断候选码是否已存在的函数，默认查询 DiscountCode 表；
    - length / prefix / max_attempts: 缺省时读取 settings.DISCOUNT_CODE。
    【返回值】第一个 exists 返回 False 的候选码；前 K 次均冲突时在第 K+1 次返回。
    【异常】CodeGenerationExhaustedError。
    【注意】这里只是预检，最终以 DiscountCode.code 的唯一索引为准。
    """

    config = _config()
    exists = exists or code_exists
    length = config.get("LENGTH", DEFAULT_CODE_LENGTH) if length is None else length
    prefix = config.get("PREFIX", "") if prefix is None else prefix
    if max_attempts is None:
        max_attempts = config.get("MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)

    for _ in range(max_attempts):
        candidate = generate_discount_code(length, prefix)
        if not exists(candidate):
            return candidate

    raise CodeGenerationExhaustedError(max_attempts)
