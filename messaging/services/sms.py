import logging
import time

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

# 常量定义
CACHE_KEY_LIMIT = "sms:limit:{}"     # 同一手机号的发送间隔限制
DEFAULT_LIMIT_SECONDS = 60
DEFAULT_TIMEOUT_SECONDS = 5


class SMSService:
    """
    短信发送入口。

    - console 后端：只写日志，模拟发送成功，用于开发与测试；
    - http 后端：调用短信供应商的 HTTP 接口，返回 `State:1` 视为成功。
    """

    @staticmethod
    def _config() -> dict:
        return getattr(settings, "SMS_CONFIG", {}) or {}

    @classmethod
    def _send_console(cls, phone, message):
        logger.info("[SMS SIMULATION] To: %s, Body: %s", phone, message)
        return True, None

    @classmethod
    def _send_api_request(cls, phone, message):
        """
        内部方法：实际调用第三方 HTTP 接口
        """
        config = cls._config()

        params = {
            'Id': config.get('ORG_ID', ''),
            'Name': config.get('USERNAME', ''),
            'Psw': config.get('PASSWORD', ''),
            'Message': message,
            'Phone': phone,
            'Timestamp': int(time.time())
        }

        try:
            response = requests.get(
                config['API_URL'],
                params=params,
                timeout=config.get('TIMEOUT_SECONDS', DEFAULT_TIMEOUT_SECONDS),
            )
        except requests.RequestException as e:
            logger.error("短信接口调用异常: %s", e)
            return False, "SMS provider request failed"

        # 返回格式如: State:1, Id:35, FailPhone:...
        res_data = {}
        for item in response.text.split(','):
            if ':' in item:
                k, v = item.split(':', 1)
                res_data[k.strip()] = v.strip()

        if res_data.get('State') == '1':
            return True, None
        logger.warning("短信供应商返回失败: phone=%s state=%s", phone, res_data.get('State'))
        return False, f"SMS provider error: {res_data.get('State')}"

    @classmethod
    def send_message(cls, phone, body):
        """
        业务方法：发送一条短信，返回 (是否成功, 错误信息)。
        """
        config = cls._config()
        signature = config.get('SIGNATURE', '')
        message = f"{signature}{body}" if signature else body

        if config.get('BACKEND', 'console') == 'http':
            return cls._send_api_request(phone, message)
        return cls._send_console(phone, message)

    @classmethod
    def check_rate_limit(cls, phone):
        """
        发送频率限制：间隔内首次调用返回 True 并占位，重复调用返回 False。
        使用 cache.add 保证“检查 + 占位”原子完成。
        """
        seconds = cls._config().get('RATE_LIMIT_SECONDS', DEFAULT_LIMIT_SECONDS)
        return cache.add(CACHE_KEY_LIMIT.format(phone), "1", seconds)

    @classmethod
    def release_rate_limit(cls, phone):
        """发送失败时释放占位，允许立即重试。"""
        cache.delete(CACHE_KEY_LIMIT.format(phone))
