from .sms import SMSService

__all__ = ["SMSService"]
