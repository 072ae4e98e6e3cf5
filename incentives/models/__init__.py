from .discount_code import DiscountCode

__all__ = ["DiscountCode"]
