from .custom_user import CustomUser
from .business import Business

__all__ = [
    "CustomUser",
    "Business",
]
