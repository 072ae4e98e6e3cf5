"""users admin package imports."""

from .accounts import BusinessAdmin, CustomUserAdmin

__all__ = [
    "CustomUserAdmin",
    "BusinessAdmin",
]
