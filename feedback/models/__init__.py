from .response_entity import ResponseEntity
from .response import Response

__all__ = ["ResponseEntity", "Response"]
