"""Utility exports."""
from .checks import constant_time_compare, ensure_complete
from .encoding import b64d, b64e, check_json_limits, is_json_object, load_json

__all__ = [
    "b64e",
    "b64d",
    "check_json_limits",
    "constant_time_compare",
    "ensure_complete",
    "is_json_object",
    "load_json",
]
