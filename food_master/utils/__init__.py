"""
Утилиты приложения.
"""

from .helpers import join_url, new_request_id, safe_json_loads

__all__ = [
    "join_url",
    "new_request_id",
    "safe_json_loads",
]
