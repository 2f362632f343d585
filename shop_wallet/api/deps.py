"""
Shared FastAPI dependencies.
"""

from fastapi import Header


def get_current_user_id(x_user_id: int = Header(..., gt=0)) -> int:
    """
    Return the caller's user id.

    Authentication happens upstream; the gateway forwards the
    resolved user in the X-User-Id header.
    """
    return x_user_id
