"""Identity supplied by the upstream identity provider."""

from fastapi import Request

from .config import get_settings
from .errors import Unauthenticated


def current_user_id(request: Request) -> str:
    """Return the opaque user id carried by the configured identity header."""
    user_id = request.headers.get(get_settings().identity_header, "").strip()
    if not user_id:
        raise Unauthenticated()
    return user_id
