"""
Auth gate for protected routes.

The Authorization header carries the raw access token. A leading "Bearer "
scheme is accepted too and stripped. Routers attach get_current_user once via
`dependencies=[Depends(get_current_user)]`; handlers that also declare it get
the same cached identity for the request.

FastAPI parses the request body before it runs dependencies, so a malformed
body on a protected path never reaches get_current_user. The request
validation handler calls it first for those paths, via is_protected_path.
"""
import logging
from typing import Optional

from fastapi import Request

from .credentials import UserIdentity
from .errors import Unauthorized

logger = logging.getLogger("travel_notes.auth")

BEARER_PREFIX = "bearer "

PROTECTED_PREFIXES = ("/me", "/notes", "/packinglist")


def extract_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    token = header_value.strip()
    if token.lower().startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):].strip()
    return token or None


def is_protected_path(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


# PUBLIC_INTERFACE
def get_current_user(request: Request) -> UserIdentity:
    """Resolves the request's token to a user, or raises Unauthorized."""
    token = extract_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("Rejected %s %s: no access token", request.method, request.url.path)
        raise Unauthorized()
    user = request.app.state.context.credentials.resolve_token(token)
    if user is None:
        logger.info("Rejected %s %s: unknown access token", request.method, request.url.path)
        raise Unauthorized()
    return user
