"""
Request identity resolution.

The auth service issues bearer tokens and the browser keeps an anonymous
session id. The middleware turns those credentials into request state;
route dependencies then resolve exactly one cart owner from it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ..core.config import Settings, settings
from ..core.errors import Forbidden, IdentityMissing
from ..models.owner import OwnerKey

logger = logging.getLogger(__name__)


class TokenDirectory:
    """
    Bearer tokens accepted by this service.

    Usage:
        directory = TokenDirectory()
        directory.register("opaque-token", user_id="user-42")
        directory.lookup("opaque-token")  # -> "user-42"
    """

    def __init__(self):
        self._tokens: dict[str, str] = {}

    def register(self, token: str, user_id: str) -> None:
        if not token or not user_id:
            raise ValueError("Token and user id are required")
        self._tokens[token] = user_id

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    def lookup(self, token: str) -> Optional[str]:
        return self._tokens.get(token)

    def reset(self) -> None:
        self._tokens.clear()


def resolve_owner(user_id: Optional[str], session_id: Optional[str]) -> OwnerKey:
    """
    Pick the cart owner for a request.

    An authenticated user always wins over an anonymous session.
    """
    if user_id:
        return OwnerKey.user(user_id)
    if session_id:
        return OwnerKey.session(session_id)
    raise IdentityMissing()


def _bearer_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class IdentityMiddleware(BaseHTTPMiddleware):
    """
    Middleware that attaches the caller's credentials to ``request.state``.

    A bearer token that the directory does not know is rejected outright.
    Requests without credentials pass through; routes that need an owner
    reject them via ``require_owner``.
    """

    def __init__(self, app, directory: TokenDirectory, config: Settings):
        super().__init__(app)
        self.directory = directory
        self.session_header = config.session_header
        self.session_cookie = config.session_cookie

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        user_id = None
        token = _bearer_token(request)

        if token:
            user_id = self.directory.lookup(token)
            if user_id is None:
                logger.warning(f"Rejected unknown bearer token on {request.method} {request.url.path}")
                return JSONResponse(
                    status_code=401,
                    content={"detail": "Invalid or expired token", "code": "invalid_token"},
                )

        session_id = (
            request.headers.get(self.session_header)
            or request.cookies.get(self.session_cookie)
            or None
        )

        request.state.user_id = user_id
        request.state.session_id = session_id

        return await call_next(request)


@dataclass
class RequestIdentity:
    """Credentials presented with a request"""
    user_id: Optional[str] = None
    session_id: Optional[str] = None

    @property
    def owner(self) -> OwnerKey:
        return resolve_owner(self.user_id, self.session_id)


async def request_identity(request: Request) -> RequestIdentity:
    return RequestIdentity(
        user_id=getattr(request.state, "user_id", None),
        session_id=getattr(request.state, "session_id", None),
    )


class OwnerDependency:
    """
    FastAPI dependency resolving the cart owner.

    Use ``require_admin=True`` for back-office routes; the resolved owner
    must then be an authenticated user listed as an administrator.
    """

    def __init__(self, require_admin: bool = False):
        self.require_admin = require_admin

    async def __call__(self, identity: RequestIdentity = Depends(request_identity)) -> OwnerKey:
        owner = identity.owner

        if self.require_admin and not settings.is_admin(owner.user_id):
            logger.warning(f"Non-admin {owner} attempted an admin operation")
            raise Forbidden()

        return owner


# Singleton instance
token_directory = TokenDirectory()
for _token, _user_id in settings.auth_tokens.items():
    token_directory.register(_token, _user_id)

# Dependency instances
require_owner = OwnerDependency()
require_admin = OwnerDependency(require_admin=True)
