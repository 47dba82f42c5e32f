# Request identity

from .identity import (
    IdentityMiddleware,
    RequestIdentity,
    TokenDirectory,
    request_identity,
    require_admin,
    require_owner,
    resolve_owner,
    token_directory,
)

__all__ = [
    "IdentityMiddleware",
    "RequestIdentity",
    "TokenDirectory",
    "request_identity",
    "require_admin",
    "require_owner",
    "resolve_owner",
    "token_directory",
]
