# robomatch/principals.py
"""Caller identities passed explicitly into every engine operation.

A principal is either an authenticated account (``AuthenticatedPrincipal``)
or an anonymous visitor identified by a browser-held token
(``GuestPrincipal``). Guests only ever act as the client side of a mission.
"""
import re
import secrets
from dataclasses import dataclass
from typing import Optional, Union

GUEST_TOKEN_RE = re.compile(r"^[A-Za-z0-9_\-]{16,128}$")


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    user_id: int

    @property
    def is_guest(self) -> bool:
        return False

    def __str__(self):
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class GuestPrincipal:
    token: str
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return True

    def __str__(self):
        # never log the full token, it is the guest's only credential
        return f"guest:{self.token[:8]}"


Principal = Union[AuthenticatedPrincipal, GuestPrincipal]


def generate_guest_token() -> str:
    return f"guest_{secrets.token_urlsafe(24)}"


def is_valid_guest_token(token: Optional[str]) -> bool:
    return bool(token) and bool(GUEST_TOKEN_RE.match(token))
