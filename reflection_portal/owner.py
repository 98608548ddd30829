"""Owner identity — sign-in, session storage, and the request dependency.

The portal has no real accounts. A staff member signs in with the last four
digits of their phone number plus a password of their choosing; the digits
become the owner identity that partitions every stored record. Routers get
the identity through the ``current_owner`` dependency and pass it into the
record store explicitly.
"""

import re
from dataclasses import dataclass

from fastapi import HTTPException, Request

SESSION_OWNER_KEY = "owner_id"

_PHONE_SUFFIX_RE = re.compile(r"^[0-9]{4}$")


@dataclass(frozen=True)
class OwnerContext:
    owner_id: str


class SignInRequired(HTTPException):
    """Raised by current_owner when the session has no owner; mapped to a redirect."""

    def __init__(self):
        super().__init__(status_code=303, headers={"Location": "/login"})


def normalize_phone_suffix(raw: str) -> str:
    """Keep digits only, as the login field does while typing."""
    return re.sub(r"[^0-9]", "", raw or "")[:4]


def validate_sign_in(phone_suffix: str, password: str) -> str | None:
    """Return an error message, or None if the credentials are acceptable."""
    if not _PHONE_SUFFIX_RE.match(phone_suffix):
        return "Enter exactly the last 4 digits of your phone number."
    if not password.strip():
        return "Set a password to identify yourself."
    return None


def sign_in(request: Request, phone_suffix: str) -> OwnerContext:
    request.session[SESSION_OWNER_KEY] = phone_suffix
    return OwnerContext(owner_id=phone_suffix)


def sign_out(request: Request) -> None:
    request.session.clear()


def owner_from_session(request: Request) -> OwnerContext | None:
    owner_id = request.session.get(SESSION_OWNER_KEY)
    if not owner_id:
        return None
    return OwnerContext(owner_id=owner_id)


def current_owner(request: Request) -> OwnerContext:
    """FastAPI dependency: the signed-in owner, or a redirect to /login."""
    owner = owner_from_session(request)
    if owner is None:
        raise SignInRequired()
    return owner
