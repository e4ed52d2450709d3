from __future__ import annotations

import asyncio
from typing import Any

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from atspro.core.config import Settings
from atspro.core.errors import SIGN_IN_FAILED_MESSAGE, IdentityError
from atspro.identity.gate import Session


def _claim(claims: dict[str, Any], *names: str) -> str | None:
    for name in names:
        value = claims.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def session_from_claims(claims: dict[str, Any]) -> Session:
    uid = _claim(claims, "user_id", "sub", "uid")
    if not uid:
        raise IdentityError(SIGN_IN_FAILED_MESSAGE)
    return Session(
        uid=uid,
        display_name=_claim(claims, "name"),
        email=_claim(claims, "email"),
        photo_url=_claim(claims, "picture"),
    )


class FirebaseIdentityProvider:
    """Verifies Firebase ID tokens issued to the browser after Google sign-in."""

    def __init__(self, config: Settings):
        self._api_key = config.firebase_api_key
        self._project_id = config.firebase_project_id

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _verify(self, credential: str) -> dict[str, Any]:
        if not self._project_id:
            raise IdentityError(SIGN_IN_FAILED_MESSAGE)
        return id_token.verify_firebase_token(
            credential,
            google_requests.Request(),
            audience=self._project_id,
        )

    async def sign_in(self, credential: str) -> Session:
        token = (credential or "").strip()
        if not token:
            raise IdentityError(SIGN_IN_FAILED_MESSAGE)
        claims = await asyncio.to_thread(self._verify, token)
        if not claims:
            raise IdentityError(SIGN_IN_FAILED_MESSAGE)
        return session_from_claims(claims)

    async def sign_out(self, session: Session) -> None:
        # ID tokens are stateless; the browser SDK drops its own copy.
        return None
