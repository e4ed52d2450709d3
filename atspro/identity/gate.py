from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Protocol

from atspro.core.errors import (
    IDENTITY_DISABLED_MESSAGE,
    SIGN_IN_FAILED_MESSAGE,
    IdentityError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    uid: str
    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.email or self.uid


IdentityListener = Callable[["Session | None"], None]


class IdentityProvider(Protocol):
    @property
    def enabled(self) -> bool: ...

    async def sign_in(self, credential: str) -> Session: ...

    async def sign_out(self, session: Session) -> None: ...


class IdentityGate:
    """Holds the signed-in identity and fans out changes to subscribers.

    Listeners are called synchronously, first with the current identity when
    they subscribe and then on every sign-in or sign-out.

    Every successful sign-in issues a fresh opaque session token. Callers must
    present it on each request; ``authenticate`` resolves it back to the
    signed-in identity.
    """

    def __init__(self, provider: IdentityProvider):
        self._provider = provider
        self._current: Session | None = None
        self._token: str | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def enabled(self) -> bool:
        return self._provider.enabled

    @property
    def current_user(self) -> Session | None:
        return self._current

    @property
    def session_token(self) -> str | None:
        return self._token

    def authenticate(self, token: str | None) -> Session | None:
        if not token or self._current is None or self._token is None:
            return None
        if not secrets.compare_digest(token.encode("utf-8"), self._token.encode("utf-8")):
            return None
        return self._current

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self._current)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, credential: str) -> Session:
        if not self._provider.enabled:
            raise IdentityError(IDENTITY_DISABLED_MESSAGE)
        try:
            session = await self._provider.sign_in(credential)
        except IdentityError:
            raise
        except Exception as exc:  # noqa: BLE001 - provider failures surface as one login error
            logger.warning("identity_sign_in_failed: %s", exc)
            raise IdentityError(SIGN_IN_FAILED_MESSAGE) from exc
        self._token = secrets.token_urlsafe(32)
        self._set(session)
        logger.info("identity_signed_in uid=%s", session.uid)
        return session

    async def sign_out(self) -> None:
        session = self._current
        if session is not None and self._provider.enabled:
            await self._provider.sign_out(session)
        self._token = None
        self._set(None)
        if session is not None:
            logger.info("identity_signed_out uid=%s", session.uid)

    def _set(self, session: Session | None) -> None:
        self._current = session
        for listener in list(self._listeners):
            listener(session)
