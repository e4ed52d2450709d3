from .firebase import FirebaseIdentityProvider, session_from_claims
from .gate import IdentityGate, IdentityListener, IdentityProvider, Session

__all__ = [
    "Session",
    "IdentityGate",
    "IdentityListener",
    "IdentityProvider",
    "FirebaseIdentityProvider",
    "session_from_claims",
]
