"""
Session identity passed explicitly into service calls.

Services never read the request or any global auth state. Views resolve the
current identity once with ``get_session_user(request)`` and hand the
resulting ``SessionUser`` (or ``None``) down as ``session=...``.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionUser:
    """Authenticated identity as seen by the inspection services."""

    uid: str
    display_name: str = ''
    email: str = ''
    store_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.display_name or self.email

    def as_identity(self) -> dict:
        """Identity stamp stored on inspections (``inspectedBy``/``correctedBy``)."""
        return {'userId': self.uid, 'name': self.name}

    @classmethod
    def from_user(cls, user) -> 'SessionUser':
        return cls(
            uid=str(user.id),
            display_name=user.display_name,
            email=user.email,
            store_id=user.store_id or None,
        )


def get_session_user(request) -> Optional[SessionUser]:
    """Return the request's identity, or None when unauthenticated."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return SessionUser.from_user(user)
