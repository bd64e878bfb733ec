"""Authentication and session models"""

import time
from typing import Literal, MutableMapping, Optional

from pydantic import BaseModel

SESSION_KEY = "admin"
THEME_KEY = "theme"

Theme = Literal["light", "dark"]


class AdminSession(BaseModel):
    """Admin identity kept in the signed session cookie"""

    user_id: str
    email: str
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.time()) >= self.expires_at

    def save(self, session: MutableMapping) -> None:
        session[SESSION_KEY] = self.model_dump()

    @classmethod
    def load(cls, session: MutableMapping) -> Optional["AdminSession"]:
        data = session.get(SESSION_KEY)
        if not data:
            return None
        return cls(**data)

    @staticmethod
    def clear(session: MutableMapping) -> None:
        session.pop(SESSION_KEY, None)


class ThemePreference:
    """Light/dark preference stored in the visitor's session"""

    def __init__(self, session: MutableMapping, default: str = "light"):
        self.session = session
        self.default = default if default in ("light", "dark") else "light"

    def get(self) -> str:
        value = self.session.get(THEME_KEY)
        return value if value in ("light", "dark") else self.default

    def set(self, theme: Theme) -> str:
        if theme not in ("light", "dark"):
            raise ValueError(f"Unknown theme: {theme!r}")
        self.session[THEME_KEY] = theme
        return theme
