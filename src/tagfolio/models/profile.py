"""Profile card model for tagfolio application."""

from dataclasses import asdict, dataclass, fields
from typing import Any

DEFAULT_NAME = "Your Name"
DEFAULT_BIO = "기록을 좋아하는 사람입니다 :)"
DEFAULT_EMAIL = "email@example.com"
DEFAULT_LINK = "https://example.com"


@dataclass
class Profile:
    """The owner's profile card shown above the gallery."""

    name: str = DEFAULT_NAME
    bio: str = DEFAULT_BIO
    email: str = DEFAULT_EMAIL
    link: str = DEFAULT_LINK

    @classmethod
    def from_form(cls, name: str, bio: str, email: str, link: str) -> "Profile":
        """
        Build a profile from the editor inputs.

        Empty name and link fall back to their defaults; bio and email may be
        left empty.
        """
        return cls(
            name=(name or "").strip() or DEFAULT_NAME,
            bio=(bio or "").strip(),
            email=(email or "").strip(),
            link=(link or "").strip() or DEFAULT_LINK,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Profile":
        """Create a profile from persisted data, ignoring unknown keys."""
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{key: str(value) for key, value in data.items() if key in known and value is not None})

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
