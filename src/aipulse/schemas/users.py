"""User display schema.

Accounts, sessions and saved-tool rows belong to the hosted identity
provider. AI Pulse only turns the provider's user object into the shape
the profile UI shows.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from urllib.parse import quote

from aipulse.schemas.common import BaseSchema

AVATAR_FALLBACK_URL = (
    "https://ui-avatars.com/api/?name={name}&background=8B5CF6&color=fff&size=100"
)


class User(BaseSchema):
    id: str
    name: str
    email: str
    avatar: str
    join_date: str

    @classmethod
    def from_provider(cls, user: Mapping[str, Any]) -> "User":
        """Map an identity-provider user object to the display shape.

        Args:
            user: Provider user with ``id``, ``email``, ``created_at`` and
                optional ``user_metadata``

        Returns:
            User with a display name, avatar and "Month YYYY" join date
        """
        meta = user.get("user_metadata") or {}
        email = user.get("email") or ""

        name = (
            meta.get("full_name")
            or meta.get("name")
            or meta.get("user_name")
            or email.split("@")[0]
            or "User"
        )
        avatar = (
            meta.get("avatar_url")
            or meta.get("picture")
            or AVATAR_FALLBACK_URL.format(name=quote(name, safe=""))
        )

        return cls(
            id=str(user["id"]),
            name=name,
            email=email,
            avatar=avatar,
            join_date=_format_join_date(user.get("created_at")),
        )


def _format_join_date(created_at: str | None) -> str:
    if not created_at:
        return ""
    try:
        joined = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return joined.strftime("%B %Y")
