"""
Enums shared by models and schemas.

- Role: account role (user, admin)
- Visibility: who can discover a paste (public, private, unlisted)
"""

import enum


class Role(str, enum.Enum):
    """
    Account roles.

    Attributes:
        user: Regular account (default on registration)
        admin: Administrative account; can read any paste and run the expiry sweep
    """

    user = "user"
    admin = "admin"


class Visibility(str, enum.Enum):
    """
    Paste visibility tiers.

    Attributes:
        public: Listed in recent/search results, readable by anyone
        private: Readable only by the owner (requires an owner at creation)
        unlisted: Readable by anyone with the short ID, never listed
    """

    public = "public"
    private = "private"
    unlisted = "unlisted"
