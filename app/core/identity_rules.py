"""Identity Rules — pure helpers for account data.

Invariants:
    - Emails compare case-insensitively: normalize_email is applied on write AND lookup
    - An admin never deletes their own account through the admin cascade
"""

from uuid import UUID

from app.core.errors import ValidationError


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_can_delete_user(actor_id: UUID, target_id: UUID) -> None:
    """Raise if the admin cascade would remove the acting admin."""
    if actor_id == target_id:
        raise ValidationError("Admins cannot delete their own account", "userId")
