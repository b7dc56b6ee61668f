"""Admin Routes — moderation actions restricted to admin identities.

Invariants:
    - Every route depends on require_admin (401 without token, 403 for non-admins)
    - User deletion cascades to all connections and connection requests of that user
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.dependencies import get_account_service, require_admin
from app.models.user import User
from app.services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """Delete a user together with every connection and request involving them."""
    await accounts.delete_user(admin.id, user_id)
    return {
        "success": True,
        "message": "User and all associated data deleted successfully",
    }
