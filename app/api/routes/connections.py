"""Connection Routes — HTTP surface of the connection request workflow.

Invariants:
    - Every route requires the authentication gate; actor = authenticated user
    - Success bodies: {"success": true, ...}; failures come from the global error handlers
    - Routes hold no rules: validation by schemas, decisions by ConnectionWorkflow

Design Decisions:
    - Static paths (/requests/pending, /available-users) declared before /status/{user_id}
      so they never match as ids
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_connection_workflow, get_current_user
from app.core.domain_types import UserType
from app.models.user import User
from app.schemas.connection import (
    ConnectionOut,
    ConnectionRequestOut,
    PendingRequestOut,
    RemoveConnectionBody,
    RequestActionBody,
    SendRequestBody,
    SentRequestOut,
)
from app.schemas.user import PublicProfile
from app.services.connection_workflow import ConnectionWorkflow, RequestView

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/connections", tags=["connections"])


def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


def _request_data(request) -> dict:
    return _dump(ConnectionRequestOut.model_validate(request))


def _profile(user) -> PublicProfile | None:
    return PublicProfile.model_validate(user) if user is not None else None


def _pending_data(view: RequestView) -> dict:
    out = PendingRequestOut.model_validate(view.request)
    out.sender = _profile(view.counterpart)
    return _dump(out)


def _sent_data(view: RequestView) -> dict:
    out = SentRequestOut.model_validate(view.request)
    out.receiver = _profile(view.counterpart)
    return _dump(out)


@router.post("/request/send", status_code=status.HTTP_201_CREATED)
async def send_connection_request(
    body: SendRequestBody,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Send a connection request to another user."""
    request = await workflow.send_request(user.id, body.receiver_id, body.message)
    return {
        "success": True,
        "message": "Connection request sent successfully",
        "data": _request_data(request),
    }


@router.get("/requests/pending")
async def get_pending_requests(
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Requests waiting for the current user's answer, newest first."""
    views = await workflow.list_pending(user.id)
    return {
        "success": True,
        "data": [_pending_data(v) for v in views],
        "count": len(views),
    }


@router.get("/requests/sent")
async def get_sent_requests(
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Requests the current user sent that are still pending."""
    views = await workflow.list_sent(user.id)
    return {
        "success": True,
        "data": [_sent_data(v) for v in views],
        "count": len(views),
    }


@router.post("/request/accept")
async def accept_connection_request(
    body: RequestActionBody,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    request = await workflow.accept(body.request_id, user.id)
    return {
        "success": True,
        "message": "Connection request accepted",
        "data": _request_data(request),
    }


@router.post("/request/reject")
async def reject_connection_request(
    body: RequestActionBody,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    request = await workflow.reject(body.request_id, user.id)
    return {
        "success": True,
        "message": "Connection request rejected",
        "data": _request_data(request),
    }


@router.post("/request/cancel")
async def cancel_connection_request(
    body: RequestActionBody,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Withdraw a pending request the current user sent."""
    request = await workflow.cancel(body.request_id, user.id)
    return {
        "success": True,
        "message": "Connection request cancelled",
        "data": _request_data(request),
    }


@router.get("")
async def get_connections(
    search: str | None = Query(None, max_length=200),
    user_type: UserType | None = Query(None, alias="userType"),
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Current user's connections, optionally filtered by peer name/profession and type."""
    views = await workflow.list_connections(
        user.id, search, user_type.value if user_type else None,
    )
    data = []
    for view in views:
        out = ConnectionOut.model_validate(view.connection)
        out.peer = _profile(view.peer)
        data.append(_dump(out))
    return {"success": True, "data": data, "count": len(data)}


@router.post("/remove")
async def remove_connection(
    body: RemoveConnectionBody,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    await workflow.remove(user.id, body.connected_user_id)
    return {"success": True, "message": "Connection removed successfully"}


@router.get("/status/{user_id}")
async def get_connection_status(
    user_id: UUID,
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    result = await workflow.status(user.id, user_id)
    return {"success": True, "status": result.value}


@router.get("/available-users")
async def get_available_users(
    search: str | None = Query(None, max_length=200),
    user_type: UserType | None = Query(None, alias="userType"),
    user: User = Depends(get_current_user),
    workflow: ConnectionWorkflow = Depends(get_connection_workflow),
):
    """Users the current user could connect with (max 20, no pagination)."""
    users = await workflow.list_available(
        user.id, search, user_type.value if user_type else None,
    )
    data = [_dump(PublicProfile.model_validate(u)) for u in users]
    return {"success": True, "data": data, "count": len(data)}
