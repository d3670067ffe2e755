"""
IM routes: send messages and read directories through the configured providers.

Handlers are plain `def` so FastAPI runs the blocking provider calls in its threadpool.
IMError subclasses are turned into JSON error bodies by the handler in server.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from ...channels.base import IMClient
from ...channels.types import Message
from ..schemas import DepartmentOut, ErrorResponse, SendMessageRequest, UserOut

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Message rejected before sending"},
    502: {"model": ErrorResponse, "description": "Provider, auth or transport failure"},
    503: {"model": ErrorResponse, "description": "Client is missing a required setting"},
}


def _get_client(request: Request, provider: str) -> IMClient:
    """Resolve a provider client from the registry in app state."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="IM clients not initialized")
    try:
        return registry.get(provider)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/api/im/{provider}/messages", responses=ERROR_RESPONSES)
def send_message(provider: str, body: SendMessageRequest, request: Request):
    client = _get_client(request, provider)
    msg = Message.from_dict(body.message.model_dump(mode="json"))
    client.send_message(body.to_user_ids, body.to_dept_ids, msg)
    return {"status": "ok", "provider": provider, "type": msg.type.value}


@router.get(
    "/api/im/{provider}/departments",
    response_model=list[DepartmentOut],
    responses=ERROR_RESPONSES,
)
def list_departments(provider: str, request: Request):
    client = _get_client(request, provider)
    return [d.to_dict() for d in client.get_departments()]


@router.get(
    "/api/im/{provider}/users",
    response_model=list[UserOut],
    responses=ERROR_RESPONSES,
)
def list_users(provider: str, request: Request):
    client = _get_client(request, provider)
    return [u.to_dict() for u in client.get_users()]
