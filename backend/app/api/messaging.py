"""Templated messaging endpoints."""

from fastapi import APIRouter, Depends, Request

from backend.app.api.leads import get_visible_lead
from backend.app.core.identity import Identity
from backend.app.dependencies.auth import get_current_user
from backend.app.dependencies.store import get_lead_store
from backend.app.schemas.messaging import (
    MessageDispatchResult,
    MessageRequest,
    MessageTemplateRead,
    OutboundMessageRead,
)
from backend.app.services.lead_store import LeadStore
from backend.app.services.messaging import (
    MESSAGE_TEMPLATES,
    LoggingMessageSender,
    MessageSender,
    OutboundMessage,
    build_messages,
    get_template,
)

router = APIRouter(prefix="/messaging", tags=["messaging"])


def get_message_sender(request: Request) -> MessageSender:
    sender = getattr(request.app.state, "message_sender", None)
    if sender is None:
        sender = LoggingMessageSender()
        request.app.state.message_sender = sender
    return sender


def _resolve(store: LeadStore, request_in: MessageRequest, user: Identity) -> list[OutboundMessage]:
    template = get_template(request_in.template_id)
    recipients = [get_visible_lead(store, lead_id, user) for lead_id in dict.fromkeys(request_in.lead_ids)]
    return build_messages(template, recipients)


@router.get("/templates", response_model=list[MessageTemplateRead])
async def list_templates(current_user: Identity = Depends(get_current_user)):
    return list(MESSAGE_TEMPLATES.values())


@router.post("/preview", response_model=list[OutboundMessageRead])
async def preview_messages(
    request_in: MessageRequest,
    store: LeadStore = Depends(get_lead_store),
    current_user: Identity = Depends(get_current_user),
):
    return _resolve(store, request_in, current_user)


@router.post("/send", response_model=MessageDispatchResult)
async def send_messages(
    request_in: MessageRequest,
    store: LeadStore = Depends(get_lead_store),
    sender: MessageSender = Depends(get_message_sender),
    current_user: Identity = Depends(get_current_user),
):
    messages = _resolve(store, request_in, current_user)
    sender.send(messages)
    return MessageDispatchResult(
        sent=len(messages),
        messages=[OutboundMessageRead.model_validate(message) for message in messages],
    )
