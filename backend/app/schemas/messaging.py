"""Messaging schemas for templates and resolved messages."""

from pydantic import BaseModel, ConfigDict


class MessageTemplateRead(BaseModel):
    id: str
    name: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class MessageRequest(BaseModel):
    template_id: str
    lead_ids: list[str]


class OutboundMessageRead(BaseModel):
    lead_id: str
    student_name: str
    phone_number: str
    text: str

    model_config = ConfigDict(from_attributes=True)


class MessageDispatchResult(BaseModel):
    sent: int
    messages: list[OutboundMessageRead]
