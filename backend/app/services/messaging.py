"""Templated outbound messages to leads.

Delivery lives outside the core; this module resolves per-recipient text and
hands it to a ``MessageSender``.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Protocol

from backend.app.core.errors import ValidationError
from backend.app.schemas.lead import Lead

logger = logging.getLogger("leaddesk.messaging")


@dataclass(frozen=True)
class MessageTemplate:
    id: str
    name: str
    content: str


@dataclass(frozen=True)
class OutboundMessage:
    lead_id: str
    student_name: str
    phone_number: str
    text: str


MESSAGE_TEMPLATES = {
    t.id: t
    for t in (
        MessageTemplate("welcome", "Welcome Message", "Hi {{name}}, welcome to our software training institute!"),
        MessageTemplate("followup", "Follow-up Message", "Hi {{name}}, how was your experience with the demo session?"),
        MessageTemplate("reminder", "Class Reminder", "Hi {{name}}, reminder for your upcoming class tomorrow!"),
        MessageTemplate("admission", "Admission Details", "Hi {{name}}, here are your admission details for {{course}}."),
    )
}


class MessageSender(Protocol):
    def send(self, messages: List[OutboundMessage]) -> None: ...


class LoggingMessageSender:
    """Stand-in delivery channel that records each message in the log."""

    def send(self, messages: List[OutboundMessage]) -> None:
        for message in messages:
            logger.info("Message to %s (%s): %s", message.student_name, message.phone_number, message.text)


def render_template(content: str, lead: Lead) -> str:
    return content.replace("{{name}}", lead.student_name).replace("{{course}}", lead.course_selected)


def get_template(template_id: str) -> MessageTemplate:
    template = MESSAGE_TEMPLATES.get(template_id)
    if template is None:
        raise ValidationError(f"Unknown message template: {template_id}")
    return template


def build_messages(template: MessageTemplate, recipients: Iterable[Lead]) -> List[OutboundMessage]:
    messages = [
        OutboundMessage(
            lead_id=lead.id,
            student_name=lead.student_name,
            phone_number=lead.phone_number,
            text=render_template(template.content, lead),
        )
        for lead in recipients
    ]
    if not messages:
        raise ValidationError("Select at least one recipient")
    return messages
