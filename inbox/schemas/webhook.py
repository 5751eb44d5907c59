"""Normalized inbound webhook events."""

from pydantic import BaseModel


class InboundWhatsAppMessage(BaseModel):
    """A text message received through the WhatsApp Cloud API."""

    from_: str  # wa_id of the sender, also their phone number
    name: str
    text: str
    message_id: str
    timestamp: str


class InboundInstagramMessage(BaseModel):
    """A text message received through the Instagram Graph API."""

    sender_id: str
    text: str
    message_id: str
    timestamp: int
