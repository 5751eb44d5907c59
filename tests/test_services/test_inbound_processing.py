"""Tests for background processing of normalized webhook events."""

import pytest
from sqlalchemy import func, select

from inbox.models import Conversation, Customer, Message
from inbox.schemas.webhook import InboundInstagramMessage, InboundWhatsAppMessage
from inbox.services import inbox as inbox_service


pytestmark = pytest.mark.asyncio


def _wa(from_: str, text: str, name: str = "Lucía", message_id: str = "wamid.1"):
    return InboundWhatsAppMessage(
        from_=from_, name=name, text=text, message_id=message_id, timestamp="1700000000"
    )


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


class TestProcessWhatsAppMessages:
    """Tests for process_whatsapp_messages."""

    async def test_new_sender_creates_customer_conversation_and_message(
        self, db, session_factory
    ):
        await inbox_service.process_whatsapp_messages(
            session_factory, [_wa("5215511111111", "Hola")]
        )

        customer = (await db.execute(select(Customer))).scalar_one()
        assert customer.platform == "whatsapp"
        assert customer.name == "Lucía"
        assert customer.phone_number == "5215511111111"

        conversation = (await db.execute(select(Conversation))).scalar_one()
        assert conversation.status == "open"
        assert conversation.customer_id == customer.id

        message = (await db.execute(select(Message))).scalar_one()
        assert message.sender_type == "customer"
        assert message.content == "Hola"

    async def test_messages_of_one_sender_share_a_conversation(self, db, session_factory):
        await inbox_service.process_whatsapp_messages(
            session_factory,
            [
                _wa("5215511111111", "uno", message_id="wamid.1"),
                _wa("5215511111111", "dos", message_id="wamid.2"),
            ],
        )

        assert await _count(db, Customer) == 1
        assert await _count(db, Conversation) == 1
        result = await db.execute(select(Message).order_by(Message.created_at))
        assert [m.content for m in result.scalars().all()] == ["uno", "dos"]

    async def test_placeholder_name_does_not_overwrite_real_name(
        self, db, session_factory, customer
    ):
        await inbox_service.process_whatsapp_messages(
            session_factory, [_wa(customer.platform_user_id, "hi", name="Unknown")]
        )

        await db.refresh(customer)
        assert customer.name == "Maria García"

    async def test_failing_event_does_not_stop_the_rest(
        self, db, session_factory, monkeypatch
    ):
        real_ingest = inbox_service.ingest_message

        async def flaky_ingest(db, **kwargs):
            if kwargs["text"] == "boom":
                raise RuntimeError("storage exploded")
            await real_ingest(db, **kwargs)

        monkeypatch.setattr(inbox_service, "ingest_message", flaky_ingest)

        await inbox_service.process_whatsapp_messages(
            session_factory,
            [
                _wa("5215511111111", "before", message_id="wamid.1"),
                _wa("5215522222222", "boom", message_id="wamid.2"),
                _wa("5215533333333", "after", message_id="wamid.3"),
            ],
        )

        result = await db.execute(select(Message.content).order_by(Message.created_at))
        assert list(result.scalars().all()) == ["before", "after"]


class TestProcessInstagramMessages:
    """Tests for process_instagram_messages."""

    async def test_stores_message_for_instagram_sender(self, db, session_factory):
        await inbox_service.process_instagram_messages(
            session_factory,
            [
                InboundInstagramMessage(
                    sender_id="17841400000000009",
                    text="hey!",
                    message_id="mid.1",
                    timestamp=1700000000000,
                )
            ],
        )

        customer = (await db.execute(select(Customer))).scalar_one()
        assert customer.platform == "instagram"
        assert customer.name is None
        assert customer.phone_number is None

        message = (await db.execute(select(Message))).scalar_one()
        assert message.platform == "instagram"
        assert message.content == "hey!"

    async def test_resolved_thread_gets_a_new_conversation(
        self, db, session_factory, ig_customer
    ):
        db.add(
            Conversation(
                customer_id=ig_customer.id, platform="instagram", status="resolved"
            )
        )
        await db.commit()

        await inbox_service.process_instagram_messages(
            session_factory,
            [
                InboundInstagramMessage(
                    sender_id=ig_customer.platform_user_id,
                    text="one more thing",
                    message_id="mid.2",
                    timestamp=1700000000000,
                )
            ],
        )

        result = await db.execute(
            select(Conversation.status).where(Conversation.customer_id == ig_customer.id)
        )
        assert sorted(result.scalars().all()) == ["open", "resolved"]
