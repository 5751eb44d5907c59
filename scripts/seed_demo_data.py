"""Seed demo data for local inbox testing.

This script creates:
- An admin and a staff member (password: demo1234)
- An Instagram customer with an open conversation and one inbound message
- A WhatsApp customer with an open conversation assigned to the staff member

Run this after creating the database schema with Alembic.

Usage:
    python scripts/seed_demo_data.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inbox.database import async_session_factory
from inbox.models import Platform, SenderType, UserRole
from inbox.services import auth as auth_service
from inbox.services import conversation as conversation_service
from inbox.services import customer as customer_service
from inbox.services import message as message_service

DEMO_PASSWORD = "demo1234"
DEMO_ADMIN = ("Demo Admin", "admin@inbox.dev")
DEMO_STAFF = ("Pedro González", "pedro@inbox.dev")


async def get_or_register(db, name: str, email: str, role: UserRole):
    existing = await auth_service.get_user_by_email(db, email)
    if existing:
        print(f"✅ User already exists: {email}")
        return existing
    user = await auth_service.register(db, name, email, DEMO_PASSWORD, role=role)
    print(f"👤 Created {role.value}: {email}")
    return user


async def seed_data():
    """Seed demo data."""
    async with async_session_factory() as db:
        try:
            print("🌱 Starting demo data seeding...")
            print("=" * 80)

            await get_or_register(db, *DEMO_ADMIN, UserRole.ADMIN)
            staff = await get_or_register(db, *DEMO_STAFF, UserRole.STAFF)

            ig_customer = await customer_service.find_or_create_customer(
                db, Platform.INSTAGRAM, "dummy_user_123", name="Test User"
            )
            ig_conversation = await conversation_service.find_or_create_conversation(
                db, ig_customer.id, Platform.INSTAGRAM
            )
            await message_service.store_message(
                db,
                conversation_id=ig_conversation.id,
                sender_type=SenderType.CUSTOMER,
                content="Hello! This is a test message to verify the dashboard.",
                platform=Platform.INSTAGRAM,
            )
            print(f"📸 Instagram conversation: {ig_conversation.id}")

            wa_customer = await customer_service.find_or_create_customer(
                db,
                Platform.WHATSAPP,
                "5215512345678",
                name="María García",
                phone_number="5215512345678",
            )
            wa_conversation = await conversation_service.find_or_create_conversation(
                db, wa_customer.id, Platform.WHATSAPP
            )
            await message_service.store_message(
                db,
                conversation_id=wa_conversation.id,
                sender_type=SenderType.CUSTOMER,
                content="Hola, ¿tienen envíos a Monterrey?",
                platform=Platform.WHATSAPP,
            )
            await conversation_service.assign_conversation(db, wa_conversation.id, staff.id)
            print(f"📱 WhatsApp conversation: {wa_conversation.id} (assigned to {staff.email})")

            await db.commit()
            print("=" * 80)
            print(f"✅ Done. Log in with {DEMO_ADMIN[1]} / {DEMO_PASSWORD}")
        except Exception as e:
            await db.rollback()
            print(f"❌ Error seeding data: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(seed_data())
