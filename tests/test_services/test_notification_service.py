"""Tests for the notification inbox."""

from uuid import uuid4

import pytest

from inbox.services import notification as notification_service


pytestmark = pytest.mark.asyncio


class TestNotifications:
    """Tests for notification creation and read state."""

    async def test_create_and_list_newest_first(self, db, staff_user, conversation):
        first = await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=conversation.id, message="first"
        )
        second = await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=conversation.id, message="second"
        )
        await db.commit()

        notifications = await notification_service.list_notifications(db, staff_user.id)

        assert [n.id for n in notifications] == [second.id, first.id]
        assert all(n.type == "assignment" for n in notifications)

    async def test_failure_is_swallowed(self, db, staff_user):
        """A notification for a missing conversation fails quietly."""
        result = await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=uuid4(), message="orphan"
        )

        assert result is None
        assert await notification_service.list_notifications(db, staff_user.id) == []

    async def test_mark_one_and_all_as_read(self, db, staff_user, conversation):
        first = await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=conversation.id, message="first"
        )
        await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=conversation.id, message="second"
        )
        await db.commit()

        await notification_service.mark_as_read(db, first.id, staff_user.id)
        unread = await notification_service.list_notifications(db, staff_user.id, unread_only=True)
        assert [n.message for n in unread] == ["second"]

        await notification_service.mark_all_as_read(db, staff_user.id)
        assert await notification_service.list_notifications(db, staff_user.id, unread_only=True) == []

    async def test_cannot_mark_another_users_notification(
        self, db, staff_user, other_staff, conversation
    ):
        notification = await notification_service.create_notification(
            db, user_id=staff_user.id, conversation_id=conversation.id, message="mine"
        )
        await db.commit()

        await notification_service.mark_as_read(db, notification.id, other_staff.id)

        unread = await notification_service.list_notifications(db, staff_user.id, unread_only=True)
        assert [n.id for n in unread] == [notification.id]
