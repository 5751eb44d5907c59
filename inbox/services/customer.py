"""Customer service - platform identity reconciliation."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.exceptions import InternalError
from inbox.models import Customer, Platform

logger = logging.getLogger(__name__)


async def get_customer_by_platform_id(
    db: AsyncSession, platform: str, platform_user_id: str
) -> Customer | None:
    """Get customer by its natural key."""
    result = await db.execute(
        select(Customer).where(
            Customer.platform == platform,
            Customer.platform_user_id == platform_user_id,
        )
    )
    return result.scalar_one_or_none()


async def find_or_create_customer(
    db: AsyncSession,
    platform: Platform | str,
    platform_user_id: str,
    name: str | None = None,
    phone_number: str | None = None,
) -> Customer:
    """Get or create a customer by (platform, platform_user_id).

    This is THE key function for customer identity on inbound messages.
    An existing customer picks up a new display name when the platform
    reports one; nothing else about them changes.
    """
    platform = Platform(platform).value

    customer = await get_customer_by_platform_id(db, platform, platform_user_id)
    if customer:
        if name and name != customer.name:
            customer.name = name
            await db.flush()
        return customer

    customer = Customer(
        platform=platform,
        platform_user_id=platform_user_id,
        name=name or None,
        phone_number=phone_number or None,
    )
    try:
        async with db.begin_nested():
            db.add(customer)
    except IntegrityError:
        # Lost a race with a concurrent insert of the same identity
        existing = await get_customer_by_platform_id(db, platform, platform_user_id)
        if existing is None:
            logger.error(f"Failed to create customer {platform}:{platform_user_id}")
            raise InternalError("Failed to create customer.")
        return existing
    except SQLAlchemyError as e:
        logger.error(f"Failed to create customer {platform}:{platform_user_id}: {e}")
        raise InternalError("Failed to create customer.") from e

    logger.info(f"New customer created: {customer.id} ({platform})")
    return customer
