"""
app/db/indexes.py

Purpose: Database index management

- Creation-order index backing GET /users
- Idempotent: safe to run on every startup
"""

from pymongo import ASCENDING

from app.core.logging import get_logger
from utils.constants import CREATED_AT_FIELD

logger = get_logger(__name__)


async def create_indexes(users):
    """
    Creates the indexes the users collection needs.
    This function is idempotent - safe to run multiple times.

    Args:
        users: Motor collection holding user records
    """
    try:
        logger.info("Creating database indexes...")

        # Listing is always sorted oldest first
        await users.create_index(
            [(CREATED_AT_FIELD, ASCENDING), ("_id", ASCENDING)],
            name="created_at_idx"
        )
        logger.debug("Created index on users.createdAt")

        user_indexes = await users.index_information()
        logger.info(f"✅ Database indexes ready: {len(user_indexes)} on users")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes(users):
    """
    Drops all custom indexes (keeps _id index).
    Use with caution! Only for maintenance.
    """
    try:
        logger.warning("Dropping all database indexes...")
        await users.drop_indexes()
        logger.info("✅ All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise
