"""
Database initialization script for the user directory

Run once to connect, create indexes and report the collection size:
    python scripts/init_db.py
    python scripts/init_db.py --drop   # drop custom indexes first
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from app.core.config import settings
from app.db.indexes import drop_all_indexes, create_indexes
from app.db.mongo import MongoUserStore

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def init_db(drop: bool = False):
    """Connect, (re)create indexes and print stats"""
    store = MongoUserStore(
        settings.MONGODB_URL,
        settings.MONGODB_DB_NAME,
        collection_name=settings.MONGODB_COLLECTION,
        timeout=settings.STORAGE_TIMEOUT_SECONDS,
    )

    logger.info(f"🔌 Connecting to MongoDB: {settings.MONGODB_DB_NAME}")

    try:
        # connect() creates the indexes
        await store.connect()
        users = store.collection

        if drop:
            await drop_all_indexes(users)
            await create_indexes(users)

        # ==================== VERIFICATION ====================
        logger.info("🔍 Verifying indexes...")
        indexes = await users.index_information()
        for idx_name in indexes.keys():
            if idx_name != "_id_":
                logger.info(f"    ✅ {idx_name}")

        # ==================== STATS ====================
        count = await users.count_documents({})
        logger.info(f"📊 {settings.MONGODB_COLLECTION}: {count} users")

        logger.info("✅ Database initialization complete!")

    except Exception as e:
        logger.error(f"❌ Error: {e}")
        raise

    finally:
        await store.close()


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  User Directory Database Setup")
    logger.info("=" * 60)

    await init_db(drop="--drop" in sys.argv[1:])

    logger.info("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
