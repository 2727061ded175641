"""
Seed the configured store with sample users

Run: python scripts/seed_users.py
Uses STORAGE_BACKEND from .env, so it fills either MongoDB or the JSON file.
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from app.core.exceptions import UserDirectoryError
from app.db.store import build_user_store

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {"name": "Ann", "age": 30, "city": "Lyon"},
    {"name": "Ravi Kumar", "age": 42, "city": "Pune"},
    {"name": "Maria Silva", "age": 27, "city": "Lisbon"},
    {"name": "Tom", "age": 65, "city": "Leeds"},
]


async def seed():
    store = build_user_store()
    await store.connect()

    try:
        existing = await store.list_users()
        if existing:
            logger.info(f"ℹ️  Store already has {len(existing)} users, skipping seed")
            return

        for user in SAMPLE_USERS:
            record = await store.create_user(user["name"], user["age"], user["city"])
            logger.info(f"✅ Created {record.name} ({record.id})")

    except UserDirectoryError as e:
        logger.error(f"❌ Seed failed: {e.message} {e.details or ''}")
        raise

    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(seed())
