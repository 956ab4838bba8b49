"""
Create the database schema.

Usage (from `api/`):
    python -m core.init_db
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from . import settings
from .db import Database
from .log import setup_logging

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def schema_sql() -> str:
    return SCHEMA_PATH.read_text(encoding="utf-8")


async def apply_schema(db: Database) -> None:
    logger.info("Applying schema from %s", SCHEMA_PATH)
    await db.execute(schema_sql())
    logger.info("Schema applied")


async def main() -> None:
    setup_logging(settings.log_level(), settings.log_format())
    db = Database.from_env()
    await db.connect()
    try:
        await apply_schema(db)
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
