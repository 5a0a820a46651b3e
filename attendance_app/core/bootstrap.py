import asyncio
import logging
from typing import List
from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from attendance_app.core.exceptions import DatabaseUnavailableError
from attendance_app.database import Database
from attendance_app.models.attendance import Attendance
from attendance_app.models.directory import Event, User

logger = logging.getLogger(__name__)


def store_tables(include_directory: bool) -> List[Table]:
    tables = [Attendance.__table__]
    if include_directory:
        tables += [User.__table__, Event.__table__]
    return tables


async def wait_for_database(
    database: Database,
    *,
    retries: int,
    delay_ms: int,
    include_directory: bool = False,
    sleep=asyncio.sleep,
) -> int:
    """
    Block until the store answers and its tables exist.

    Returns the attempt number that succeeded. Only connectivity/DDL failures
    are retried; after `retries` failed attempts DatabaseUnavailableError is
    raised so startup aborts before the listener is bound.
    """
    tables = store_tables(include_directory)
    attempt = 0
    while attempt < retries:
        attempt += 1
        try:
            await database.ping()
            await database.create_tables(tables)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.warning("DB connect attempt %d/%d failed: %s", attempt, retries, e)
            if attempt >= retries:
                break
            await sleep(delay_ms / 1000)
        else:
            logger.info("Database connected and tables created (attempt %d/%d)", attempt, retries)
            return attempt

    logger.critical("Exceeded max DB connection attempts, exiting")
    raise DatabaseUnavailableError(f"database unreachable after {retries} attempts")
