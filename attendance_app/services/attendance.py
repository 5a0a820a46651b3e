import logging
from dataclasses import dataclass
from typing import List, Optional, Union
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from attendance_app.core.exceptions import InvalidAttendanceError
from attendance_app.database import Database
from attendance_app.models.attendance import Attendance, AttendanceStatus
from attendance_app.models.directory import Event, User
from attendance_app.schemas.attendance import AttendanceCreate, AttendanceResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "userId and eventId are required"


@dataclass(frozen=True)
class AttendanceRow:
    record: Attendance
    name: Optional[str] = None
    user_name: Optional[str] = None
    event_title: Optional[str] = None


@dataclass(frozen=True)
class AttendanceListing:
    rows: List[AttendanceRow]
    enriched: bool  # False → plain rows, no user/event data joined


def normalize_identifier(value: Union[int, str, None]) -> Optional[str]:
    """Stored form of a user/event id, or None when the value identifies nothing.

    Missing, blank and non-positive numeric values (0 included) are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value) if value > 0 else None
    value = value.strip()
    return value or None


def resolve_status(value: Optional[str]) -> AttendanceStatus:
    if value is None or not value.strip():
        return AttendanceStatus.PRESENT
    try:
        return AttendanceStatus(value.strip())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise InvalidAttendanceError(f"status must be one of: {allowed}")


def display_name(
    user_id: Optional[str],
    *,
    explicit: Optional[str] = None,
    user_name: Optional[str] = None,
    event_title: Optional[str] = None,
) -> Optional[str]:
    if explicit:
        return explicit
    if user_name:
        return user_name
    if event_title:
        return event_title
    if user_id:
        return f"User #{user_id}"
    return None


def to_response(row: AttendanceRow) -> AttendanceResponse:
    record = row.record
    status = record.status.value if isinstance(record.status, AttendanceStatus) else record.status
    return AttendanceResponse(
        id=record.id,
        user_id=record.user_id,
        event_id=record.event_id,
        status=status,
        created_at=record.created_at,
        updated_at=record.updated_at,
        date=record.created_at,
        name=display_name(
            record.user_id,
            explicit=row.name,
            user_name=row.user_name,
            event_title=row.event_title,
        ),
    )


class AttendanceService:
    """
    Create/list operations over the attendances table.

    `enrichment` says whether the users/events directory tables are part of
    the store; only then is the joined listing attempted.
    """

    def __init__(self, database: Database, *, enrichment: bool = False):
        self._database = database
        self._enrichment = enrichment

    async def mark_attendance(self, payload: AttendanceCreate) -> AttendanceRow:
        user_id = normalize_identifier(payload.user_id)
        event_id = normalize_identifier(payload.event_id)
        if not user_id or not event_id:
            raise InvalidAttendanceError(REQUIRED_FIELDS_MESSAGE)
        status = resolve_status(payload.status)

        record = Attendance(user_id=user_id, event_id=event_id, status=status)
        async with self._database.session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        return AttendanceRow(record=record)

    async def get_attendance(self, event_id: Optional[str] = None) -> AttendanceListing:
        async with self._database.session() as session:
            if self._enrichment:
                try:
                    rows = await self._fetch_enriched(session, event_id)
                except SQLAlchemyError as e:
                    logger.warning("Attendance enrichment failed, falling back to plain listing: %s", e)
                    await session.rollback()
                else:
                    return AttendanceListing(rows=rows, enriched=True)

            rows = await self._fetch_plain(session, event_id)
        return AttendanceListing(rows=rows, enriched=False)

    async def _fetch_plain(self, session: AsyncSession, event_id: Optional[str]) -> List[AttendanceRow]:
        stmt = select(Attendance).order_by(Attendance.created_at.desc(), Attendance.id.desc())
        if event_id is not None:
            stmt = stmt.where(Attendance.event_id == event_id)
        result = await session.execute(stmt)
        return [AttendanceRow(record=record) for record in result.scalars().all()]

    async def _fetch_enriched(self, session: AsyncSession, event_id: Optional[str]) -> List[AttendanceRow]:
        stmt = (
            select(
                Attendance,
                User.name.label("user_name"),
                User.full_name.label("user_full_name"),
                Event.title.label("event_title"),
                Event.name.label("event_name"),
            )
            .outerjoin(User, User.id == Attendance.user_id)
            .outerjoin(Event, Event.id == Attendance.event_id)
            .order_by(Attendance.created_at.desc(), Attendance.id.desc())
        )
        if event_id is not None:
            stmt = stmt.where(Attendance.event_id == event_id)
        result = await session.execute(stmt)
        return [
            AttendanceRow(
                record=record,
                user_name=user_name or user_full_name,
                event_title=event_title or event_name,
            )
            for record, user_name, user_full_name, event_title, event_name in result.all()
        ]
