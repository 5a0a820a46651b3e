import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from attendance_app.core.exceptions import InvalidAttendanceError
from attendance_app.schemas.attendance import AttendanceCreate, AttendanceResponse
from attendance_app.services.attendance import AttendanceService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


def get_attendance_service(request: Request) -> AttendanceService:
    return request.app.state.attendance_service


def store_error(error: str, e: SQLAlchemyError) -> HTTPException:
    # driver message only; the wrapped SQL text stays in the logs
    return HTTPException(500, {"error": error, "message": str(getattr(e, "orig", e))})


@router.get("", response_model=List[AttendanceResponse])
@router.get("/", response_model=List[AttendanceResponse], include_in_schema=False)
async def get_attendance(service: AttendanceService = Depends(get_attendance_service)):
    """All marks, most recent first."""
    try:
        listing = await service.get_attendance()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch attendance")
        raise store_error("Failed to fetch attendance", e)
    return [to_response(row) for row in listing.rows]


@router.post("", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def mark_attendance(
    payload: Optional[AttendanceCreate] = None,
    service: AttendanceService = Depends(get_attendance_service),
):
    try:
        row = await service.mark_attendance(payload or AttendanceCreate())
    except InvalidAttendanceError as e:
        raise HTTPException(400, str(e))
    except SQLAlchemyError as e:
        logger.exception("Failed to create attendance")
        raise store_error("Failed to create attendance", e)
    return to_response(row)


@router.get("/{event_id}", response_model=List[AttendanceResponse])
async def get_event_attendance(
    event_id: str,
    service: AttendanceService = Depends(get_attendance_service),
):
    """Marks for a single event, most recent first."""
    try:
        listing = await service.get_attendance(event_id=event_id)
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch attendance for event %s", event_id)
        raise store_error("Failed to fetch attendance", e)
    return [to_response(row) for row in listing.rows]
