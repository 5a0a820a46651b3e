import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from attendance_app.database import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(String, nullable=False)
    event_id = Column(String, nullable=False, index=True)
    status = Column(
        Enum(
            AttendanceStatus,
            name="attendance_status",
            values_callable=lambda statuses: [s.value for s in statuses],
            create_constraint=True,
        ),
        nullable=False,
        default=AttendanceStatus.PRESENT,
        server_default=AttendanceStatus.PRESENT.value,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
