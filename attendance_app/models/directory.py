from sqlalchemy import Column, String
from attendance_app.database import Base

# Display data joined onto attendance listings. Nothing in this service writes
# these tables; they are filled by whoever owns the user and event records.


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    full_name = Column(String, nullable=True)


class Event(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=True)
    name = Column(String, nullable=True)
