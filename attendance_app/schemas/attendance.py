from pydantic import BaseModel, StrictInt, StrictStr
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, Union

# Identifiers arrive as strings or integers depending on the client.
Identifier = Union[StrictInt, StrictStr]


class AttendanceCreate(BaseModel):
    user_id: Optional[Identifier] = None
    event_id: Optional[Identifier] = None
    status: Optional[str] = None  # "present" (default) or "absent"

    # unknown keys (name, date, ...) are dropped
    model_config = {"alias_generator": to_camel, "populate_by_name": True, "extra": "ignore"}


class AttendanceResponse(BaseModel):
    id: int
    user_id: Optional[str]
    event_id: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime
    date: datetime  # mirrors created_at for the front-end
    name: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
