"""Room model."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import RoomCategory
from .types import Money


class Room(BaseModel):
    """A bookable hotel room.

    Rooms are owned by the datastore; the engine only reads them.
    """

    model_config = ConfigDict(frozen=True)

    room_id: str = Field(..., description="Unique room ID")
    hotel_id: str | None = Field(default=None, description="Owning hotel")
    room_number: str | None = Field(default=None, description="Number shown to guests")
    name: str | None = Field(default=None, description="Display name")
    category: RoomCategory = Field(..., description="Room category")
    base_price: Money = Field(..., description="Nightly base price in whole currency units")
    capacity: int = Field(..., gt=0, description="Maximum number of guests")
    is_active: bool = Field(default=True, description="Whether the room can be booked")
