from pydantic import BaseModel, Field


class PositionUpdate(BaseModel):
    order: int = Field(..., ge=1, description="Target position, clamped to the last position of the scope.")
