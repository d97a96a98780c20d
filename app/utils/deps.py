from typing import Optional

from fastapi import Header, Query

from app.core.config import settings
from app.core.database import get_db


def get_actor_id(x_actor_id: Optional[int] = Header(None, description="Id of the acting user, set by the gateway")) -> Optional[int]:
    return x_actor_id


class PaginationParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    ):
        self.page = page
        self.size = size

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.size


__all__ = ["get_db", "get_actor_id", "PaginationParams"]
