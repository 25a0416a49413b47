"""Shared API model pieces."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class ProblemDetailResponse(BaseModel):
    """RFC 7807 error body returned under ``detail``.

    Domain errors add their own members (ids, statuses) next to these.
    """

    type: str = Field(..., description="Problem type URN")
    title: str
    status: int
    detail: str
    instance: str | None = None
    extensions: dict[str, Any] | None = None
