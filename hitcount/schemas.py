"""Response payloads returned by the HTTP API."""

from pydantic import BaseModel


class CountResponse(BaseModel):
    """Current count for the caller's address and path."""

    total: int
    ip: str
    path: str
