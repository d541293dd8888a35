from __future__ import annotations

from pydantic import BaseModel


class DetailResponse(BaseModel):
    detail: str
