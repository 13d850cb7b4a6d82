from __future__ import annotations

from pydantic import BaseModel


class ParsedField(BaseModel):
    key: str
    value: str
