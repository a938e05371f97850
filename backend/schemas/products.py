from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator


class ProductCreate(BaseModel):
    sku: str
    name: str

    @field_validator("sku", "name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("sku")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class ProductRead(BaseModel):
    id: UUID
    sku: str
    name: str
    created_at: datetime
