from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from core.schemas import CamelModel


class Customer(CamelModel):
    id: str
    name: str
    phone: str
    alt_phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=20)
    alt_phone: Optional[str] = Field(None, max_length=20, description="Alternative mobile number")
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None


class CustomerUpdate(CamelModel):
    """Partial update. Only fields the caller set are applied, including cleared ones."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    alt_phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def required_fields_not_null(cls, v):
        if v is None:
            raise ValueError("this field cannot be cleared")
        return v
