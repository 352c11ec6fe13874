from pydantic import BaseModel, Field
from typing import Optional


class LogoUpdate(BaseModel):
    logo: str = Field(..., min_length=1, description="Logo as a data URI")


class LogoResponse(BaseModel):
    logo: Optional[str] = None
