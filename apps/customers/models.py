from core.database import Base
from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime, timezone


class CustomerRecord(Base):
    __tablename__ = "customers"

    id = Column(String(20), primary_key=True)  # C-NNNNNN
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    alt_phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
