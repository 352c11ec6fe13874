from core.database import Base
from sqlalchemy import Column, String, Float, DateTime, Text, ForeignKey, JSON
from datetime import datetime, timezone


class RepairRecord(Base):
    __tablename__ = "repairs"

    id = Column(String(20), primary_key=True)  # R-NNNNNN
    customer_id = Column(String(20), ForeignKey("customers.id"), nullable=True)

    # Device and work
    material_details = Column(Text, nullable=False)
    services = Column(JSON, nullable=False, default=list)  # [{"problem": str, "cost": float}]
    estimated_time = Column(String(100), nullable=True)

    # Status label, stored exactly as shown ("In Progress")
    status = Column(String(32), nullable=False)

    received_date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    delivery_date = Column(DateTime(timezone=True), nullable=True)

    # Billing
    bill_note = Column(Text, nullable=True)
    actual_total_cost = Column(Float, nullable=True)
