from core.database import Base
from sqlalchemy import Column, String, Text


class SettingRecord(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
