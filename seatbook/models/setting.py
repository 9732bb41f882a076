from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text
from seatbook.db.session import Base

class Setting(Base):
    """Global key/value flags shared by every server instance."""
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
