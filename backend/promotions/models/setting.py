from sqlalchemy import Column, DateTime, String, Text

from promotions.core.database import Base
from promotions.models.shared import utc_now


class Setting(Base):
    """Global key/value store settings (e.g. ``currency``)."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
