from datetime import datetime
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from salonpro.db.base_class import Base


REMINDER_TYPES = ("birthday", "anniversary")


class ReminderTemplate(Base):
    """Per-salon message body for one event type; "[CustomerName]" is substituted at send time."""
    __tablename__ = "reminder_templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)
    type = Column(String, nullable=False)  # birthday | anniversary
    message = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    salon = relationship("Salon", back_populates="reminder_templates")

    __table_args__ = (
        Index("ix_reminder_templates_salon_type_active", "salon_id", "type", "is_active"),
    )
