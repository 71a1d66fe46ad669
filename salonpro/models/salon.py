from datetime import datetime
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship

from salonpro.db.base_class import Base


class Salon(Base):
    """A tenant of the platform. Owns customers, operator accounts and templates."""
    __tablename__ = "salons"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)

    # Notification preferences
    birthday_reminders = Column(Boolean, nullable=False, default=False)
    anniversary_reminders = Column(Boolean, nullable=False, default=False)
    whatsapp_notifications = Column(Boolean, nullable=False, default=False)
    sms_notifications = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    users = relationship("User", back_populates="salon")
    customers = relationship("Customer", back_populates="salon")
    reminder_templates = relationship("ReminderTemplate", back_populates="salon")

    @property
    def has_notification_channel(self) -> bool:
        return bool(self.whatsapp_notifications or self.sms_notifications)
