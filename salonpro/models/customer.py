from datetime import datetime
import uuid

from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from salonpro.db.base_class import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False, default="")  # free-form, E.164 when it starts with "+"
    email = Column(String, nullable=True)
    birthday = Column(Date, nullable=True)
    anniversary = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    salon = relationship("Salon", back_populates="customers")

    __table_args__ = (
        Index("ix_customers_salon_active", "salon_id", "is_active"),
    )
