from datetime import datetime
import uuid

from sqlalchemy import Column, String, Date, DateTime, Integer, UniqueConstraint, Uuid

from salonpro.db.base_class import Base


class ReminderRunMarker(Base):
    """One row per (salon, event type, local day) once that batch has been dispatched."""
    __tablename__ = "reminder_run_markers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, nullable=False, index=True)
    event_type = Column(String, nullable=False)
    run_date = Column(Date, nullable=False)
    sent_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("salon_id", "event_type", "run_date", name="uq_reminder_run_markers_salon_type_date"),
    )
