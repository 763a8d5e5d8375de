from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.timeutils import utcnow


class Guest(Base):
    __tablename__ = "guests"
    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    registered_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", lazy="joined")

    # One registration per email per event; the store enforces it under concurrency
    __table_args__ = (
        UniqueConstraint('event_id', 'email', name='uq_guest_event_email'),
        Index('idx_guest_event', 'event_id'),
        Index('idx_guest_email', 'email'),
    )

    @property
    def event_title(self):
        return self.event.title if self.event else None
