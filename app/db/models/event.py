from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.timeutils import utcnow


class Event(Base):
    __tablename__ = "events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(300), nullable=False)
    event_date = Column(DateTime, nullable=False)
    owner_id = Column(Uuid, ForeignKey("accounts.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    owner = relationship("Account", lazy="joined")

    __table_args__ = (
        Index('idx_event_date', 'event_date'),
        Index('idx_event_owner', 'owner_id'),
        Index('idx_event_created_at', 'created_at'),
    )

    @property
    def owner_name(self):
        return self.owner.full_name if self.owner else None
