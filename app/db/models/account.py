from sqlalchemy import Column, String, Integer, DateTime, Uuid
import uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.db.models.role import account_roles
from app.core.timeutils import utcnow


class Account(Base):
    __tablename__ = "accounts"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Stored lower-cased; doubles as the login name
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    failed_access_count = Column(Integer, default=0, nullable=False)
    lockout_end = Column(DateTime, nullable=True)

    roles = relationship("Role", secondary=account_roles, lazy="selectin")

    @property
    def role_names(self) -> frozenset:
        return frozenset(role.name for role in self.roles)

    def has_role(self, name: str) -> bool:
        return name in self.role_names

    def is_locked_out(self, now) -> bool:
        return self.lockout_end is not None and self.lockout_end > now
