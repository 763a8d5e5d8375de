from sqlalchemy import Column, Integer, String, Table, ForeignKey, Uuid
from app.db.session import Base

ADMIN_ROLE = "Admin"
ORGANISER_ROLE = "Organiser"

account_roles = Table(
    "account_roles",
    Base.metadata,
    Column("account_id", Uuid, ForeignKey("accounts.id"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), unique=True, nullable=False)
