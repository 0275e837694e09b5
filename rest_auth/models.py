from sqlalchemy import Column, String, DateTime, Enum
from datetime import datetime
import enum
import uuid

from .db import Base


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Account(Base):
    __tablename__ = "accounts"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(Role, name="account_role"), default=Role.USER, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Account(id={self.id}, email={self.email}, role={self.role})>"
