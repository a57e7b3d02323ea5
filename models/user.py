from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone
from db.init import Base

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"
ROLES = (ROLE_CUSTOMER, ROLE_ADMIN)


def utcnow() -> datetime:
    # naive UTC, SQLite DateTime columns drop tzinfo anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_CUSTOMER)
    created_at = Column(DateTime, default=utcnow)

    requests = relationship("ServiceRequest", back_populates="user")

    __table_args__ = (
        CheckConstraint("role IN ('customer', 'admin')", name="ck_users_role"),
    )

    @classmethod
    def by_username(cls, db, username: str) -> Optional["User"]:
        return db.query(cls).filter(cls.username == username).first()

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    role: str = Field(default=ROLE_CUSTOMER, pattern="^(customer|admin)$")

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        # checked, not stripped: the password is hashed exactly as sent
        if not v.strip():
            raise ValueError("password must not be blank")
        return v
