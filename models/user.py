from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class User(BaseModel, Base):
    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    fullname = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)

    notes = relationship(
        "Note",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")


@dataclass(frozen=True)
class CurrentUser:
    """Identity projection of a user row: never carries the hash or the refresh token."""

    id: str
    email: str
    fullname: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


IDENTITY_COLUMNS = (User.id, User.email, User.fullname, User.created_at, User.updated_at)
