from sqlalchemy import Boolean, Column, ForeignKey, Index, JSON, String, Text
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class Note(BaseModel, Base):
    __tablename__ = "notes"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    is_pinned = Column(Boolean, nullable=False, default=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="notes")

    __table_args__ = (
        Index("ix_notes_user_pinned", "user_id", "is_pinned"),
    )
