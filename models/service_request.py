from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field
from db.init import Base
from models.user import utcnow


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(900), nullable=False)
    requested_at = Column(DateTime, nullable=False, default=utcnow)
    completed = Column(Boolean, nullable=False, default=False)
    category_id = Column(Integer, ForeignKey("service_categories.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    category = relationship("ServiceCategory", back_populates="requests")
    user = relationship("User", back_populates="requests")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "requestedAt": self.requested_at.isoformat() if self.requested_at else None,
            "completed": self.completed,
            "categoryId": self.category_id,
            "category": self.category.name if self.category else None,
            "userId": self.user_id,
            "username": self.user.username if self.user else None,
        }


class BookingCreate(BaseModel):
    """Body of POST /api/bookService. The booking user comes from the token."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    description: str = Field(..., min_length=1, max_length=900)
    category_id: int = Field(..., alias="categoryId")
