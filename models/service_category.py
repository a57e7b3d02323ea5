from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from db.init import Base
from pydantic import BaseModel, ConfigDict, Field


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    requests = relationship("ServiceRequest", back_populates="category")

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
