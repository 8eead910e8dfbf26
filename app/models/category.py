# app/models/category.py
from sqlalchemy import Column, DateTime, Integer, String

from app.core.database import Base
from app.utils.clock import utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(String(200), nullable=True)
    color = Column(String(7), nullable=False, default="#007bff")

    # Denormalized number of posts filed under this category
    post_count = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
