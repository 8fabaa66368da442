from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.enums import LeadCategory, enum_values


class CategoryLimit(Base):
    """Per-user lead quota for one category."""
    __tablename__ = "category_limits"
    __table_args__ = (UniqueConstraint("user_id", "category", name="uq_category_limits_user_category"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(Enum(LeadCategory, name="lead_category", values_callable=enum_values), nullable=False)
    limit = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="category_limits")
