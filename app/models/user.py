"""User (actor) model."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Numeric, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.enums import UserRole, enum_values


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.SALES,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    # Sales targets; commission and bonus_commission are percentages of profit
    target_price = Column(Numeric(12, 2), nullable=True)
    commission = Column(Numeric(5, 2), nullable=False, default=0)
    bonus_commission = Column(Numeric(5, 2), nullable=False, default=0)
    commission_earned = Column(Numeric(12, 2), nullable=False, default=0)

    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    assigned_leads = relationship("Lead", foreign_keys="Lead.assigned_to", back_populates="assigned_user")
    category_limits = relationship("CategoryLimit", back_populates="user", cascade="all, delete-orphan")

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles
