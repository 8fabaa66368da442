"""Lead model for the dealership CRM."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, Boolean, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.enums import LeadCategory, LeadPriority, LeadStatus, enum_values


class Lead(Base):
    """Lead model."""
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_name = Column(String(255), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(
        Enum(LeadStatus, name="lead_status", values_callable=enum_values),
        nullable=False,
        default=LeadStatus.NEW,
        index=True,
    )
    priority = Column(
        Enum(LeadPriority, name="lead_priority", values_callable=enum_values),
        nullable=False,
        default=LeadPriority.MEDIUM,
    )
    category = Column(Enum(LeadCategory, name="lead_category", values_callable=enum_values), nullable=True)
    source = Column(String(100), nullable=True)

    # Vehicle
    car_company = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    trim = Column(String(100), nullable=True)
    spec = Column(String(100), nullable=True)
    model_year = Column(Integer, nullable=True)
    interior_colour = Column(String(50), nullable=True)
    exterior_colour = Column(String(50), nullable=True)
    gear_box = Column(String(50), nullable=True)
    car_type = Column(String(50), nullable=True)
    fuel_tank = Column(String(50), nullable=True)
    steering_side = Column(String(10), nullable=True)
    export_to = Column(String(100), nullable=True)
    export_to_country = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    selling_price = Column(Numeric(12, 2), nullable=True)
    cost_price = Column(Numeric(12, 2), nullable=True)

    notes = Column(Text, nullable=True)
    not_converted_reason = Column(Text, nullable=True)
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Finance approval
    finance_approved = Column(Boolean, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    commission_paid = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    # Activity clock used for staleness
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False, index=True)

    # Relationships
    customer = relationship("Customer", back_populates="leads")
    assigned_user = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_leads")
    approver = relationship("User", foreign_keys=[approved_by])

    @property
    def is_approved(self) -> bool:
        return self.finance_approved is True

    @property
    def is_rejected(self) -> bool:
        return self.finance_approved is False

    @property
    def is_pending_approval(self) -> bool:
        return self.finance_approved is None and self.status == LeadStatus.CONVERTED
