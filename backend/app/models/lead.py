"""Lead table for LeadDesk CRM."""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class Lead(Base):
    __tablename__ = "leads"

    id = Column(String(32), primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    student_name = Column(String, nullable=False)
    phone_number = Column(String(32), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    course_selected = Column(String, nullable=False)
    stage = Column(String, nullable=False, index=True)
    origin = Column(String, nullable=False)
    assigned_to = Column(String, nullable=True, index=True)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    remarks = Column(Text, nullable=False, default="")

    history = relationship(
        "LeadHistoryEntry",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="LeadHistoryEntry.sequence",
    )
