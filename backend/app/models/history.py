"""History entry table for LeadDesk CRM leads."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class LeadHistoryEntry(Base):
    __tablename__ = "lead_history"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(String(32), ForeignKey("leads.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    entry_type = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    from_stage = Column(String, nullable=True)
    to_stage = Column(String, nullable=True)
    user = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    lead = relationship("Lead", back_populates="history")
