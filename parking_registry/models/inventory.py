# parking_registry/models/inventory.py
"""
Physical inventory counts. A session is opened by an admin, staff record each
plate seen in the lot, and ending the session produces the discrepancy report.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from parking_registry.database import Base

SESSION_ACTIVE = "active"
SESSION_COMPLETED = "completed"
SESSION_CANCELLED = "cancelled"

RECORD_STATUSES = ("checked", "not_found", "damaged")


class InventorySession(Base):
    __tablename__ = "inventory_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    started_by = Column(String(100), nullable=False)
    started_at = Column(DateTime, nullable=False, index=True)
    ended_by = Column(String(100))
    ended_at = Column(DateTime)
    status = Column(String(20), nullable=False, default=SESSION_ACTIVE)

    records = relationship("InventoryRecord", back_populates="session",
                           cascade="all, delete-orphan", order_by="InventoryRecord.checked_at")

    def __repr__(self):
        return f"<InventorySession {self.id} status={self.status}>"


class InventoryRecord(Base):
    __tablename__ = "inventory_records"
    __table_args__ = (UniqueConstraint("session_id", "plate", name="uq_inventory_session_plate"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("inventory_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    plate = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="checked")  # checked | not_found | damaged
    notes = Column(Text, default="")
    checked_by = Column(String(100), nullable=False)
    checked_at = Column(DateTime, nullable=False)

    session = relationship("InventorySession", back_populates="records")

    def __repr__(self):
        return f"<InventoryRecord session={self.session_id} plate={self.plate} status={self.status}>"
