# parking_registry/models/vehicle.py
"""
Vehicles owned by a Person. A plate belongs to at most one person (unique index).
status + last_action/last_transaction_at are written by the check-in/out engine
or by an explicit admin edit.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from parking_registry.database import Base

PARKED = "parked"
RETRIEVED = "retrieved"
STATUSES = (PARKED, RETRIEVED)

# Labels used by the Vietnamese frontend
STATUS_ALIASES = {
    "Đang gửi": PARKED,
    "Đã lấy": RETRIEVED,
    PARKED: PARKED,
    RETRIEVED: RETRIEVED,
}


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("persons.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)   # order within the owner's list
    plate = Column(String(20), unique=True, nullable=False, index=True)
    vehicle_class = Column(String(30))           # motorbike | electric-motorbike
    color = Column(String(50), default="")
    brand = Column(String(100), default="")
    status = Column(String(20), nullable=False, default=RETRIEVED, index=True)
    last_action = Column(String(20))              # deposit | retrieve
    last_transaction_at = Column(DateTime)

    owner = relationship("Person", back_populates="vehicles")

    @property
    def last_transaction(self):
        if not self.last_action:
            return None
        return {"action": self.last_action, "timestamp": self.last_transaction_at}

    def __repr__(self):
        return f"<Vehicle {self.plate} status={self.status}>"
