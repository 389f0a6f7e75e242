# parking_registry/models/person.py
"""
Registered citizens, keyed by national ID (CCCD).
Each person owns an ordered list of vehicles; deleting the person deletes them.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from parking_registry.database import Base

GENDERS = ("male", "female", "other")


class Person(Base):
    __tablename__ = "persons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    national_id = Column(String(20), unique=True, nullable=False, index=True)
    old_id = Column(String(20))                       # legacy 9-digit CMND
    full_name = Column(String(200), nullable=False, index=True)
    date_of_birth = Column(String(10), nullable=False)  # dd/mm/yyyy
    gender = Column(String(10), nullable=False)          # male | female | other
    hometown = Column(String(255), nullable=False)
    id_issue_date = Column(String(10), nullable=False)  # dd/mm/yyyy
    created_at = Column(DateTime)

    vehicles = relationship(
        "Vehicle",
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="Vehicle.position",
    )

    def __repr__(self):
        return f"<Person {self.national_id} name={self.full_name} vehicles={len(self.vehicles)}>"
