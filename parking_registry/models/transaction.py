# parking_registry/models/transaction.py
"""
Transaction log: one row per deposit/retrieve. Append-only.
Deliberately not linked to persons/vehicles by FK so history survives edits and deletes.
"""

from sqlalchemy import Column, Integer, String, DateTime
from parking_registry.database import Base

DEPOSIT = "deposit"
RETRIEVE = "retrieve"
ACTIONS = (DEPOSIT, RETRIEVE)

ACTION_ALIASES = {
    "Gửi": DEPOSIT,
    "Lấy": RETRIEVE,
    DEPOSIT: DEPOSIT,
    RETRIEVE: RETRIEVE,
}


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    national_id = Column(String(20), nullable=False, index=True)
    plate = Column(String(20), nullable=False, index=True)
    action = Column(String(20), nullable=False)   # deposit | retrieve
    status = Column(String(20), nullable=False)   # parked | retrieved (after the action)
    timestamp = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Transaction {self.id} plate={self.plate} action={self.action}>"
