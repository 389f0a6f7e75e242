# parking_registry/models/admin.py
"""Admin accounts for the management panel. Passwords are stored hashed."""

from sqlalchemy import Column, Integer, String
from parking_registry.database import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="admin")

    def __repr__(self):
        return f"<Admin {self.username} role={self.role}>"
