# Parking Registry: Database Models
# Import all models here for SQLAlchemy discovery

from parking_registry.models.person import Person                 # noqa
from parking_registry.models.vehicle import Vehicle               # noqa
from parking_registry.models.transaction import Transaction       # noqa
from parking_registry.models.inventory import InventorySession, InventoryRecord  # noqa
from parking_registry.models.admin import Admin                   # noqa
