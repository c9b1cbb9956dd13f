from maintrack.models.vehicle import Vehicle
from maintrack.models.maintenance_record import MaintenanceRecord
from maintrack.models.user import User

__all__ = ["Vehicle", "MaintenanceRecord", "User"]
