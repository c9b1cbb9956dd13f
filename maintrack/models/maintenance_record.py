from sqlalchemy import Column, Date, String, Integer, ForeignKey

from maintrack.database import Base


class MaintenanceRecord(Base):
    __tablename__ = "maintenance_records"

    id = Column(String, primary_key=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False, index=True)
    service_type = Column(String, nullable=False)
    service_date = Column(Date, nullable=False)
    mileage = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)
    next_service_date = Column(Date, nullable=True)
    next_service_mileage = Column(Integer, nullable=True)
    performed_by = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
