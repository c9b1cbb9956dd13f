from sqlalchemy import Column, String, Integer, ForeignKey

from maintrack.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    model = Column(String, nullable=False, default="")
    year = Column(Integer, nullable=False)
    vin = Column(String, nullable=False, default="")
    created_at = Column(String, nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
