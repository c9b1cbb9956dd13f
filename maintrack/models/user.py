from sqlalchemy import Column, String, Integer

from maintrack.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    confirmed = Column(Integer, nullable=False, default=0)
    confirmation_token = Column(String, nullable=True, unique=True)
    created_at = Column(String, nullable=False)
