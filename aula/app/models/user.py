# aula/app/models/user.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from aula.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    # Case-sensitive; for Google sign-in accounts this is the verified email
    username = Column(String(255), primary_key=True)

    # bcrypt hash. Federated accounts hold the hash of a random password
    # nobody knows, so they can only log in through Google.
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
