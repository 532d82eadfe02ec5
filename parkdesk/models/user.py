# parkdesk/models/user.py
"""
Staff accounts and the login audit trail.
Passwords are stored as werkzeug hashes, never in clear text.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from parkdesk.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    phone_number = Column(String(50))
    role = Column(String(20), default="user", nullable=False)   # user | admin
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} email={self.email} role={self.role}>"


class LoginAttempt(Base):
    __tablename__ = "login_attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    ip_address = Column(String(64))
    success = Column(Boolean, default=False, nullable=False)
    attempted_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<LoginAttempt {self.email} success={self.success}>"
