# parkdesk/models/notification.py
"""
Per-user notifications. is_read only ever moves from False to True.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey
from parkdesk.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Notification {self.id} user={self.user_id} read={self.is_read}>"
