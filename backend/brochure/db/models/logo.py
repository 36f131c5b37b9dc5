from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from brochure.db.base import Base, utcnow


class Logo(Base):
    __tablename__ = "logos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
