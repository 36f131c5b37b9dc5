from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from brochure.db.base import Base, utcnow


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    file_path = Column(String(1024), nullable=False)
    thumbnail_path = Column(String(1024))
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
