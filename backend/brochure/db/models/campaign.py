import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from brochure.db.base import Base, utcnow


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=CampaignStatus.DRAFT.value)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    template_id = Column(Integer)
    logo_id = Column(Integer)

    company_name = Column(String(255))
    start_date = Column(DateTime)
    end_date = Column(DateTime)
    valid_until = Column(String(100))
    page_count = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=utcnow)
