from sqlalchemy import Column, Integer, String

from brochure.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    # 인증은 외부 협력자 담당, 평문 비교만 지원
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
