from sqlalchemy import Column, Float, Integer, String, Text

from brochure.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    original_price = Column(Float, nullable=False)
    image_url = Column(String(1024))
    description = Column(Text)
