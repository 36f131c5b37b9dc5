from sqlalchemy import Column, Float, ForeignKey, Integer

from brochure.db.base import Base


class CampaignProduct(Base):
    """브로셔 한 장 위에 배치된 상품 (위치/회전/배율/페이지 스냅샷)"""
    __tablename__ = "campaign_products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    discount_percent = Column(Float, nullable=False, default=0)
    new_price = Column(Float, nullable=False)

    # 0 또는 NULL 좌표는 "저장된 위치 없음"으로 취급
    position_x = Column(Float, default=0)
    position_y = Column(Float, default=0)
    scale_x = Column(Float, default=1)
    scale_y = Column(Float, default=1)
    rotation = Column(Float, default=0)
    page_number = Column(Integer, default=1)
