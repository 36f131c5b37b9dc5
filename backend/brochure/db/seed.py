"""
데모 데이터 시드 (테스트 사용자, 샘플 상품, 샘플 캠페인)
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.db.models import Campaign, Product, User
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

DEMO_USER = {"username": "test", "password": "test", "name": "Sarah Johnson"}

DEMO_PRODUCTS = [
    {
        "name": "Premium Wireless Headphones",
        "category": "Electronics",
        "original_price": 199.99,
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=300",
        "description": "High-quality wireless headphones with noise cancellation",
    },
    {
        "name": "Latest Smartphone Pro",
        "category": "Electronics",
        "original_price": 899.99,
        "image_url": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=300",
        "description": "Latest flagship smartphone with advanced features",
    },
    {
        "name": "Gaming Laptop",
        "category": "Electronics",
        "original_price": 1299.99,
        "image_url": "https://images.unsplash.com/photo-1603302576837-37561b2e2302?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=300",
        "description": "High-performance gaming laptop",
    },
    {
        "name": "Smart Watch",
        "category": "Electronics",
        "original_price": 299.99,
        "image_url": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=300",
        "description": "Feature-rich smartwatch with health tracking",
    },
]

DEMO_CAMPAIGNS = [
    {
        "name": "Summer Electronics Sale",
        "description": "Electronics & Gadgets",
        "status": "active",
        "template_id": 1,
        "company_name": "TechStore Pro",
        "valid_until": "Dec 31, 2023",
        "created_at": datetime(2023, 12, 15),
    },
    {
        "name": "Holiday Fashion Collection",
        "description": "Fashion & Apparel",
        "status": "draft",
        "template_id": None,
        "company_name": "StyleHub",
        "valid_until": "Jan 15, 2024",
        "created_at": datetime(2023, 12, 12),
    },
    {
        "name": "Black Friday Deals",
        "description": "Mixed Categories",
        "status": "completed",
        "template_id": 1,
        "company_name": "MegaDeals",
        "valid_until": "Nov 30, 2023",
        "created_at": datetime(2023, 11, 20),
    },
]


async def seed_demo_data(session: AsyncSession) -> bool:
    """데모 데이터 삽입. 이미 시드된 경우 False 반환"""
    result = await session.execute(select(User).where(User.username == DEMO_USER["username"]))
    if result.scalar_one_or_none() is not None:
        logger.debug("데모 데이터가 이미 존재합니다")
        return False

    user = User(**DEMO_USER)
    session.add(user)
    await session.flush()

    session.add_all([Product(**data) for data in DEMO_PRODUCTS])
    session.add_all([Campaign(user_id=user.id, **data) for data in DEMO_CAMPAIGNS])
    await session.commit()

    logger.info(
        "데모 데이터 시드 완료",
        context={"products": len(DEMO_PRODUCTS), "campaigns": len(DEMO_CAMPAIGNS)}
    )
    return True
