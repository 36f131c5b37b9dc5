"""
API v1 메인 라우터
"""

from fastapi import APIRouter

from brochure.api.v1 import (
    campaign_products,
    campaigns,
    editor,
    editor_websocket,
    health,
    logos,
    products,
    statistics,
    templates,
    users,
)

api_router = APIRouter()

# 각 기능별 라우터 포함
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(campaign_products.router, prefix="/campaign-products", tags=["campaign-products"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(logos.router, prefix="/logos", tags=["logos"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(editor.router, prefix="/editor", tags=["editor"])
api_router.include_router(editor_websocket.router, prefix="/editor", tags=["editor-websocket"])
