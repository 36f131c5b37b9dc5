"""
에디터 세션 API 테스트
"""

from io import BytesIO

import pytest
from PIL import Image

from brochure.api.deps import get_export_service
from brochure.main import app
from brochure.services.brochure_export_service import BrochureExportService


@pytest.fixture
def small_export():
    """배율 1 내보내기 서비스로 교체"""
    app.dependency_overrides[get_export_service] = lambda: BrochureExportService(scale=1)
    yield
    app.dependency_overrides.pop(get_export_service, None)


async def open_session(client, **body):
    response = await client.post("/api/v1/editor/sessions", json=body)
    assert response.status_code == 201
    return response.json()


@pytest.mark.api
class TestEditorSessionAPI:
    """에디터 세션 REST 흐름 테스트"""

    async def test_open_and_get(self, client, editor_manager):
        # When
        snapshot = await open_session(client, initialPages=2)

        # Then
        assert snapshot["pageCount"] == 2
        assert snapshot["canvas"] == {"width": 600, "height": 800}
        assert len(editor_manager) == 1

        fetched = await client.get(f"/api/v1/editor/sessions/{snapshot['sessionId']}")
        assert fetched.json()["sessionId"] == snapshot["sessionId"]

    async def test_unknown_session(self, client):
        response = await client.get("/api/v1/editor/sessions/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"

    async def test_open_saved_campaign(self, client, seeded):
        # Given
        await client.post(
            "/api/v1/campaigns/1/products",
            json={"productId": 1, "newPrice": 150, "positionX": 150, "positionY": 250}
        )

        # When
        snapshot = await open_session(client, campaignId=1)

        # Then
        item = snapshot["items"][0]
        assert item["position"] == {"x": 150, "y": 250}
        assert item["name"] == "Premium Wireless Headphones"
        assert snapshot["settings"]["name"] == "Summer Electronics Sale"

    async def test_open_unknown_campaign(self, client, seeded):
        response = await client.post("/api/v1/editor/sessions", json={"campaignId": 999})

        assert response.status_code == 404

    async def test_close_session(self, client, editor_manager):
        snapshot = await open_session(client)

        first = await client.delete(f"/api/v1/editor/sessions/{snapshot['sessionId']}")
        second = await client.delete(f"/api/v1/editor/sessions/{snapshot['sessionId']}")

        assert first.status_code == 204
        assert second.status_code == 404
        assert len(editor_manager) == 0


@pytest.mark.api
class TestEditorLayoutAPI:
    """상품 추가/자동 배치/페이지 API 테스트"""

    async def test_add_product_and_auto_layout(self, client, seeded):
        # Given
        session_id = (await open_session(client))["sessionId"]

        # When
        added = await client.post(
            f"/api/v1/editor/sessions/{session_id}/products",
            json={"productId": 4, "itemId": 10, "discountPercent": 10}
        )
        laid_out = await client.post(f"/api/v1/editor/sessions/{session_id}/auto-layout")

        # Then
        assert added.status_code == 201
        assert added.json()["layoutPending"] is True
        item = laid_out.json()["items"][0]
        assert item["itemId"] == 10
        assert item["newPrice"] == 269.99
        assert item["position"] == {"x": 110, "y": 252}
        assert laid_out.json()["layoutPending"] is False

    async def test_add_unknown_product(self, client, seeded):
        session_id = (await open_session(client))["sessionId"]

        response = await client.post(f"/api/v1/editor/sessions/{session_id}/products", json={"productId": 999})

        assert response.status_code == 404

    async def test_pages(self, client):
        # Given
        session_id = (await open_session(client))["sessionId"]
        base = f"/api/v1/editor/sessions/{session_id}/pages"

        # When / Then
        assert (await client.post(base)).json()["pageCount"] == 2
        removed = (await client.delete(base)).json()
        assert removed["removed"] is True
        assert removed["pageCount"] == 1
        assert (await client.delete(base)).json()["removed"] is False
        assert (await client.put(base, json={"pageCount": 10})).json()["pageCount"] == 6

    async def test_drop_moves_product_between_pages(self, client, seeded):
        # Given
        session_id = (await open_session(client, initialPages=2))["sessionId"]
        await client.post(f"/api/v1/editor/sessions/{session_id}/products", json={"productId": 1, "itemId": 7})
        base = f"/api/v1/editor/sessions/{session_id}/pages/2/drag-events"

        # When
        entered = await client.post(base, json={"event": "drag_enter"})
        dropped = await client.post(base, json={"event": "drop", "payload": "7"})

        # Then
        assert entered.json()["dropTargetPage"] == 2
        assert entered.json()["pages"][1]["dropZone"] == "drag_over"
        snapshot = dropped.json()
        assert snapshot["dropTargetPage"] is None
        assert snapshot["items"][0]["pageNumber"] == 2

    async def test_invalid_drag_event(self, client):
        session_id = (await open_session(client))["sessionId"]

        response = await client.post(
            f"/api/v1/editor/sessions/{session_id}/pages/1/drag-events",
            json={"event": "hover"}
        )

        assert response.status_code == 422

    async def test_move_product(self, client, seeded):
        session_id = (await open_session(client, initialPages=3))["sessionId"]
        await client.post(f"/api/v1/editor/sessions/{session_id}/products", json={"productId": 1, "itemId": 7})

        response = await client.post(
            f"/api/v1/editor/sessions/{session_id}/products/move",
            json={"itemId": 7, "pageNumber": 3}
        )

        assert response.json()["items"][0]["pageNumber"] == 3


@pytest.mark.api
class TestEditorSaveAndExportAPI:
    """설정/저장/내보내기 API 테스트"""

    async def test_settings_and_save(self, client, seeded):
        # Given
        session_id = (await open_session(client, userId=1))["sessionId"]
        await client.post(f"/api/v1/editor/sessions/{session_id}/products", json={"productId": 2, "newPrice": 799})
        settings = await client.patch(
            f"/api/v1/editor/sessions/{session_id}/settings",
            json={"name": "Autumn Deals", "companyName": "Sunny Mart"}
        )
        assert settings.json()["settings"]["name"] == "Autumn Deals"

        # When
        saved = await client.post(f"/api/v1/editor/sessions/{session_id}/save", json={})

        # Then
        assert saved.status_code == 201
        campaign_id = saved.json()["savedCampaignId"]
        campaign = (await client.get(f"/api/v1/campaigns/{campaign_id}")).json()
        assert campaign["name"] == "Autumn Deals"
        assert campaign["status"] == "active"
        products = (await client.get(f"/api/v1/campaigns/{campaign_id}/products")).json()
        assert [p["newPrice"] for p in products] == [799]

    async def test_save_without_name(self, client, seeded):
        session_id = (await open_session(client, userId=1))["sessionId"]
        await client.post(f"/api/v1/editor/sessions/{session_id}/products", json={"productId": 2})

        response = await client.post(f"/api/v1/editor/sessions/{session_id}/save", json={})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_export_png(self, client, small_export):
        # Given
        session_id = (await open_session(client))["sessionId"]

        # When
        response = await client.post(f"/api/v1/editor/sessions/{session_id}/export", json={"format": "png"})

        # Then
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-page-count"] == "1"
        assert 'filename="brochure.png"' in response.headers["content-disposition"]
        assert Image.open(BytesIO(response.content)).size == (600, 800)

    async def test_export_pdf(self, client, small_export):
        session_id = (await open_session(client, initialPages=2))["sessionId"]

        response = await client.post(f"/api/v1/editor/sessions/{session_id}/export", json={"format": "pdf"})

        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["x-page-count"] == "2"
        assert response.content.startswith(b"%PDF")

    async def test_unknown_export_format(self, client):
        session_id = (await open_session(client))["sessionId"]

        response = await client.post(f"/api/v1/editor/sessions/{session_id}/export", json={"format": "gif"})

        assert response.status_code == 422
