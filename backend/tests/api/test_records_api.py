"""
레코드 CRUD API 테스트 (사용자/캠페인/상품/템플릿/로고/통계)
"""

import pytest


@pytest.mark.api
class TestHealthAPI:
    """헬스 체크 API 테스트"""

    async def test_health(self, client):
        response = await client.get("/api/v1/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_detailed_health(self, client):
        response = await client.get("/api/v1/health/detailed")

        data = response.json()
        assert data["services"]["database"] == "healthy"
        assert data["services"]["editor_sessions"] == 0


@pytest.mark.api
class TestUsersAPI:
    """사용자 API 테스트"""

    async def test_lookup_by_username(self, client, seeded):
        response = await client.get("/api/v1/users/by-username/test")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Sarah Johnson"
        assert "password" not in data

    async def test_duplicate_username_conflict(self, client, seeded):
        # When
        response = await client.post(
            "/api/v1/users/",
            json={"username": "test", "password": "secret", "name": "Someone"}
        )

        # Then
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "RESOURCE_CONFLICT"

    async def test_unknown_user(self, client):
        response = await client.get("/api/v1/users/42")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.api
class TestCampaignsAPI:
    """캠페인 API 테스트"""

    async def test_list_requires_user_id(self, client):
        response = await client.get("/api/v1/campaigns/")

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_create_update_delete(self, client, seeded):
        # Given
        created = await client.post(
            "/api/v1/campaigns/",
            json={"name": "Spring Sale", "userId": 1, "companyName": "Sunny Mart", "pageCount": 2}
        )
        assert created.status_code == 201
        campaign = created.json()
        assert campaign["companyName"] == "Sunny Mart"
        assert campaign["status"] == "draft"

        # When
        updated = await client.put(f"/api/v1/campaigns/{campaign['id']}", json={"status": "active"})
        deleted = await client.delete(f"/api/v1/campaigns/{campaign['id']}")

        # Then
        assert updated.json()["status"] == "active"
        assert updated.json()["name"] == "Spring Sale"
        assert deleted.json() == {"message": "Campaign deleted successfully"}
        assert (await client.get(f"/api/v1/campaigns/{campaign['id']}")).status_code == 404

    async def test_invalid_status_rejected(self, client, seeded):
        response = await client.post(
            "/api/v1/campaigns/",
            json={"name": "Spring Sale", "userId": 1, "status": "archived"}
        )

        assert response.status_code == 422
        assert response.json()["validation_errors"][0]["field"].endswith("status")

    async def test_list_by_user(self, client, seeded):
        response = await client.get("/api/v1/campaigns/", params={"userId": 1})

        assert response.status_code == 200
        assert [c["name"] for c in response.json()][0] == "Summer Electronics Sale"

    async def test_campaign_products_include_product(self, client, seeded):
        # Given
        added = await client.post(
            "/api/v1/campaigns/1/products",
            json={"productId": 2, "newPrice": 799.99, "positionX": 40, "positionY": 182}
        )
        assert added.status_code == 201

        # When
        response = await client.get("/api/v1/campaigns/1/products")

        # Then
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["positionX"] == 40
        assert rows[0]["product"]["name"] == "Latest Smartphone Pro"

    async def test_add_unknown_product(self, client, seeded):
        response = await client.post("/api/v1/campaigns/1/products", json={"productId": 999, "newPrice": 1})

        assert response.status_code == 404

    async def test_campaign_product_position(self, client, seeded):
        added = (await client.post("/api/v1/campaigns/1/products", json={"productId": 1, "newPrice": 9})).json()

        response = await client.put(
            f"/api/v1/campaign-products/{added['id']}/position",
            json={"x": 218, "y": 360}
        )

        assert response.status_code == 200
        assert (response.json()["positionX"], response.json()["positionY"]) == (218, 360)


@pytest.mark.api
class TestProductsAPI:
    """상품 API 테스트"""

    async def test_search(self, client, seeded):
        response = await client.get("/api/v1/products/", params={"search": "watch"})

        assert [p["name"] for p in response.json()] == ["Smart Watch"]

    async def test_create_and_update(self, client):
        created = (await client.post(
            "/api/v1/products/",
            json={"name": "Fresh Apples", "category": "Fruits", "originalPrice": 3.5}
        )).json()

        response = await client.put(f"/api/v1/products/{created['id']}", json={"originalPrice": 2.5})

        assert response.json()["originalPrice"] == 2.5
        assert response.json()["category"] == "Fruits"

    async def test_negative_price_rejected(self, client):
        response = await client.post(
            "/api/v1/products/",
            json={"name": "Fresh Apples", "category": "Fruits", "originalPrice": -1}
        )

        assert response.status_code == 422


@pytest.mark.api
class TestAssetsAPI:
    """템플릿/로고/통계 API 테스트"""

    async def test_logo_activation(self, client, seeded):
        # Given
        first = (await client.post(
            "/api/v1/logos/",
            json={"name": "Blue", "filePath": "/uploads/blue.png", "userId": 1, "isActive": True}
        )).json()
        second = (await client.post(
            "/api/v1/logos/",
            json={"name": "Red", "filePath": "/uploads/red.png", "userId": 1}
        )).json()
        assert first["isActive"] is True

        # When
        response = await client.post(f"/api/v1/logos/{second['id']}/activate", params={"userId": 1})

        # Then
        assert response.status_code == 200
        active = (await client.get("/api/v1/logos/active", params={"userId": 1})).json()
        assert active["id"] == second["id"]

    async def test_no_active_logo(self, client, seeded):
        response = await client.get("/api/v1/logos/active", params={"userId": 1})

        assert response.status_code == 200
        assert response.json() is None

    async def test_statistics(self, client, seeded):
        await client.post("/api/v1/templates/", json={"name": "Summer", "filePath": "/uploads/summer.png", "userId": 1})

        response = await client.get("/api/v1/statistics/", params={"userId": 1})

        assert response.json() == {"totalCampaigns": 3, "activeCampaigns": 1, "totalTemplates": 1}
