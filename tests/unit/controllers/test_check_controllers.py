"""Test the HTTP routes."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from app import app
from product_scout.services.tracking.models import CheckResult, Retailer
from product_scout.services.tracking.orchestrator import CheckOrchestrator, get_orchestrator
from product_scout.services.tracking.routing import RetailerRouter

BESTBUY_URL = "https://www.bestbuy.com/site/canon-eos-r5-mirrorless-camera-body-only/6418235.p"
TARGET_URL = "https://www.target.com/p/canon-eos-r50-mirrorless-camera/-/A-88149498"

AVAILABLE = CheckResult(
    status="✅ Available",
    price="$1,299.99",
    is_available=True,
    details="'Add to Cart' is enabled at $1,299.99",
    retailer=Retailer.BESTBUY,
)
OUT_OF_STOCK = CheckResult(
    status="❌ Out of Stock",
    price="$679.99",
    is_available=False,
    details="Page says 'out of stock'",
    retailer=Retailer.TARGET,
)


class TestCheckControllers:
    """Test cases for the check and retailer routes."""

    def setup_method(self) -> None:
        self.orchestrator = MagicMock(spec=CheckOrchestrator)
        self.orchestrator.router = RetailerRouter()
        self.orchestrator.check = AsyncMock(return_value=AVAILABLE)
        self.orchestrator.check_many = AsyncMock(return_value=[AVAILABLE, OUT_OF_STOCK])
        app.dependency_overrides[get_orchestrator] = lambda: self.orchestrator
        self.client = TestClient(app)

    def teardown_method(self) -> None:
        app.dependency_overrides.clear()

    def test_healthcheck(self) -> None:
        response = self.client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_list_retailers(self) -> None:
        response = self.client.get("/retailers")

        assert response.status_code == 200
        body = response.json()
        assert [item["retailer"] for item in body] == ["bestbuy", "target", "canon", "ricoh"]
        assert body[0]["display_name"] == "Best Buy"

    def test_classify_url(self) -> None:
        response = self.client.get("/retailers/classify", params={"url": TARGET_URL})

        assert response.status_code == 200
        body = response.json()
        assert body["retailer"] == "target"
        assert body["confidence"] == 1.0
        assert body["is_valid_url"] is True

    def test_check_product(self) -> None:
        response = self.client.post("/check", json={"url": BESTBUY_URL})

        assert response.status_code == 200
        assert response.json() == {
            "status": "✅ Available",
            "price": "$1,299.99",
            "is_available": True,
            "details": "'Add to Cart' is enabled at $1,299.99",
            "retailer": "bestbuy",
        }
        self.orchestrator.check.assert_awaited_once_with(BESTBUY_URL)

    def test_check_adds_missing_scheme(self) -> None:
        self.client.post("/check", json={"url": " bestbuy.com/site/x "})

        self.orchestrator.check.assert_awaited_once_with("https://bestbuy.com/site/x")

    def test_check_requires_url(self) -> None:
        response = self.client.post("/check", json={})

        assert response.status_code == 422
        self.orchestrator.check.assert_not_awaited()

    def test_batch_evaluates_alerts_in_input_order(self) -> None:
        payload = {
            "items": [
                {"url": BESTBUY_URL, "price_limit": 1500, "previously_available": False},
                {"url": TARGET_URL, "previously_available": True},
            ]
        }

        response = self.client.post("/check/batch", json=payload)

        assert response.status_code == 200
        first, second = response.json()["results"]
        assert first["url"] == BESTBUY_URL
        assert first["name"] == "Canon Eos R5 Mirrorless Camera Body"
        assert first["should_alert"] is True
        assert second["retailer"] == "target"
        assert second["should_alert"] is False
        self.orchestrator.check_many.assert_awaited_once_with([BESTBUY_URL, TARGET_URL])

    def test_batch_rejects_empty_list(self) -> None:
        response = self.client.post("/check/batch", json={"items": []})

        assert response.status_code == 422
