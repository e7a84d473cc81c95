import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from db.repositories import CatalogRepository
from interfaces.productModels import ProductSummary
from main import app
from routers.metrics import get_catalog_repository
from services.product_service import ProductService, get_product_service, get_search_fn
from services.storage import InMemoryStorage, get_storage

client = TestClient(app)


@pytest.fixture
def repository():
    repo = MagicMock(spec=CatalogRepository)
    storage = InMemoryStorage()
    app.dependency_overrides[get_product_service] = lambda: ProductService(repo)
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_catalog_repository] = lambda: repo
    app.dependency_overrides[get_search_fn] = lambda: lambda term: [
        ProductSummary(id=1, full_name=term, trust_score=60, trust_category="Good")
    ]
    yield repo
    app.dependency_overrides.clear()


def search_row(product_id=1, **overrides):
    row = {"id": product_id, "brand_name": "NOW", "full_name": "Vitamin C-1000", "image_url": None,
           "trust_score": 70, "usp_verified": True, "nsf_certified": True, "informed_sport": False,
           "fda_flagged": False}
    row.update(overrides)
    return row


def test_search(repository):
    repository.search_supplements.return_value = [search_row()]
    response = client.get("/api/search", params={"q": "vitamin c"})
    assert response.status_code == 200
    assert response.json()[0]["trust_category"] == "Good"
    repository.search_supplements.assert_called_once_with("vitamin c", 20)


def test_short_search_is_empty(repository):
    response = client.get("/api/search", params={"q": "vi"})
    assert response.status_code == 200
    assert response.json() == []
    repository.search_supplements.assert_not_called()


def test_recent_searches(repository):
    repository.search_supplements.return_value = []
    client.get("/api/search", params={"q": "protein"})
    client.get("/api/search", params={"q": "creatine"})
    client.get("/api/search", params={"q": "protein"})

    response = client.get("/api/search/recent")
    assert response.json()["searches"] == ["protein", "creatine"]

    client.delete("/api/search/recent")
    assert client.get("/api/search/recent").json()["searches"] == []


def test_failed_search_is_not_recorded(repository):
    repository.search_supplements.side_effect = RuntimeError("catalog down")
    repository.search_labels.side_effect = RuntimeError("catalog down")

    response = client.get("/api/search", params={"q": "protein"})

    assert response.status_code == 200
    assert response.json() == []
    assert client.get("/api/search/recent").json()["searches"] == []


def test_empty_search_is_recorded(repository):
    repository.search_supplements.return_value = []
    client.get("/api/search", params={"q": "unobtainium"})
    assert client.get("/api/search/recent").json()["searches"] == ["unobtainium"]


def test_live_search_answers_newest_query(repository):
    with client.websocket_connect("/api/search/live") as websocket:
        websocket.send_text("prot")
        websocket.send_text("protein")
        message = websocket.receive_json()
    assert message["term"] == "protein"
    assert message["results"][0]["full_name"] == "protein"


def test_find_barcode(repository):
    repository.search_supplements.return_value = [search_row(product_id=9, upc="765704991183")]
    response = client.get("/api/product/find_barcode", params={"barcode_number": "765704991183"})
    assert response.status_code == 200
    assert response.json()["id"] == 9


def test_find_barcode_not_found(repository):
    repository.search_supplements.return_value = []
    repository.find_by_upc.return_value = None
    response = client.get("/api/product/find_barcode", params={"barcode_number": "00000000"})
    assert response.status_code == 404


def test_find_barcode_invalid(repository):
    response = client.get("/api/product/find_barcode", params={"barcode_number": "12ab"})
    assert response.status_code == 422
    repository.search_supplements.assert_not_called()


def test_product_not_found(repository):
    repository.get_label.return_value = None
    assert client.get("/api/product/123").status_code == 404


def test_suggestions(repository):
    repository.get_suggested_products.return_value = [
        search_row(1, suggestion_type="popular"),
        search_row(2, suggestion_type="top_rated", trust_score=95),
    ]
    body = client.get("/api/product/suggestions").json()
    assert [p["id"] for p in body["popular"]] == [1]
    assert body["top_rated"][0]["trust_category"] == "Excellent"


def test_trust_score(repository):
    repository.calculate_simple_trustscore.return_value = 70
    repository.get_product_details.return_value = {"certifications_bonus": 20, "fda_flagged": False,
                                                   "off_market": 0}
    body = client.get("/api/product/5/trustscore").json()
    assert body["simple_score"] == 70
    assert body["breakdown"]["score"] == 70


def test_trust_score_unavailable(repository):
    repository.calculate_simple_trustscore.return_value = None
    repository.get_product_details.return_value = None
    assert client.get("/api/product/5/trustscore").status_code == 404


def test_stack_lifecycle(repository):
    entry = {"id": 1, "brand_name": "NOW", "full_name": "Vitamin C-1000", "trust_score": 60,
             "trust_category": "Good"}

    response = client.post("/api/stack", json=entry)
    assert response.json()["changed"] is True

    response = client.post("/api/stack", json=entry)
    assert response.json()["changed"] is False
    assert response.json()["summary"]["count"] == 1

    client.post("/api/stack", json={**entry, "id": 2, "trust_score": 80})
    assert client.get("/api/stack/summary").json() == {"count": 2, "average_trust_score": 70}

    response = client.delete("/api/stack/99")
    assert response.json()["changed"] is False

    response = client.delete("/api/stack/1")
    assert [e["id"] for e in response.json()["entries"]] == [2]

    client.delete("/api/stack")
    assert client.get("/api/stack").json() == []


def test_add_catalog_product_to_stack_not_found(repository):
    repository.get_label.return_value = None
    assert client.post("/api/stack/product/77").status_code == 404


def test_metrics_run(repository):
    repository.probe.return_value = [1]
    repository.count_labels.return_value = 205000
    repository.get_suggested_products.return_value = []
    repository.calculate_simple_trustscore.side_effect = Exception("missing function")
    repository.search_supplements.return_value = []
    repository.score_distribution.return_value = {"Good": 1}

    body = client.post("/api/metrics/run").json()

    assert body["total"] == 9
    assert body["failed"] == 1
    assert body["passed"] == 8
