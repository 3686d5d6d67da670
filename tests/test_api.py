"""
Tests for the REST API (src/api/).

Runs the FastAPI app in-process over httpx.ASGITransport with the session
dependency pointed at the seeded in-memory database.

Covers:
- GET /items pagination, search and category filters
- GET /items/{id} and /items/{id}/prices (inclusive date bounds)
- GET /categories, /categories/{id}, /categories/{id}/items
- GET /health
- ErrorResponse bodies for 404 and 400
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

PREFIX = "/api/v1"


def _names(items: list[dict]) -> list[str | None]:
    return [item["itemName"] for item in items]


# ---------------------------------------------------------------------------
# GET /items
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_items_defaults(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items")

    assert response.status_code == 200
    body = response.json()
    assert _names(body["content"]) == ["Wheat", "Barley", "Iron Ore", None, "Wheat Bread"]
    assert body["pageNumber"] == 0
    assert body["pageSize"] == 20
    assert body["totalElements"] == 5
    assert body["totalPages"] == 1
    assert body["first"] is True
    assert body["last"] is True
    assert body["hasNext"] is False
    assert body["hasPrevious"] is False


@pytest.mark.asyncio
async def test_list_items_item_shape(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"size": 1})

    item = response.json()["content"][0]
    assert item["id"] == seeded["wheat"].id
    assert item["itemGid"] == 289
    assert item["category"] == {
        "id": seeded["cereals"].id,
        "dofusId": 48,
        "name": "Cereals",
    }
    assert "createdAt" in item


@pytest.mark.asyncio
async def test_item_without_category_has_null(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/{seeded['loose'].id}")

    assert response.status_code == 200
    body = response.json()
    assert "category" in body
    assert body["category"] is None


@pytest.mark.asyncio
async def test_list_items_middle_page(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"page": 1, "size": 2})

    body = response.json()
    assert _names(body["content"]) == ["Iron Ore", None]
    assert body["totalPages"] == 3
    assert (body["first"], body["last"], body["hasNext"], body["hasPrevious"]) == (
        False,
        False,
        True,
        True,
    )


@pytest.mark.asyncio
async def test_list_items_page_past_end(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"page": 9, "size": 2})

    body = response.json()
    assert response.status_code == 200
    assert body["content"] == []
    assert body["last"] is True
    assert body["hasNext"] is False


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"search": "WHEAT"})

    body = response.json()
    assert _names(body["content"]) == ["Wheat", "Wheat Bread"]
    assert body["totalElements"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("term", ["%", "_", "W%t", "Whe_t"])
async def test_search_wildcards_match_literally(api_client, seeded, term) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"search": term})

    body = response.json()
    assert response.status_code == 200
    assert body["content"] == []
    assert body["totalElements"] == 0


@pytest.mark.asyncio
async def test_search_and_category_combine(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items",
        params={"search": "wheat", "categoryId": seeded["cereals"].id},
    )

    assert _names(response.json()["content"]) == ["Wheat"]


@pytest.mark.asyncio
async def test_category_filter(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items", params={"categoryId": seeded["ores"].id}
    )

    assert _names(response.json()["content"]) == ["Iron Ore"]


@pytest.mark.asyncio
async def test_no_match_is_empty_first_and_last(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items", params={"search": "dragon"})

    body = response.json()
    assert body["content"] == []
    assert body["totalElements"] == 0
    assert body["totalPages"] == 0
    assert body["first"] is True
    assert body["last"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"size": 0},
        {"size": 101},
        {"page": -1},
        {"categoryId": "cereals"},
    ],
)
async def test_list_items_invalid_params(api_client, seeded, params) -> None:
    response = await api_client.get(f"{PREFIX}/items", params=params)

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["error"] == "Bad Request"
    assert body["message"].startswith("Validation error")
    assert body["path"] == f"{PREFIX}/items"


# ---------------------------------------------------------------------------
# GET /items/{id}
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_item(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/{seeded['wheat'].id}")

    assert response.status_code == 200
    assert response.json()["itemName"] == "Wheat"


@pytest.mark.asyncio
async def test_get_missing_item(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/999")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["message"] == "Item with ID 999 not found"
    assert body["path"] == f"{PREFIX}/items/999"
    assert "timestamp" in body


# ---------------------------------------------------------------------------
# GET /items/{id}/prices
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_price_history_oldest_first(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/{seeded['wheat'].id}/prices")

    assert response.status_code == 200
    body = response.json()
    assert [p["price"] for p in body] == [1200, 11000, 1000]
    assert [p["quantity"] for p in body] == [1, 10, 1]
    assert body[1]["formattedPrice"] == "11 K"
    assert all(p["itemId"] == seeded["wheat"].id for p in body)


@pytest.mark.asyncio
async def test_price_history_inclusive_bounds(api_client, seeded) -> None:
    # Seeded entries: 2026-10-12, 2026-10-14, 2026-10-15 (all at 12:00 UTC)
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"startDate": "2026-10-14", "endDate": "2026-10-15"},
    )

    assert [p["price"] for p in response.json()] == [11000, 1000]


@pytest.mark.asyncio
async def test_price_history_end_only(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"endDate": "2026-10-14"},
    )

    assert [p["price"] for p in response.json()] == [1200, 11000]


@pytest.mark.asyncio
async def test_price_history_start_only(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"startDate": "2026-10-13"},
    )

    assert [p["price"] for p in response.json()] == [11000, 1000]


@pytest.mark.asyncio
async def test_price_history_single_lot_size(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"quantity": 1},
    )

    assert [p["price"] for p in response.json()] == [1200, 1000]


@pytest.mark.asyncio
async def test_price_history_lot_size_and_dates(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"quantity": 10, "endDate": "2026-10-13"},
    )

    assert response.json() == []


@pytest.mark.asyncio
async def test_price_history_invalid_lot_size(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"quantity": 5},
    )

    assert response.status_code == 400
    assert "quantity must be one of [1, 10, 100]" in response.json()["message"]


@pytest.mark.asyncio
async def test_price_history_empty(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/{seeded['barley'].id}/prices")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_price_history_missing_item(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/items/999/prices")

    assert response.status_code == 404
    assert response.json()["message"] == "Item with ID 999 not found"


@pytest.mark.asyncio
async def test_price_history_reversed_range(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"startDate": "2026-10-15", "endDate": "2026-10-01"},
    )

    assert response.status_code == 400
    assert "after endDate" in response.json()["message"]


@pytest.mark.asyncio
async def test_price_history_malformed_date(api_client, seeded) -> None:
    response = await api_client.get(
        f"{PREFIX}/items/{seeded['wheat'].id}/prices",
        params={"startDate": "15/10/2026"},
    )

    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_categories_sorted_by_name(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/categories")

    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Cereals", "Ores"]
    assert response.json()[0]["dofusId"] == 48


@pytest.mark.asyncio
async def test_get_category(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/categories/{seeded['ores'].id}")

    assert response.json() == {"id": seeded["ores"].id, "dofusId": 39, "name": "Ores"}


@pytest.mark.asyncio
async def test_get_missing_category(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/categories/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Category with ID 999 not found"


@pytest.mark.asyncio
async def test_category_items_by_name_unnamed_last(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/categories/{seeded['cereals'].id}/items")

    assert response.status_code == 200
    assert _names(response.json()) == ["Barley", "Wheat", None]


@pytest.mark.asyncio
async def test_category_items_missing_category(api_client, seeded) -> None:
    response = await api_client.get(f"{PREFIX}/categories/999/items")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Health and routing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_health_up(api_client) -> None:
    response = await api_client.get(f"{PREFIX}/health")

    assert response.status_code == 200
    assert response.json() == {"status": "UP", "database": "connected"}


@pytest.mark.asyncio
async def test_health_down(api_client) -> None:
    with patch(
        "src.api.routers.health.check_database",
        new_callable=AsyncMock,
        return_value=False,
    ):
        response = await api_client.get(f"{PREFIX}/health")

    assert response.status_code == 503
    assert response.json() == {"status": "DOWN", "database": "disconnected"}


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(api_client) -> None:
    response = await api_client.get(f"{PREFIX}/auctions")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Not Found"
    assert body["path"] == f"{PREFIX}/auctions"
