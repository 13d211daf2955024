"""API tests for fee heads, class fee structures, discount categories, transport routes and the late fee rule."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import FeeAuditLog

from tests.fee_data import seed_class_10


# --- Fee heads ---
@pytest.mark.asyncio
async def test_create_and_list_fee_heads(client: AsyncClient, db_session: AsyncSession) -> None:
    await seed_class_10(client)

    response = await client.get("/api/v1/fee-heads")
    assert response.status_code == 200
    assert {h["id"] for h in response.json()} == {"tuition_fee", "library_fee", "sports_fee", "annual_dev_fee"}

    response = await client.get("/api/v1/fee-heads", params={"fee_type": "Annual One-Time"})
    assert [h["id"] for h in response.json()] == ["annual_dev_fee"]
    assert response.json()[0]["due_month"] == 4

    audit = (await db_session.execute(select(FeeAuditLog).where(FeeAuditLog.reference_table == "fee_heads"))).scalars().all()
    assert len(audit) == 4


@pytest.mark.asyncio
async def test_fee_head_validation(client: AsyncClient) -> None:
    response = await client.post("/api/v1/fee-heads", json={"name": "Exam Fee", "fee_type": "Annual One-Time"})
    assert response.status_code == 422
    response = await client.post(
        "/api/v1/fee-heads", json={"name": "Bus Fee", "fee_type": "Monthly Recurring", "due_month": 6}
    )
    assert response.status_code == 422

    await seed_class_10(client)
    response = await client.post("/api/v1/fee-heads", json={"name": "Tuition Fee", "fee_type": "Monthly Recurring"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_fee_head(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.patch("/api/v1/fee-heads/annual_dev_fee", json={"due_month": 6})
    assert response.status_code == 200
    assert response.json()["due_month"] == 6

    response = await client.patch("/api/v1/fee-heads/missing", json={"name": "X"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_fee_head_blocked_by_headwise_discount(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.post(
        "/api/v1/discount-categories",
        json={
            "id": "sibling",
            "name": "Sibling Discount",
            "type": "Head-wise",
            "calculation": "Percentage",
            "value": 10,
            "fee_head_id": "tuition_fee",
        },
    )
    assert response.status_code == 201

    response = await client.delete("/api/v1/fee-heads/tuition_fee")
    assert response.status_code == 409
    assert "Sibling Discount" in response.json()["detail"]


@pytest.mark.asyncio
async def test_fee_type_change_blocked_by_headwise_discount(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.post(
        "/api/v1/discount-categories",
        json={
            "id": "library_waiver",
            "name": "Library Waiver",
            "type": "Head-wise",
            "calculation": "Fixed",
            "value": 50,
            "fee_head_id": "library_fee",
        },
    )
    assert response.status_code == 201

    response = await client.patch(
        "/api/v1/fee-heads/library_fee", json={"fee_type": "Annual One-Time", "due_month": 6}
    )
    assert response.status_code == 409
    assert "Library Waiver" in response.json()["detail"]

    response = await client.get("/api/v1/fee-heads/library_fee")
    assert response.json()["fee_type"] == "Monthly Recurring"
    assert response.json()["due_month"] is None

    response = await client.patch("/api/v1/fee-heads/library_fee", json={"name": "Library"})
    assert response.status_code == 200
    assert response.json()["name"] == "Library"


@pytest.mark.asyncio
async def test_delete_fee_head_removes_class_amounts(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.delete("/api/v1/fee-heads/sports_fee")
    assert response.status_code == 204

    response = await client.get("/api/v1/class-fee-structures/10")
    assert response.status_code == 200
    assert "sports_fee" not in response.json()["fees"]


# --- Class fee structures ---
@pytest.mark.asyncio
async def test_class_fee_structure_totals(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.get("/api/v1/class-fee-structures/10")
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["recurring_monthly_total"]) == Decimal("5335")
    assert Decimal(data["annual_total"]) == Decimal("2500")
    assert Decimal(data["fees"]["tuition_fee"]) == Decimal("5000")


@pytest.mark.asyncio
async def test_class_fee_structure_upsert_is_idempotent(client: AsyncClient) -> None:
    await seed_class_10(client)
    payload = {"fees": {"tuition_fee": 5500, "library_fee": 125}}
    first = await client.put("/api/v1/class-fee-structures/10", json=payload)
    second = await client.put("/api/v1/class-fee-structures/10", json=payload)
    assert first.status_code == second.status_code == 200
    assert first.json()["fees"] == second.json()["fees"]
    assert set(second.json()["fees"]) == {"tuition_fee", "library_fee"}

    response = await client.get("/api/v1/class-fee-structures")
    assert [c["class_name"] for c in response.json()] == ["10"]


@pytest.mark.asyncio
async def test_class_fee_structure_rejects_bad_input(client: AsyncClient) -> None:
    await seed_class_10(client)
    response = await client.put("/api/v1/class-fee-structures/10", json={"fees": {"unknown_fee": 10}})
    assert response.status_code == 400
    response = await client.put("/api/v1/class-fee-structures/10", json={"fees": {"tuition_fee": -1}})
    assert response.status_code == 422
    response = await client.get("/api/v1/class-fee-structures/12")
    assert response.status_code == 404
    assert response.json()["detail"] == "Fee structure not found"


@pytest.mark.asyncio
async def test_delete_class_fee_structure_blocked_by_students(client: AsyncClient) -> None:
    await seed_class_10(client)
    await client.post("/api/v1/students", json={"qr_id": "QR-001", "name": "Asha Verma", "class_name": "10"})

    response = await client.delete("/api/v1/class-fee-structures/10")
    assert response.status_code == 409

    await client.put("/api/v1/class-fee-structures/11", json={"fees": {"tuition_fee": 4000}})
    response = await client.delete("/api/v1/class-fee-structures/11")
    assert response.status_code == 204
    response = await client.get("/api/v1/class-fee-structures/11")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_clearing_class_fee_structure_blocked_by_students(client: AsyncClient) -> None:
    await seed_class_10(client)
    await client.post("/api/v1/students", json={"qr_id": "QR-001", "name": "Asha Verma", "class_name": "10"})

    response = await client.put("/api/v1/class-fee-structures/10", json={"fees": {}})
    assert response.status_code == 409

    response = await client.get("/api/v1/class-fee-structures/10")
    assert response.status_code == 200
    assert len(response.json()["items"]) == 4


# --- Discount categories ---
@pytest.mark.asyncio
async def test_discount_category_rules(client: AsyncClient) -> None:
    await seed_class_10(client)
    base = {"name": "Sibling", "type": "Head-wise", "calculation": "Percentage", "value": 10}

    response = await client.post("/api/v1/discount-categories", json=base)
    assert response.status_code == 422

    response = await client.post("/api/v1/discount-categories", json={**base, "value": 120, "fee_head_id": "tuition_fee"})
    assert response.status_code == 422

    response = await client.post("/api/v1/discount-categories", json={**base, "fee_head_id": "annual_dev_fee"})
    assert response.status_code == 400

    response = await client.post("/api/v1/discount-categories", json={**base, "fee_head_id": "tuition_fee"})
    assert response.status_code == 201
    data = response.json()
    assert data["fee_head_name"] == "Tuition Fee"
    assert data["student_count"] == 0

    response = await client.patch(f"/api/v1/discount-categories/{data['id']}", json={"value": 15})
    assert response.status_code == 200
    assert Decimal(response.json()["value"]) == Decimal("15")

    response = await client.patch(f"/api/v1/discount-categories/{data['id']}", json={"value": 150})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_discount_category_blocked_while_held(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/discount-categories",
        json={"id": "staff", "name": "Staff Ward", "type": "Monthly Total", "calculation": "Fixed", "value": 500},
    )
    assert response.status_code == 201
    await client.post(
        "/api/v1/students",
        json={"qr_id": "QR-001", "name": "Asha Verma", "class_name": "10", "discount_category_ids": ["staff"]},
    )

    response = await client.delete("/api/v1/discount-categories/staff")
    assert response.status_code == 409
    assert (await client.get("/api/v1/discount-categories/staff")).json()["student_count"] == 1

    await client.put("/api/v1/students/QR-001/discounts", json={"discount_category_ids": []})
    response = await client.delete("/api/v1/discount-categories/staff")
    assert response.status_code == 204


# --- Transport routes ---
@pytest.mark.asyncio
async def test_transport_route_crud_and_delete_guard(client: AsyncClient) -> None:
    response = await client.post("/api/v1/transport-routes", json={"id": "route_a", "name": "Route A", "monthly_fee": 800})
    assert response.status_code == 201

    response = await client.patch("/api/v1/transport-routes/route_a", json={"monthly_fee": 900})
    assert Decimal(response.json()["monthly_fee"]) == Decimal("900")

    await client.post(
        "/api/v1/students",
        json={"qr_id": "QR-001", "name": "Asha Verma", "class_name": "10", "transport_route_id": "route_a"},
    )
    response = await client.delete("/api/v1/transport-routes/route_a")
    assert response.status_code == 409

    await client.put("/api/v1/students/QR-001/transport-route", json={"transport_route_id": None})
    response = await client.delete("/api/v1/transport-routes/route_a")
    assert response.status_code == 204
    assert (await client.get("/api/v1/transport-routes")).json() == []


# --- Late fee rule ---
@pytest.mark.asyncio
async def test_late_fee_rule_default_and_update(client: AsyncClient) -> None:
    response = await client.get("/api/v1/late-fee-rule")
    assert response.status_code == 200
    data = response.json()
    assert data["is_default"] is True
    assert data["due_day_of_month"] == 15
    assert data["rule_type"] == "Fixed"
    assert Decimal(data["value"]) == Decimal("100")

    response = await client.put("/api/v1/late-fee-rule", json={"due_day_of_month": 10, "rule_type": "Daily", "value": 5})
    assert response.status_code == 200
    data = response.json()
    assert data["is_default"] is False
    assert data["rule_type"] == "Daily"

    response = await client.put("/api/v1/late-fee-rule", json={"due_day_of_month": 32, "rule_type": "Daily", "value": 5})
    assert response.status_code == 422
