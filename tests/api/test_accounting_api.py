"""API tests for tenants, items, invoices, payments and statements."""

from httpx import AsyncClient


async def _sale(client: AsyncClient, party_id: int, item_id: int, quantity: float, **extra) -> dict:
    body = {
        "party_id": party_id,
        "direction": "SALES",
        "invoice_date": "2025-06-01",
        "lines": [{"item_id": item_id, "quantity": quantity, "rate": 100}],
    }
    body.update(extra)
    response = await client.post("/api/invoices", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestDirectoryAPI:
    async def test_create_tenant_and_party(self, client: AsyncClient):
        response = await client.post(
            "/api/tenants", json={"id": "sk", "name": "Shree Krishna Stores"}
        )
        assert response.status_code == 201

        response = await client.post(
            "/api/parties",
            headers={"X-Tenant-ID": "sk"},
            json={"name": "Anil", "role": "customer", "opening_balance": 250},
        )
        assert response.status_code == 201
        assert response.json()["opening_balance_type"] == "DR"

        response = await client.get("/api/parties", headers={"X-Tenant-ID": "sk"})
        assert [p["name"] for p in response.json()] == ["Anil"]

    async def test_duplicate_tenant(self, client: AsyncClient, tenant):
        response = await client.post("/api/tenants", json={"id": tenant.id, "name": "Again"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_missing_tenant_header(self, client: AsyncClient):
        response = await client.get("/api/parties", headers={"X-Tenant-ID": ""})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "TENANT_REQUIRED"
        assert "X-Tenant-ID" in data["message"]

    async def test_party_unknown_tenant(self, client: AsyncClient):
        response = await client.post(
            "/api/parties",
            headers={"X-Tenant-ID": "ghost"},
            json={"name": "Anil", "role": "customer"},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "TENANT_NOT_FOUND"


class TestNumberingAPI:
    async def test_allocate_by_kind(self, client: AsyncClient, tenant):
        response = await client.post(
            "/api/numbering/allocate",
            json={"document_kind": "sales_invoice", "payment_mode": "cash", "effective_date": "2025-04-01"},
        )

        assert response.status_code == 201
        assert response.json() == {
            "number": "GK-C-0001-25-26",
            "sequence": 1,
            "series_code": "C",
            "period": "25-26",
        }

    async def test_unknown_tenant_is_unprocessable(self, client: AsyncClient):
        response = await client.post(
            "/api/numbering/allocate",
            headers={"X-Tenant-ID": "ghost"},
            json={"series_code": "CR"},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "SEQUENCE_ALLOCATION_FAILED"


class TestItemsAPI:
    async def test_create_item_with_opening_stock(self, client: AsyncClient):
        response = await client.post("/api/items", json={"name": "Tea 250g", "opening_quantity": 20})
        assert response.status_code == 201
        item = response.json()
        assert item["quantity"] == 20.0

        response = await client.get(f"/api/items/{item['id']}/movements")
        movements = response.json()
        assert len(movements) == 1
        assert movements[0]["kind"] == "ADJUSTMENT"
        assert movements[0]["note"] == "opening stock"

    async def test_adjust_invalid_quantity(self, client: AsyncClient, item):
        response = await client.post(
            f"/api/items/{item.id}/adjust", json={"direction": "decrease", "quantity": 0}
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_QUANTITY"

    async def test_adjust_beyond_stock(self, client: AsyncClient, item):
        response = await client.post(
            f"/api/items/{item.id}/adjust", json={"direction": "decrease", "quantity": 60}
        )
        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "INSUFFICIENT_STOCK"
        assert data["detail"]["available"] == 50.0

    async def test_unknown_item(self, client: AsyncClient, tenant):
        response = await client.get("/api/items/999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ITEM_NOT_FOUND"


class TestInvoicesAPI:
    async def test_create_sale_moves_stock(self, client: AsyncClient, customer, item):
        invoice = await _sale(client, customer.id, item.id, 10)

        assert invoice["number"] == "GK-CR-0001-25-26"
        assert invoice["grand_total"] == 1000.0
        assert invoice["due_amount"] == 1000.0

        response = await client.get(f"/api/items/{item.id}")
        assert response.json()["quantity"] == 40.0

    async def test_oversell_rejected_and_nothing_kept(self, client: AsyncClient, customer, item):
        response = await client.post(
            "/api/invoices",
            json={
                "party_id": customer.id,
                "direction": "SALES",
                "lines": [{"item_id": item.id, "quantity": 80, "rate": 100}],
            },
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
        listing = await client.get("/api/invoices")
        assert listing.json()["total"] == 0
        assert (await client.get(f"/api/items/{item.id}")).json()["quantity"] == 50.0

    async def test_request_validation(self, client: AsyncClient, customer):
        response = await client.post(
            "/api/invoices",
            json={"party_id": customer.id, "direction": "SALES", "lines": []},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_update_and_delete(self, client: AsyncClient, customer, item):
        invoice = await _sale(client, customer.id, item.id, 10)

        response = await client.patch(
            f"/api/invoices/{invoice['id']}",
            json={"lines": [{"item_id": item.id, "quantity": 15, "rate": 100}]},
        )
        assert response.status_code == 200
        assert response.json()["grand_total"] == 1500.0
        assert (await client.get(f"/api/items/{item.id}")).json()["quantity"] == 35.0

        response = await client.delete(f"/api/invoices/{invoice['id']}")
        assert response.status_code == 200
        assert response.json()["warnings"] == []
        assert (await client.get(f"/api/items/{item.id}")).json()["quantity"] == 50.0

        response = await client.get(f"/api/invoices/{invoice['id']}")
        assert response.status_code == 404


class TestPaymentsAPI:
    async def test_over_allocation_conflict(self, client: AsyncClient, customer, item):
        first = await _sale(client, customer.id, item.id, 5)
        second = await _sale(client, customer.id, item.id, 5)

        response = await client.post(
            "/api/payments",
            json={
                "party_id": customer.id,
                "direction": "receive",
                "amount": 1000,
                "allocations": [
                    {"invoice_id": first["id"], "amount": 600},
                    {"invoice_id": second["id"], "amount": 500},
                ],
            },
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "ALLOCATION_EXCEEDS_PAYMENT_AMOUNT"
        assert (await client.get("/api/payments")).json()["total"] == 0

    async def test_receipt_and_statement(self, client: AsyncClient, customer, item):
        invoice = await _sale(client, customer.id, item.id, 10)

        response = await client.post(
            "/api/payments",
            json={
                "party_id": customer.id,
                "direction": "receive",
                "amount": 400,
                "payment_date": "2025-06-05",
            },
        )
        assert response.status_code == 201
        payment = response.json()
        assert payment["allocations"] == [{"invoice_id": invoice["id"], "amount": 400.0}]

        outstanding = (await client.get(f"/api/parties/{customer.id}/outstanding")).json()
        assert outstanding["total_due"] == 600.0

        statement = (await client.get(f"/api/parties/{customer.id}/ledger")).json()
        assert [line["balance_after"] for line in statement["lines"]] == [1000.0, 600.0]
        assert statement["closing_balance"] == 600.0

    async def test_delete_payment_reports_deleted_invoice(self, client: AsyncClient, customer, item):
        invoice = await _sale(client, customer.id, item.id, 2)
        payment = (
            await client.post(
                "/api/payments",
                json={"party_id": customer.id, "direction": "receive", "amount": 150},
            )
        ).json()
        assert (await client.delete(f"/api/invoices/{invoice['id']}")).status_code == 200

        response = await client.delete(f"/api/payments/{payment['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["restored_invoices"] == []
        assert len(body["warnings"]) == 1
        assert f"Invoice {invoice['id']}" in body["warnings"][0]

    async def test_inverted_statement_range(self, client: AsyncClient, customer):
        response = await client.get(
            f"/api/parties/{customer.id}/ledger",
            params={"start": "2025-07-01", "end": "2025-06-01"},
        )
        assert response.status_code == 400


class TestAdjustmentsAPI:
    async def test_contra_posts_to_both_parties(self, client: AsyncClient, customer, supplier):
        response = await client.post(
            "/api/adjustments",
            json={
                "txn_type": "CONTRA",
                "amount": 250,
                "adjustment_date": "2025-06-07",
                "from_party_id": customer.id,
                "to_party_id": supplier.id,
                "reference": "ADJ-1",
            },
        )
        assert response.status_code == 201, response.text
        adjustment = response.json()

        statement = (await client.get(f"/api/parties/{customer.id}/ledger")).json()
        assert [(line["entry_type"], line["credit"]) for line in statement["lines"]] == [
            ("ADJUSTMENT", 250.0)
        ]
        assert statement["closing_balance"] == -250.0

        listed = (await client.get("/api/adjustments", params={"txn_type": "CONTRA"})).json()
        assert [a["id"] for a in listed["adjustments"]] == [adjustment["id"]]

        response = await client.delete(f"/api/adjustments/{adjustment['id']}")
        assert response.status_code == 200
        statement = (await client.get(f"/api/parties/{customer.id}/ledger")).json()
        assert statement["closing_balance"] == 0.0

        response = await client.delete(f"/api/adjustments/{adjustment['id']}")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ADJUSTMENT_NOT_FOUND"

    async def test_requires_a_party(self, client: AsyncClient):
        response = await client.post("/api/adjustments", json={"amount": 10})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_unknown_party(self, client: AsyncClient, customer):
        response = await client.post(
            "/api/adjustments",
            json={"amount": 10, "from_party_id": customer.id, "to_party_id": 999},
        )
        assert response.status_code == 404
        assert (await client.get("/api/adjustments")).json()["total"] == 0
