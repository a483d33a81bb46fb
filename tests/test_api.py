"""
Tests for the REST endpoints through the FastAPI test client.
"""

import pytest


@pytest.fixture
def priced_menu_item(client, costing_setup):
    menu_item_id = costing_setup["menu_item"].id
    response = client.post(
        f"/api/menu-items/{menu_item_id}/pricing",
        json={"selling_price": 25000, "effective_date": "2026-01-01T00:00:00"},
    )
    assert response.status_code == 201
    return menu_item_id


@pytest.fixture
def production_log_id(client, priced_menu_item, costing_setup):
    response = client.post(
        "/api/production-logs",
        json={
            "menu_item_id": priced_menu_item,
            "production_date": "2026-01-15T10:00:00",
            "portions_produced": 8,
            "portions_sold": 8,
            "labor_hours_actual": 1.5,
        },
    )
    assert response.status_code == 201
    log_id = response.json()["id"]

    response = client.post(
        f"/api/production-logs/{log_id}/details",
        json={
            "raw_material_id": costing_setup["material"].id,
            "quantity_used": 5,
            "unit": "kg",
            "unit_price": 14000,
        },
    )
    assert response.status_code == 201
    assert response.json()["subtotal"] == 70000
    return log_id


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_detailed(self, client):
        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_security_headers(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestSettingsEndpoints:
    def test_init_flow(self, client):
        assert client.get("/api/settings/status").json()["initialized"] is False

        response = client.post(
            "/api/settings/init",
            json={"business_name": "Warung Baru", "labor_rate_per_hour": 40000},
        )
        assert response.status_code == 201
        assert response.json()["currency"] == "IDR"

        assert client.get("/api/settings/status").json()["initialized"] is True
        assert client.post("/api/settings/init", json={"business_name": "Again"}).status_code == 400

    def test_get_before_init(self, client):
        assert client.get("/api/settings").status_code == 404


class TestCatalogEndpoints:
    def test_supplier_pagination_shape(self, client):
        for name in ("Alpha", "Beta", "Gamma"):
            assert client.post("/api/suppliers", json={"name": name}).status_code == 201

        response = client.get("/api/suppliers", params={"limit": 2, "offset": 0})

        body = response.json()
        assert [s["name"] for s in body["items"]] == ["Alpha", "Beta"]
        assert body["pagination"]["total"] == 3
        assert body["pagination"]["has_next"] is True
        assert body["pagination"]["pages"] == 2

    def test_material_validation_errors(self, client):
        response = client.post(
            "/api/materials",
            json={
                "code": "RICE",
                "name": "Rice",
                "unit": "kg",
                "current_price": -1,
                "yield_percentage": 0,
            },
        )

        assert response.status_code == 400
        fields = {v["field"] for v in response.json()["detail"]["violations"]}
        assert fields == {"current_price", "yield_percentage"}

    def test_material_categories_route(self, client, seed_material):
        response = client.get("/api/materials/categories/list")

        assert response.status_code == 200
        assert response.json() == ["Meat"]

    def test_material_detail(self, client, seed_material):
        response = client.get(f"/api/materials/{seed_material.id}")

        assert response.status_code == 200
        assert response.json()["supplier"]["name"] == "Pasar Segar"

    def test_delete_referenced_supplier(self, client, seed_material):
        response = client.delete(f"/api/suppliers/{seed_material.supplier_id}")

        assert response.status_code == 200
        assert response.json()["outcome"] == "deactivated"

    def test_unknown_menu_item(self, client):
        assert client.get("/api/menu-items/999").status_code == 404

    def test_recipe_add_and_list(self, client, seed_menu_item, seed_material):
        response = client.post(
            f"/api/recipes/{seed_menu_item.id}/details",
            json={"raw_material_id": seed_material.id, "quantity": 0.25, "unit": "kg"},
        )
        assert response.status_code == 201

        details = client.get(f"/api/recipes/{seed_menu_item.id}/details").json()
        assert len(details) == 1
        assert details[0]["sequence"] == 1

    def test_yield_test_updates_material(self, client, seed_material):
        response = client.post(
            "/api/yield-tests",
            json={
                "raw_material_id": seed_material.id,
                "test_date": "2026-01-10T09:00:00",
                "ap_weight": 1000,
                "ep_weight": 750,
            },
        )

        assert response.status_code == 201
        assert response.json()["yield_percentage"] == 75
        material = client.get(f"/api/materials/{seed_material.id}").json()
        assert material["yield_percentage"] == 75
        assert len(material["recent_yield_tests"]) == 1

    def test_non_json_body_rejected(self, client):
        response = client.post(
            "/api/suppliers",
            content="name=Alpha",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 415


class TestCostingEndpoints:
    def test_calculate_cost_standard(self, client, costing_setup):
        menu_item_id = costing_setup["menu_item"].id

        response = client.post(f"/api/cost-standards/calculate/{menu_item_id}")

        assert response.status_code == 201
        breakdown = response.json()["breakdown"]
        assert breakdown["material_cost"] == 62500.0
        assert breakdown["labor_cost"] == 100000.0
        assert breakdown["overhead_cost"] == 20000.0
        assert breakdown["cost_per_portion"] == 18250.0
        assert breakdown["lines"][0]["material_code"] == "BEEF-01"

        current = client.get(f"/api/cost-standards/{menu_item_id}")
        assert current.status_code == 200
        assert current.json()["total_cost"] == 182500.0

    def test_stored_standard_is_rounded(self, client, db_session, costing_setup):
        menu_item = costing_setup["menu_item"]
        menu_item.standard_portion = 3
        db_session.commit()

        response = client.post(f"/api/cost-standards/calculate/{menu_item.id}")

        assert response.json()["cost_standard"]["cost_per_portion"] == 60833.33
        current = client.get(f"/api/cost-standards/{menu_item.id}").json()
        assert current["cost_per_portion"] == 60833.33
        history = client.get(f"/api/cost-standards/{menu_item.id}/history").json()
        assert history[0]["cost_per_portion"] == 60833.33

    def test_zero_yield_is_unprocessable(self, client, db_session, costing_setup):
        costing_setup["material"].yield_percentage = 0
        db_session.commit()

        response = client.post(
            f"/api/cost-standards/calculate/{costing_setup['menu_item'].id}"
        )

        assert response.status_code == 422

    def test_current_without_standard(self, client, seed_menu_item):
        response = client.get(f"/api/cost-standards/{seed_menu_item.id}")

        assert response.status_code == 404
        assert "calculate cost standard first" in response.json()["detail"]

    def test_overhead_config(self, client):
        assert client.get("/api/cost-standards/overhead/config").json() is None

        response = client.post(
            "/api/cost-standards/overhead/config",
            json={"allocation_method": "per_unit", "allocation_rate": 1000},
        )

        assert response.status_code == 201
        current = client.get("/api/cost-standards/overhead/config").json()
        assert current["allocation_method"] == "per_unit"

    def test_variance_needs_standard(self, client, production_log_id):
        response = client.post(f"/api/variance-analysis/calculate/{production_log_id}")

        assert response.status_code == 404

    def test_variance_flow(self, client, priced_menu_item, production_log_id):
        client.post(f"/api/cost-standards/calculate/{priced_menu_item}")

        response = client.post(f"/api/variance-analysis/calculate/{production_log_id}")

        assert response.status_code == 201
        analysis = response.json()["analysis"]
        assert analysis["standard_cost"] == 146000.0
        assert analysis["actual_cost"] == 160000.0
        assert analysis["variance"] == 14000.0
        assert analysis["variance_percentage"] == 9.59
        assert analysis["classification"] == "unfavorable"
        assert response.json()["variance_record"]["variance_percentage"] == 9.59

        summary = client.get("/api/variance-analysis/summary").json()
        assert summary["total_records"] == 1
        assert summary["unfavorable_count"] == 1
        assert summary["variances"][0]["variance_percentage"] == 9.59

        history = client.get(f"/api/variance-analysis/{priced_menu_item}").json()
        assert len(history) == 1
        assert history[0]["variance_percentage"] == 9.59


class TestReportEndpoints:
    def test_monthly_summary_requires_period(self, client):
        assert client.get("/api/reports/monthly-summary").status_code == 400

    def test_monthly_summary(self, client, production_log_id):
        response = client.get("/api/reports/monthly-summary", params={"month": 1, "year": 2026})

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "1/2026"
        assert body["total_revenue"] == 200000.0
        assert body["total_cost"] == 160000.0
        assert body["profit_margin"] == 20.0

    def test_menu_profitability(self, client, priced_menu_item, production_log_id):
        client.post(f"/api/cost-standards/calculate/{priced_menu_item}")

        rows = client.get("/api/reports/menu-profitability").json()

        assert rows[0]["margin"] == 6750.0
        assert rows[0]["margin_percentage"] == 27.0

    def test_dashboard(self, client, costing_setup):
        body = client.get("/api/reports/dashboard").json()

        assert body["counts"]["menu_items"] == 1
        assert body["variance"]["recent_count"] == 0
