"""
Pytest configuration and fixtures for CostFlow tests.
"""

import os

# Must be set before the settings module is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from costflow_api.main import app
from costflow_api.models import (
    Base,
    BusinessSettings,
    MenuItem,
    OverheadConfig,
    RawMaterial,
    RecipeDetail,
    Supplier,
)
from costflow_shared.config.constants import AllocationMethod
from costflow_shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Test client with the database session override.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Seed data: the reference costing example
# (10 portions, 2 labor hours at 50,000/h, 5 units at 10,000 with 80% yield)
# =============================================================================


@pytest.fixture
def seed_settings(db_session):
    settings = BusinessSettings(
        business_name="Warung Test",
        labor_rate_per_hour=50_000,
        currency="IDR",
        is_initialized=True,
    )
    db_session.add(settings)
    db_session.commit()
    db_session.refresh(settings)
    return settings


@pytest.fixture
def seed_overhead(db_session):
    """Overhead at 20% of labor."""
    config = OverheadConfig(
        allocation_method=AllocationMethod.PERCENTAGE_LABOR,
        allocation_rate=20,
        effective_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(config)
    db_session.commit()
    db_session.refresh(config)
    return config


@pytest.fixture
def seed_supplier(db_session):
    supplier = Supplier(name="Pasar Segar", contact_person="Budi", phone="0812")
    db_session.add(supplier)
    db_session.commit()
    db_session.refresh(supplier)
    return supplier


@pytest.fixture
def seed_material(db_session, seed_supplier):
    material = RawMaterial(
        code="BEEF-01",
        name="Beef tenderloin",
        unit="kg",
        category="Meat",
        current_price=10_000,
        yield_percentage=80,
        supplier_id=seed_supplier.id,
    )
    db_session.add(material)
    db_session.commit()
    db_session.refresh(material)
    return material


@pytest.fixture
def seed_menu_item(db_session):
    menu_item = MenuItem(
        code="STEAK",
        name="Beef steak",
        category="Main",
        standard_portion=10,
        standard_portion_unit="plate",
        standard_labor_hours=2,
    )
    db_session.add(menu_item)
    db_session.commit()
    db_session.refresh(menu_item)
    return menu_item


@pytest.fixture
def seed_recipe(db_session, seed_menu_item, seed_material):
    detail = RecipeDetail(
        menu_item_id=seed_menu_item.id,
        raw_material_id=seed_material.id,
        quantity=5,
        unit="kg",
        sequence=1,
    )
    db_session.add(detail)
    db_session.commit()
    db_session.refresh(detail)
    return detail


@pytest.fixture
def costing_setup(seed_settings, seed_overhead, seed_recipe, seed_menu_item, seed_material):
    """Everything needed to calculate the reference cost standard."""
    return {
        "menu_item": seed_menu_item,
        "material": seed_material,
        "recipe": seed_recipe,
    }
