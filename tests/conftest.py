from __future__ import annotations

import pytest

from opostore.context import ShopContext
from opostore.models.product import Product
from opostore.storage.area import SharedStorageArea
from tests.support import FIXED_NOW


@pytest.fixture
def area() -> SharedStorageArea:
    return SharedStorageArea()


@pytest.fixture
def failures() -> list[str]:
    return []


@pytest.fixture
def tab(area: SharedStorageArea, failures: list[str]) -> ShopContext:
    return ShopContext(area, context_id="tab-a", on_failure=failures.append, clock=lambda: FIXED_NOW)


@pytest.fixture
def product() -> Product:
    return Product(
        id="p1",
        name="Runner",
        slug="runner",
        price=1000,
        images=["/images/runner.jpg", "/images/runner-2.jpg"],
    )
