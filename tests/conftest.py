from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
import pytest

from storefront import catalog as C
from storefront.api import create_app
from storefront.auth import Identity
from storefront.lift import unwrap
from storefront.payments import MockPaymentGateway
from storefront.services import Services
from storefront.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}",
        seed_on_startup=False,
    )


@pytest.fixture
def gateway() -> MockPaymentGateway:
    return MockPaymentGateway()


@pytest.fixture
async def services(settings: Settings, gateway: MockPaymentGateway) -> AsyncIterator[Services]:
    services = await Services.open(settings, gateway=gateway)
    try:
        yield services
    finally:
        await services.close()


@pytest.fixture
def admin() -> Identity:
    return Identity.admin("admin-1", "admin@example.com")


@pytest.fixture
def alice() -> Identity:
    return Identity.customer("alice", "alice@example.com")


@pytest.fixture
def bob() -> Identity:
    return Identity.customer("bob", "bob@example.com")


@dataclass(frozen=True, slots=True)
class Shop:
    store: C.Store
    sneakers: C.Product
    lipstick: C.Product


@pytest.fixture
async def shop(services: Services) -> Shop:
    """One store with two products: sneakers (8500, stock 50) and lipstick (2500, stock 10)."""
    store = unwrap(await services.catalog.create_store(C.NewStore("Main Shoes", "shoes", "#2563eb")))
    sneakers = unwrap(await services.catalog.create_product(C.NewProduct(
        name="Classic Leather Sneakers",
        price=8500,
        category=C.Category.SHOES,
        stock=50,
        store_id=store.id,
    )))
    lipstick = unwrap(await services.catalog.create_product(C.NewProduct(
        name="Matte Lipstick - Ruby Red",
        price=2500,
        category=C.Category.COSMETICS,
        stock=10,
        store_id=store.id,
    )))
    return Shop(store, sneakers, lipstick)


@pytest.fixture
async def client(settings: Settings, services: Services) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings, services=services)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Roles": "admin"}
ALICE_HEADERS = {"X-User-Id": "alice", "X-User-Email": "alice@example.com"}
BOB_HEADERS = {"X-User-Id": "bob"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return ADMIN_HEADERS


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return ALICE_HEADERS


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return BOB_HEADERS
