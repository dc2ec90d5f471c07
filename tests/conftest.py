"""
Shared fixtures.

Settings are read from the environment when ``app`` is first imported, so the
test database and secrets are configured here before any app import.
"""
import asyncio
import os
import tempfile
from decimal import Decimal
from types import SimpleNamespace

_DB_DIR = tempfile.mkdtemp(prefix="restaurant-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"
os.environ["QR_TOKEN_SECRET"] = "test-qr-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app import crud  # noqa: E402
from app.core import security  # noqa: E402
from app.database import AsyncSessionLocal, engine  # noqa: E402
from app.db import models  # noqa: E402,F401
from app.db.base_class import Base  # noqa: E402
from app.db.models.menu import MenuItemStatus, SelectionType  # noqa: E402
from app.db.models.user import UserRole  # noqa: E402
from app.schemas.menu import (  # noqa: E402
    MenuItemCreateSchemas,
    ModifierGroupCreateSchemas,
    ModifierOptionCreateSchemas,
)
from app.schemas.order import OrderCreateSchemas  # noqa: E402
from app.schemas.table import TableCreateSchemas  # noqa: E402
from app.schemas.user import UserCreateSchemas  # noqa: E402
from app.services.connection_manager import ConnectionManager  # noqa: E402
from app.services.kitchen_service import KitchenService  # noqa: E402
from app.services.notification_service import NotificationService  # noqa: E402
from app.services.order_service import OrderService  # noqa: E402
from app.services.payment_service import PaymentService  # noqa: E402


async def reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


class FakeWebSocket:
    """Stands in for a starlette WebSocket in ConnectionManager tests."""

    def __init__(self, fail: bool = False):
        self.accepted = False
        self.fail = fail
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    def events(self):
        return [m["event"] for m in self.sent]


class RecordingNotifier(NotificationService):
    """Real routing and delivery, plus a log of every published event."""

    def __init__(self, connections):
        super().__init__(connections)
        self.published = []

    async def publish(self, event):
        self.published.append(event)
        await super().publish(event)

    def names(self):
        return [e.event_name for e in self.published]


@pytest.fixture
async def db():
    await reset_database()
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def connections():
    return ConnectionManager()


@pytest.fixture
def notifier(connections):
    return RecordingNotifier(connections)


@pytest.fixture
def order_service(notifier):
    return OrderService(notifier)


@pytest.fixture
def kitchen_service(order_service):
    return KitchenService(order_service)


@pytest.fixture
def payment_service(order_service):
    return PaymentService(order_service)


async def seed_menu(db):
    """One table and a noodle soup with a required size and optional toppings."""
    table = await crud.table.create(db, obj_in=TableCreateSchemas(table_number="T01", capacity=4, location="Hall"))
    size = await crud.menu.create_modifier_group(db, obj_in=ModifierGroupCreateSchemas(
        name="Size", selection_type=SelectionType.SINGLE, is_required=True, min_selections=1, max_selections=1,
        options=[
            ModifierOptionCreateSchemas(name="Regular", price_adjustment=Decimal("0")),
            ModifierOptionCreateSchemas(name="Large", price_adjustment=Decimal("2.50")),
        ],
    ))
    toppings = await crud.menu.create_modifier_group(db, obj_in=ModifierGroupCreateSchemas(
        name="Toppings", selection_type=SelectionType.MULTIPLE, is_required=False, max_selections=2,
        options=[
            ModifierOptionCreateSchemas(name="Egg", price_adjustment=Decimal("1.00")),
            ModifierOptionCreateSchemas(name="Beef", price_adjustment=Decimal("3.00")),
            ModifierOptionCreateSchemas(name="Herbs", price_adjustment=Decimal("0")),
        ],
    ))
    pho = await crud.menu.create_item(db, obj_in=MenuItemCreateSchemas(
        name="Pho", price=Decimal("10.00"), modifier_group_ids=[size.id, toppings.id],
    ))
    tea = await crud.menu.create_item(db, obj_in=MenuItemCreateSchemas(name="Iced Tea", price=Decimal("2.00")))
    sold_out = await crud.menu.create_item(db, obj_in=MenuItemCreateSchemas(
        name="Banh Xeo", price=Decimal("8.00"), status=MenuItemStatus.SOLD_OUT,
    ))
    await db.commit()
    options = {o.name: o.id for group in (size, toppings) for o in group.options}
    return SimpleNamespace(
        table=table, pho=pho, tea=tea, sold_out=sold_out, size=size, toppings=toppings, options=options,
    )


@pytest.fixture
async def menu(db):
    return await seed_menu(db)


def two_item_order(menu, **extra) -> OrderCreateSchemas:
    """Two lines, one of them with modifiers: 1 large pho with egg + 2 iced teas."""
    return OrderCreateSchemas(
        table_id=menu.table.id,
        items=[
            {
                "menu_item_id": menu.pho.id,
                "quantity": 1,
                "modifiers": [
                    {"modifier_option_id": menu.options["Large"]},
                    {"modifier_option_id": menu.options["Egg"]},
                ],
                "special_request": "No onions",
            },
            {"menu_item_id": menu.tea.id, "quantity": 2},
        ],
        **extra,
    )


# --- HTTP / websocket fixtures ---

STAFF = {
    UserRole.ADMIN: "admin@example.com",
    UserRole.WAITER: "waiter@example.com",
    UserRole.STAFF: "kitchen@example.com",
}


async def _seed_api_data():
    await reset_database()
    async with AsyncSessionLocal() as session:
        for role, email in STAFF.items():
            await crud.user.create(session, obj_in=UserCreateSchemas(
                email=email, password="password123", full_name=role.value.title(), role=role,
            ))
        data = await seed_menu(session)
    return data


@pytest.fixture
def api_menu():
    return asyncio.run(_seed_api_data())


@pytest.fixture
def client(api_menu):
    from app.main import app

    with TestClient(app) as c:
        yield c


def auth_headers(role: UserRole) -> dict:
    token = security.create_access_token(STAFF[role], role=role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers(UserRole.ADMIN)


@pytest.fixture
def waiter_headers():
    return auth_headers(UserRole.WAITER)


@pytest.fixture
def kitchen_headers():
    return auth_headers(UserRole.STAFF)
