"""Route test fixtures — async DB, FastAPI test client, seeded accounts.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use test DB sessions
    - db_manager patched for background tasks that bypass get_db
    - Payment gateway and image storage replaced by in-memory fakes

Design Decisions:
    - Seed rows written through short-lived sessions so route sessions
      never see stale identity maps
"""

from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from canteen.api.deps import get_image_storage, get_payment_gateway
from canteen.core.domain_types import PrincipalRole
from canteen.db.base import Base, utcnow
from canteen.infrastructure.database import get_db, DatabaseSessionManager
from canteen.infrastructure.security import create_access_token
from canteen.models import (
    Admin, Canteen, CanteenStaff, ExamDetails, MenuItem, User,
)
import canteen.infrastructure.database as db_module
from canteen.main import app
from tests.api.fakes import FakeImageStorage, FakePaymentGateway
from tests.api.helpers import PASSWORD_HASH, auth


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
def seed(test_session_factory):
    """Persist rows in a throwaway session and return them."""
    async def _seed(*rows):
        async with test_session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else rows
    return _seed


@pytest.fixture
def fetch(test_session_factory):
    """Load a fresh copy of a row by primary key."""
    async def _fetch(model, row_id):
        async with test_session_factory() as session:
            return await session.get(model, row_id)
    return _fetch


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def storage():
    return FakeImageStorage()


@pytest.fixture
async def client(test_engine, test_session_factory, gateway, storage):
    """FastAPI test client with DB and external services overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_image_storage] = lambda: storage

    # Patch db_manager for background tasks that use it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seeded accounts ────────────────────────────────────────────

@pytest.fixture
async def admin(seed):
    return await seed(Admin(name="Root", email="root@example.com", password_hash=PASSWORD_HASH))


@pytest.fixture
def admin_headers(admin):
    return auth(create_access_token(str(admin.id), PrincipalRole.ADMIN.value))


@pytest.fixture
async def canteen(seed):
    return await seed(Canteen(
        name="Main Canteen", location="Block A", contact_number="9999900000",
        opening_time="08:00", closing_time="20:00",
    ))


@pytest.fixture
async def other_canteen(seed):
    return await seed(Canteen(name="Hostel Mess", location="Hostel Road"))


@pytest.fixture
async def student(seed):
    return await seed(User(
        name="Asha", email="asha@kletech.ac.in", uni_id="01FE21BCS042",
        phone_no="9876543210", password_hash=PASSWORD_HASH, role="student",
        department="CSE", semester="5",
    ))


@pytest.fixture
def student_headers(student):
    return auth(create_access_token(
        str(student.id), PrincipalRole.USER.value, {"user_role": student.role},
    ))


@pytest.fixture
async def faculty(seed):
    return await seed(User(
        name="Prof Rao", email="rao@kletech.ac.in", uni_id="FAC001",
        phone_no="9876500000", password_hash=PASSWORD_HASH, role="faculty",
        department="CSE",
    ))


@pytest.fixture
def faculty_headers(faculty):
    return auth(create_access_token(
        str(faculty.id), PrincipalRole.USER.value, {"user_role": faculty.role},
    ))


@pytest.fixture
async def staff(seed, canteen):
    return await seed(CanteenStaff(
        name="Ravi", email="ravi@canteen.test", canteen_id=canteen.id,
        contact_number="9000000001", password_hash=PASSWORD_HASH,
    ))


@pytest.fixture
def staff_headers(staff):
    return auth(create_access_token(
        str(staff.id), PrincipalRole.CANTEEN_STAFF.value,
        {"canteen_id": str(staff.canteen_id)},
    ))


@pytest.fixture
async def other_staff(seed, other_canteen):
    return await seed(CanteenStaff(
        name="Meena", email="meena@canteen.test", canteen_id=other_canteen.id,
        contact_number="9000000002", password_hash=PASSWORD_HASH,
    ))


@pytest.fixture
def other_staff_headers(other_staff):
    return auth(create_access_token(
        str(other_staff.id), PrincipalRole.CANTEEN_STAFF.value,
        {"canteen_id": str(other_staff.canteen_id)},
    ))


# ─── Catalog and schedule ───────────────────────────────────────

@pytest.fixture
async def menu_items(seed, canteen):
    """Two available dishes and one unavailable dish."""
    return await seed(
        MenuItem(item_name="Masala Dosa", canteen_id=canteen.id, category="Breakfast", price=40.0),
        MenuItem(item_name="Veg Thali", canteen_id=canteen.id, category="Lunch", price=80.0),
        MenuItem(
            item_name="Paneer Roll", canteen_id=canteen.id, category="Snacks",
            price=60.0, availability=False,
        ),
    )


@pytest.fixture
async def exam(seed):
    return await seed(ExamDetails(
        exam_name="Operating Systems", exam_date=utcnow() + timedelta(hours=3),
        exam_time="10:00", department="CSE", semester="5",
        start_university_id="01FE21BCS001", end_university_id="01FE21BCS100",
    ))
