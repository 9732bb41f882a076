import os

# Must be set before seatbook.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seatbook.api.deps import get_notification_queue, get_receipt_storage
from seatbook.core.config import settings
from seatbook.core.exceptions import UploadError
from seatbook.db.base import Base
from seatbook.db.session import get_db
from seatbook.main import app
from seatbook.models.seat_row import SeatRowType
from seatbook.schemas.booking import BookingCreate
from seatbook.schemas.seat_row import SeatRowCreate
from seatbook.services.booking import BookingTransaction
from seatbook.services.inventory import SeatRowInventory
from seatbook.services.notifications import NotificationQueue, NotificationResult
from seatbook.services.side_effects import SideEffectResult

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

test_settings = settings.model_copy(
    update={
        "NOTIFY_BACKOFF_SECONDS": 0.0,
        "RECEIPT_UPLOAD_BACKOFF_SECONDS": 0.0,
    }
)


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeStorage:
    """Records uploads; `fail=True` behaves like storage that is down."""

    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    def upload(self, receipt, owner_id, fatal=True):
        if self.fail:
            error = UploadError("Receipt upload failed after 3 attempts. Please try again.")
            if fatal:
                raise error
            return SideEffectResult(ok=False, error=error, attempts=3)
        url = f"https://storage.test/receipts/{owner_id}-{len(self.uploads)}.png"
        self.uploads.append((owner_id, receipt))
        return SideEffectResult(ok=True, value=url, attempts=1)


class FakeSender:
    def __init__(self, succeed=True):
        self.succeed = succeed
        self.sent = []

    def send_booking_confirmation(self, job):
        self.sent.append(job)
        if self.succeed:
            return NotificationResult(success=True, detail="Email sent successfully")
        return NotificationResult(success=False, detail="Email configuration missing")


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def notifications(sender):
    return NotificationQueue(sender=sender, settings=test_settings, sleep=lambda s: None)


@pytest.fixture
def inventory(db):
    return SeatRowInventory(db)


@pytest.fixture
def transaction(db, storage, notifications):
    return BookingTransaction(db, storage=storage, notifications=notifications, settings=test_settings)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def client(db, storage, notifications):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_receipt_storage] = lambda: storage
    app.dependency_overrides[get_notification_queue] = lambda: notifications
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post(
        f"{settings.API_V1_STR}/auth/login",
        data={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_row(inventory, name, seats, row_type=SeatRowType.Ground, visible=True):
    return inventory.create_row(
        SeatRowCreate(name=name, type=row_type, seats=seats, visible=visible)
    )


def booking_request(email, *seats, name="Test Customer", phone=None):
    """`seats` are (row, seat_number) pairs."""
    return BookingCreate(
        name=name,
        email=email,
        phone=phone,
        seats=[
            {
                "seat_row_id": row.id,
                "seat_number": number,
                "first_name": "Pass",
                "last_name": f"Enger{number}",
            }
            for row, number in seats
        ],
    )
