from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from seatbook.core.config import settings
from seatbook.core.security import decode_token
from seatbook.db.session import get_db
from seatbook.services.booking import BookingTransaction
from seatbook.services.inventory import SeatRowInventory
from seatbook.services.notifications import NotificationQueue
from seatbook.services.settings_store import SettingsStore
from seatbook.services.storage import ReceiptStorage

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_current_admin(token: str = Depends(oauth2_scheme)) -> str:
    """Resolve the bearer token to the admin username or reject with 401."""
    subject = decode_token(token)
    if subject is None or subject != settings.ADMIN_USERNAME:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


# External collaborators, overridable in tests
def get_receipt_storage() -> ReceiptStorage:
    return ReceiptStorage(settings)


def get_notification_queue() -> NotificationQueue:
    return NotificationQueue(settings=settings)


def get_inventory(db: Session = Depends(get_db)) -> SeatRowInventory:
    return SeatRowInventory(db)


def get_settings_store(db: Session = Depends(get_db)) -> SettingsStore:
    return SettingsStore(db)


def get_booking_transaction(
    db: Session = Depends(get_db),
    storage: ReceiptStorage = Depends(get_receipt_storage),
    notifications: NotificationQueue = Depends(get_notification_queue),
) -> BookingTransaction:
    return BookingTransaction(db, storage=storage, notifications=notifications, settings=settings)
