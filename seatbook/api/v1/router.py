from fastapi import APIRouter

# Auth
from seatbook.api.v1.public.auth import router as auth_router

# Public: seat map, bookings, settings
from seatbook.api.v1.public.seat_rows import router as public_seat_rows_router
from seatbook.api.v1.public.bookings import router as bookings_router
from seatbook.api.v1.public.settings import router as public_settings_router

# Admin
from seatbook.api.v1.admin.bookings import router as admin_bookings_router
from seatbook.api.v1.admin.seat_rows import router as admin_seat_rows_router
from seatbook.api.v1.admin.settings import router as admin_settings_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(public_seat_rows_router)
api_router.include_router(bookings_router)
api_router.include_router(public_settings_router)

# --- Admin ---
api_router.include_router(admin_bookings_router)
api_router.include_router(admin_seat_rows_router)
api_router.include_router(admin_settings_router)
