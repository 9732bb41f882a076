from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from seatbook.core.config import settings
from seatbook.core.security import authenticate_admin, create_access_token
from seatbook.api.deps import get_current_admin
from seatbook.schemas.user import Token, AdminProfile

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    """Exchange the administrator's username/password for a bearer token."""
    if not authenticate_admin(form_data.username, form_data.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(
        access_token=create_access_token(subject=settings.ADMIN_USERNAME),
        token_type="bearer",
    )


@router.get("/me", response_model=AdminProfile)
def read_me(username: str = Depends(get_current_admin)):
    return AdminProfile(username=username, role="admin")
