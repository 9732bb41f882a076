from fastapi import APIRouter, Depends

from seatbook.api.deps import get_settings_store
from seatbook.schemas.setting import BalconyVisibility
from seatbook.services.settings_store import SettingsStore

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/balcony-visibility", response_model=BalconyVisibility)
def get_balcony_visibility(store: SettingsStore = Depends(get_settings_store)):
    return BalconyVisibility(visible=store.balcony_visible())
