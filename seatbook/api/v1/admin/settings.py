from fastapi import APIRouter, Depends

from seatbook.api.deps import get_current_admin, get_settings_store
from seatbook.schemas.setting import BalconyVisibility
from seatbook.services.settings_store import BALCONY_VISIBLE, SettingsStore

router = APIRouter(
    prefix="/admin/settings",
    tags=["Admin - Settings"],
    dependencies=[Depends(get_current_admin)],
)


@router.post("/balcony-visibility", response_model=BalconyVisibility)
def set_balcony_visibility(
    body: BalconyVisibility,
    store: SettingsStore = Depends(get_settings_store),
):
    """Show or hide every Balcony row on the customer seat map."""
    return BalconyVisibility(visible=store.set_bool(BALCONY_VISIBLE, body.visible))
