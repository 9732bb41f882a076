from sqlalchemy.orm import Session

from seatbook.models.setting import Setting

BALCONY_VISIBLE = "balcony_visible"


class SettingsStore:
    """Persisted global flags, so every instance sees the same value after a restart."""

    def __init__(self, db: Session):
        self.db = db

    def get_bool(self, key: str, default: bool) -> bool:
        record = self.db.get(Setting, key)
        if record is None:
            return default
        return record.value == "true"

    def set_bool(self, key: str, value: bool) -> bool:
        record = self.db.get(Setting, key)
        if record is None:
            record = Setting(key=key, value="")
            self.db.add(record)
        record.value = "true" if value else "false"
        self.db.commit()
        return value

    def balcony_visible(self) -> bool:
        return self.get_bool(BALCONY_VISIBLE, default=True)
