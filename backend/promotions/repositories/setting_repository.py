from sqlalchemy.orm import Session

from promotions.models.setting import Setting


class SettingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_value(self, key: str) -> str | None:
        setting = self.db.query(Setting).filter(Setting.key == key).first()
        return setting.value if setting else None
