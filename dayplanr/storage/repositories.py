from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from dayplanr.storage.database import PlannerStateModel


class PlannerStateRepository:
    """Keyed draft blobs owned by the UI. Opaque to the planner."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        model = self.db.query(PlannerStateModel).filter(PlannerStateModel.key == key).first()
        if not model:
            return None
        return model.payload

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        existing = self.db.query(PlannerStateModel).filter(PlannerStateModel.key == key).first()
        if existing:
            existing.payload = payload
        else:
            self.db.add(PlannerStateModel(key=key, payload=payload))
        self.db.commit()
