"""
Keyed character store with auto-increment identity.

One CharacterStore is built per process (see app.main) or per test. Every
read hands back a detached Character; changes only land through update,
replace or delete.
"""
from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from app.modules.jobs.stats import Modifier

from .entity import Attributes, Character
from .models import CharacterRecord


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _record_to_character(rec: CharacterRecord) -> Character:
    attributes = Attributes(
        hp=rec.hp,
        health=rec.health,
        strength=rec.strength,
        dexterity=rec.dexterity,
        intelligence=rec.intelligence,
        attack_modifier=Modifier.from_dict(json.loads(rec.attack_modifier_json or "{}")),
        speed_modifier=Modifier.from_dict(json.loads(rec.speed_modifier_json or "{}")),
    )
    return Character(id=rec.id, name=rec.name, job=rec.job, attributes=attributes)


def _write_character(rec: CharacterRecord, character: Character) -> None:
    a = character.attributes
    rec.name = character.name
    rec.job = character.job.value
    rec.hp = a.hp
    rec.health = a.health
    rec.strength = a.strength
    rec.dexterity = a.dexterity
    rec.intelligence = a.intelligence
    rec.attack_modifier_json = json.dumps(a.attack_modifier.to_dict(), ensure_ascii=False)
    rec.speed_modifier_json = json.dumps(a.speed_modifier.to_dict(), ensure_ascii=False)
    rec.updated_at = _now_iso()


class CharacterStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        # held by callers that need read-modify-write over several characters
        self.lock = threading.RLock()

    def create(self, character: Character) -> Character:
        with self.lock, Session(self.engine) as session:
            now = _now_iso()
            rec = CharacterRecord(
                name=character.name,
                job=character.job.value,
                hp=0,
                health=0,
                strength=0,
                dexterity=0,
                intelligence=0,
                attack_modifier_json="{}",
                speed_modifier_json="{}",
                created_at=now,
                updated_at=now,
            )
            _write_character(rec, character)
            session.add(rec)
            session.commit()
            session.refresh(rec)
            character.id = rec.id
            return character

    def count(self) -> int:
        with Session(self.engine) as session:
            return int(session.exec(select(func.count()).select_from(CharacterRecord)).one())

    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[Character]:
        with Session(self.engine) as session:
            stmt = select(CharacterRecord).order_by(CharacterRecord.id).offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)
            return [_record_to_character(r) for r in session.exec(stmt).all()]

    def find_by_id(self, character_id: int) -> Optional[Character]:
        with Session(self.engine) as session:
            rec = session.get(CharacterRecord, character_id)
            if rec is None:
                return None
            return _record_to_character(rec)

    def update(self, character_id: int, attributes: Mapping[str, Any]) -> bool:
        """Overlay `attributes` on the stored ones. False if the id is unknown."""
        with self.lock, Session(self.engine) as session:
            rec = session.get(CharacterRecord, character_id)
            if rec is None:
                return False
            character = _record_to_character(rec)
            character.attributes = character.attributes.merged(attributes)
            _write_character(rec, character)
            session.add(rec)
            session.commit()
            return True

    def replace(self, character: Character) -> bool:
        if character.id is None:
            return False
        with self.lock, Session(self.engine) as session:
            rec = session.get(CharacterRecord, character.id)
            if rec is None:
                return False
            _write_character(rec, character)
            session.add(rec)
            session.commit()
            return True

    def delete(self, character_id: int) -> bool:
        with self.lock, Session(self.engine) as session:
            rec = session.get(CharacterRecord, character_id)
            if rec is None:
                return False
            session.delete(rec)
            session.commit()
            return True
