from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# ids are never reused (sqlite AUTOINCREMENT)
class CharacterRecord(SQLModel, table=True):
    __tablename__ = "characters"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    job: str  # Warrior|Mage|Thief

    hp: float
    health: float
    strength: float
    dexterity: float
    intelligence: float
    attack_modifier_json: str
    speed_modifier_json: str

    created_at: str
    updated_at: str
