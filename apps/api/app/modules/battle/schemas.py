from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class BattleIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    character_id_1: int = Field(alias="characterId1", gt=0)
    character_id_2: int = Field(alias="characterId2", gt=0)


class CombatantOut(BaseModel):
    id: int
    name: str
    health: float


class RoundOut(BaseModel):
    number: int
    attacker_id: int
    defender_id: int
    attacker_speed: float
    defender_speed: float
    damage: float
    counter_damage: Optional[float] = None


class BattleOut(BaseModel):
    log: str
    winner: CombatantOut
    loser: CombatantOut
    rounds: List[RoundOut] = Field(default_factory=list)
