from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from app.modules.jobs.stats import Job

StatName = Literal["strength", "dexterity", "intelligence"]
CharacterStatus = Literal["alive", "dead"]


class PageOut(BaseModel):
    offset: int
    limit: int
    total: int
    has_more: bool


class ModifierIn(BaseModel):
    multipliers: Dict[StatName, Annotated[float, Field(ge=0)]] = Field(default_factory=dict)
    description: Optional[str] = None


class AttributesUpdateIn(BaseModel):
    # hp is fixed at creation
    health: Optional[float] = Field(default=None, ge=0)
    strength: Optional[float] = Field(default=None, ge=0)
    dexterity: Optional[float] = Field(default=None, ge=0)
    intelligence: Optional[float] = Field(default=None, ge=0)
    attack_modifier: Optional[ModifierIn] = None
    speed_modifier: Optional[ModifierIn] = None


class AttributesPatchIn(AttributesUpdateIn):
    hp: Optional[float] = Field(default=None, ge=0)


class CharacterCreateIn(BaseModel):
    # name rules are checked by the service so every violation is reported together
    name: str
    job: Job
    attributes: Optional[AttributesPatchIn] = None


class CharacterUpdateIn(BaseModel):
    name: Optional[str] = None
    job: Optional[Job] = None
    attributes: Optional[AttributesUpdateIn] = None


class StatsOut(BaseModel):
    strength: float
    dexterity: float
    intelligence: float


class ModifierValueOut(BaseModel):
    value: float
    description: Optional[str] = None


class BattleModifiersOut(BaseModel):
    attack_modifier: ModifierValueOut
    speed_modifier: ModifierValueOut


class CharacterOut(BaseModel):
    id: int
    name: str
    job: Job
    current_health: float
    max_health: float
    stats: StatsOut
    battle_modifiers: BattleModifiersOut


class CharacterSummaryOut(BaseModel):
    id: int
    name: str
    job: Job
    status: CharacterStatus


class CharactersListOut(BaseModel):
    items: List[CharacterSummaryOut]
    page: PageOut
