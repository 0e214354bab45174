from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .stats import Job


class ModifierOut(BaseModel):
    multipliers: Dict[str, float] = Field(default_factory=dict)
    description: Optional[str] = None
    value: float


class JobOut(BaseModel):
    job: Job
    hp: float
    strength: float
    dexterity: float
    intelligence: float
    attack_modifier: ModifierOut
    speed_modifier: ModifierOut


class JobsListOut(BaseModel):
    items: List[JobOut]
