"""
Job base stats and the weighted-sum modifier formulas.

Every job is plain data: base attributes plus two modifiers (attack, speed),
each a set of per-attribute multipliers. No job has behaviour of its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

STAT_NAMES = ("strength", "dexterity", "intelligence")


class Job(str, Enum):
    WARRIOR = "Warrior"
    MAGE = "Mage"
    THIEF = "Thief"


@dataclass(frozen=True)
class Modifier:
    multipliers: Mapping[str, float] = field(default_factory=dict)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Modifier":
        multipliers = {k: float(v) for k, v in (data.get("multipliers") or {}).items() if k in STAT_NAMES and v is not None}
        return cls(multipliers=multipliers, description=data.get("description"))

    def to_dict(self) -> Dict[str, Any]:
        return {"multipliers": dict(self.multipliers), "description": self.description}


@dataclass(frozen=True)
class BaseStats:
    hp: float
    strength: float
    dexterity: float
    intelligence: float
    attack_modifier: Modifier
    speed_modifier: Modifier


def compute_modifier(attributes: Mapping[str, float], modifier: Modifier) -> float:
    """Sum of attribute * multiplier over the stats the modifier names."""
    value = 0.0
    for stat in STAT_NAMES:
        coefficient = modifier.multipliers.get(stat)
        if coefficient:
            value += attributes[stat] * coefficient
    return value


BASE_STATS: Dict[Job, BaseStats] = {
    Job.MAGE: BaseStats(
        hp=12,
        strength=5,
        dexterity=6,
        intelligence=10,
        attack_modifier=Modifier(
            multipliers={"strength": 0.2, "dexterity": 0.2, "intelligence": 1.2},
            description="20% of strength + 20% of dexterity + 120% of intelligence",
        ),
        speed_modifier=Modifier(
            multipliers={"dexterity": 0.4, "strength": 0.1},
            description="40% of dexterity + 10% of strength",
        ),
    ),
    Job.THIEF: BaseStats(
        hp=15,
        strength=4,
        dexterity=10,
        intelligence=4,
        attack_modifier=Modifier(
            multipliers={"strength": 0.25, "dexterity": 1, "intelligence": 0.25},
            description="25% of strength + 100% of dexterity + 25% of intelligence",
        ),
        speed_modifier=Modifier(
            multipliers={"dexterity": 0.8},
            description="80% of dexterity",
        ),
    ),
    Job.WARRIOR: BaseStats(
        hp=20,
        strength=10,
        dexterity=5,
        intelligence=5,
        attack_modifier=Modifier(
            multipliers={"strength": 0.8, "dexterity": 0.2},
            description="80% of strength + 20% of dexterity",
        ),
        speed_modifier=Modifier(
            multipliers={"dexterity": 0.6, "intelligence": 0.2},
            description="60% of dexterity + 20% of intelligence",
        ),
    ),
}
