"""
Character entity and its attribute bundle.

The entity holds no validation of its own: names and the health range are
checked by CharacterService before anything reaches the store.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from app.modules.jobs.stats import BASE_STATS, STAT_NAMES, Job, Modifier, compute_modifier

MODIFIER_FIELDS = ("attack_modifier", "speed_modifier")


@dataclass
class Attributes:
    hp: float
    health: float
    strength: float
    dexterity: float
    intelligence: float
    attack_modifier: Modifier
    speed_modifier: Modifier

    @classmethod
    def for_job(cls, job: Job) -> "Attributes":
        # new characters start at full health
        base = BASE_STATS[Job(job)]
        return cls(
            hp=base.hp,
            health=base.hp,
            strength=base.strength,
            dexterity=base.dexterity,
            intelligence=base.intelligence,
            attack_modifier=base.attack_modifier,
            speed_modifier=base.speed_modifier,
        )

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def merged(self, patch: Optional[Mapping[str, Any]]) -> "Attributes":
        """
        Overlay `patch` on a copy of these attributes.

        Missing or None entries keep their previous value. A modifier in the
        patch replaces the whole modifier (multipliers and description).
        """
        if not patch:
            return replace(self)
        names = self.field_names()
        changes: Dict[str, Any] = {}
        for key, value in patch.items():
            if key not in names or value is None:
                continue
            if key in MODIFIER_FIELDS and not isinstance(value, Modifier):
                value = Modifier.from_dict(value)
            changes[key] = value
        return replace(self, **changes)

    def stats(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in STAT_NAMES}


@dataclass
class Character:
    name: str
    job: Job
    attributes: Optional[Attributes] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.job = Job(self.job)
        if self.attributes is None:
            self.attributes = Attributes.for_job(self.job)

    def is_alive(self) -> bool:
        return self.attributes.health > 0

    def take_damage(self, amount: float) -> None:
        # health never rises through damage
        self.attributes.health = max(0, self.attributes.health - max(0, amount))

    def can_battle(self) -> bool:
        return self.attributes is not None and self.is_alive()

    def get_attack_modifier(self) -> float:
        return compute_modifier(self.attributes.stats(), self.attributes.attack_modifier)

    def get_speed_modifier(self) -> float:
        return compute_modifier(self.attributes.stats(), self.attributes.speed_modifier)

    def get_formatted_character(self) -> Dict[str, Any]:
        a = self.attributes
        return {
            "id": self.id,
            "name": self.name,
            "job": self.job,
            "current_health": a.health,
            "max_health": a.hp,
            "stats": a.stats(),
            "battle_modifiers": {
                "attack_modifier": {
                    "value": self.get_attack_modifier(),
                    "description": a.attack_modifier.description,
                },
                "speed_modifier": {
                    "value": self.get_speed_modifier(),
                    "description": a.speed_modifier.description,
                },
            },
        }
