from __future__ import annotations

from typing import Any, Dict, List

from .stats import BASE_STATS, Job, Modifier, compute_modifier


def _modifier_out(stats: Dict[str, float], modifier: Modifier) -> Dict[str, Any]:
    d = modifier.to_dict()
    d["value"] = compute_modifier(stats, modifier)
    return d


def list_jobs() -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for job in Job:
        base = BASE_STATS[job]
        stats = {"strength": base.strength, "dexterity": base.dexterity, "intelligence": base.intelligence}
        items.append(
            {
                "job": job,
                "hp": base.hp,
                **stats,
                "attack_modifier": _modifier_out(stats, base.attack_modifier),
                "speed_modifier": _modifier_out(stats, base.speed_modifier),
            }
        )
    return items
