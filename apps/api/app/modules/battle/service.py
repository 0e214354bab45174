from __future__ import annotations

from typing import Any, Dict, Optional

from app.core.errors import CharacterNotFound, CharacterUpdateFailed, SameCombatant
from app.core.observability import emit
from app.modules.characters.entity import Character
from app.modules.characters.store import CharacterStore

from .engine import BattleEngine, Round


def _combatant(c: Character) -> Dict[str, Any]:
    return {"id": c.id, "name": c.name, "health": c.attributes.health}


def _round_out(r: Round) -> Dict[str, Any]:
    return {
        "number": r.number,
        "attacker_id": r.attacker_id,
        "defender_id": r.defender_id,
        "attacker_speed": r.attacker_speed,
        "defender_speed": r.defender_speed,
        "damage": r.attack.damage,
        "counter_damage": r.counter.damage if r.counter else None,
    }


class BattleService:
    def __init__(self, store: CharacterStore, engine: Optional[BattleEngine] = None) -> None:
        self.store = store
        self.engine = engine or BattleEngine()

    def _find(self, character_id: int) -> Character:
        c = self.store.find_by_id(character_id)
        if c is None:
            raise CharacterNotFound(character_id)
        return c

    def start_battle(self, character_id_1: int, character_id_2: int, request_id: Optional[str] = None) -> Dict[str, Any]:
        if character_id_1 == character_id_2:
            raise SameCombatant(character_id_1)

        # both characters stay locked from lookup until their health is written back
        with self.store.lock:
            p1 = self._find(character_id_1)
            p2 = self._find(character_id_2)
            self.engine.check_ready(p1, p2)

            emit(
                "info",
                "battle.start",
                f"{p1.name} vs {p2.name}",
                request_id,
                __name__,
                character_ids=[p1.id, p2.id],
            )
            result = self.engine.resolve(p1, p2)

            for c in (p1, p2):
                if not self.store.update(c.id, {"health": c.attributes.health}):
                    raise CharacterUpdateFailed(c.id)

        emit(
            "info",
            "battle.end",
            f"{result.winner.name} wins after {len(result.rounds)} rounds",
            request_id,
            __name__,
            winner_id=result.winner.id,
            loser_id=result.loser.id,
            rounds=len(result.rounds),
        )
        return {
            "log": result.log,
            "winner": _combatant(result.winner),
            "loser": _combatant(result.loser),
            "rounds": [_round_out(r) for r in result.rounds],
        }
