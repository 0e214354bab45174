"""
Domain errors surfaced through the error envelope (see app.main).

Each error carries the envelope fields: error code, message, status_code, details.
"""
from __future__ import annotations

from typing import Any, List, Optional


class DomainError(Exception):
    error = "bad_request"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class CharacterNotFound(DomainError):
    error = "not_found"
    status_code = 404

    def __init__(self, character_id: int) -> None:
        super().__init__(f"Character with ID {character_id} not found", {"character_id": character_id})
        self.character_id = character_id


class CharacterAlreadyDead(DomainError):
    error = "already_dead"

    def __init__(self, name: str, character_id: Optional[int] = None) -> None:
        super().__init__(f"{name} is already dead and cannot battle", {"character_id": character_id, "name": name})
        self.name = name


class SameCombatant(DomainError):
    error = "same_combatant"

    def __init__(self, character_id: int) -> None:
        super().__init__("A character cannot battle itself", {"character_id": character_id})


class InvalidCharacterName(DomainError):
    error = "invalid_name"

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors), {"errors": list(errors)})
        self.errors = list(errors)


class InvalidAttributes(DomainError):
    error = "invalid_attributes"


class BattleCannotConclude(DomainError):
    error = "battle_cannot_conclude"


class CharacterUpdateFailed(DomainError):
    error = "update_failed"
    status_code = 409

    def __init__(self, character_id: int) -> None:
        super().__init__(f"Failed to update character with ID {character_id}", {"character_id": character_id})
