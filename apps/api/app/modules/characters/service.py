from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.core.errors import CharacterNotFound, InvalidAttributes, InvalidCharacterName
from app.core.observability import emit
from app.modules.jobs.stats import Job

from .entity import MODIFIER_FIELDS, Attributes, Character
from .store import CharacterStore

NAME_MIN_LENGTH = 4
NAME_MAX_LENGTH = 15
_NAME_RE = re.compile(r"[A-Za-z_]+")


def validate_character_name(name: str) -> None:
    errors: List[str] = []
    if len(name) < NAME_MIN_LENGTH or len(name) > NAME_MAX_LENGTH:
        errors.append(f"Character name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")
    if not _NAME_RE.fullmatch(name):
        errors.append("Character name can only contain letters and underscores")
    if errors:
        raise InvalidCharacterName(errors)


def validate_attributes(attributes: Attributes) -> None:
    # 0 <= health <= hp must hold for every stored character
    if attributes.hp < 0:
        raise InvalidAttributes("hp cannot be negative", {"hp": attributes.hp})
    if attributes.health < 0 or attributes.health > attributes.hp:
        raise InvalidAttributes(
            "health must be between 0 and hp",
            {"health": attributes.health, "hp": attributes.hp},
        )
    for field_name in MODIFIER_FIELDS:
        modifier = getattr(attributes, field_name)
        negative = {k: v for k, v in modifier.multipliers.items() if v < 0}
        if negative:
            raise InvalidAttributes(
                f"{field_name} multipliers cannot be negative",
                {"modifier": field_name, "multipliers": negative},
            )


def _summary(c: Character) -> Dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "job": c.job,
        "status": "alive" if c.is_alive() else "dead",
    }


class CharacterService:
    def __init__(self, store: CharacterStore) -> None:
        self.store = store

    def list_characters(self, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        items = self.store.find_all(limit=limit, offset=offset)
        return [_summary(c) for c in items], self.store.count()

    def get_character_entity(self, character_id: int) -> Character:
        c = self.store.find_by_id(character_id)
        if c is None:
            raise CharacterNotFound(character_id)
        return c

    def get_character(self, character_id: int) -> Dict[str, Any]:
        return self.get_character_entity(character_id).get_formatted_character()

    def create_character(
        self,
        name: str,
        job: Job,
        attributes: Optional[Mapping[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        validate_character_name(name)
        merged = Attributes.for_job(job).merged(attributes)
        validate_attributes(merged)

        c = self.store.create(Character(name=name, job=job, attributes=merged))
        emit("info", "character.created", f"{c.name} ({c.job.value})", request_id, __name__, character_id=c.id)
        return c.get_formatted_character()

    def update_character(
        self,
        character_id: int,
        patch: Mapping[str, Any],
        request_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Unspecified fields keep their previous value; attributes are overlaid
        field by field. hp is fixed at creation and a job change keeps the
        stored attributes as they are.
        """
        name = patch.get("name")
        if name is not None:
            validate_character_name(name)

        with self.store.lock:
            c = self.get_character_entity(character_id)
            if name is not None:
                c.name = name
            if patch.get("job") is not None:
                c.job = Job(patch["job"])
            attributes = dict(patch.get("attributes") or {})
            attributes.pop("hp", None)
            c.attributes = c.attributes.merged(attributes)
            validate_attributes(c.attributes)

            if not self.store.replace(c):
                raise CharacterNotFound(character_id)

        emit("info", "character.updated", c.name, request_id, __name__, character_id=character_id)
        return c.get_formatted_character()

    def delete_character(self, character_id: int, request_id: Optional[str] = None) -> None:
        if not self.store.delete(character_id):
            raise CharacterNotFound(character_id)
        emit("info", "character.deleted", f"character {character_id} deleted", request_id, __name__, character_id=character_id)
