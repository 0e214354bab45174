from __future__ import annotations

import random
from typing import Iterable, List

import pytest
from fastapi.testclient import TestClient

from app.core.db import new_engine
from app.main import app
from app.modules.characters.service import CharacterService
from app.modules.characters.store import CharacterStore


class ScriptedRandom:
    """Stand-in for random.Random that replays fixed draws."""

    def __init__(self, values: Iterable[float], choice_index: int = 0) -> None:
        self.values: List[float] = list(values)
        self.choice_index = choice_index
        self.choices = 0

    def random(self) -> float:
        if not self.values:
            raise AssertionError("scripted draws exhausted")
        return self.values.pop(0)

    def choice(self, seq):
        self.choices += 1
        return seq[self.choice_index]


@pytest.fixture
def store() -> CharacterStore:
    return CharacterStore(new_engine("sqlite://"))


@pytest.fixture
def characters(store: CharacterStore) -> CharacterService:
    return CharacterService(store)


@pytest.fixture
def client(store: CharacterStore):
    prev = (app.state.store, app.state.battle_rng)
    app.state.store = store
    app.state.battle_rng = random.Random(1234)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.state.store, app.state.battle_rng = prev


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
