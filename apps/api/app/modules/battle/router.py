from __future__ import annotations

from fastapi import APIRouter, Request

from .engine import BattleEngine
from .schemas import BattleIn, BattleOut
from .service import BattleService

router = APIRouter(tags=["battle"])


def _service(request: Request) -> BattleService:
    st = request.app.state
    return BattleService(st.store, BattleEngine(rng=st.battle_rng, max_speed_redraws=st.battle_max_speed_redraws))


@router.post("/battle", response_model=BattleOut)
def api_start_battle(body: BattleIn, request: Request) -> BattleOut:
    rid = getattr(getattr(request, "state", None), "request_id", None)
    return _service(request).start_battle(body.character_id_1, body.character_id_2, request_id=rid)
