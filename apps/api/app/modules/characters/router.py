from __future__ import annotations

from fastapi import APIRouter, Path, Query, Request, Response

from .schemas import CharacterCreateIn, CharacterOut, CharactersListOut, CharacterUpdateIn, PageOut
from .service import CharacterService

router = APIRouter(tags=["characters"])


def _service(request: Request) -> CharacterService:
    return CharacterService(request.app.state.store)


def _request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _clamp_limit(raw: int | None) -> int:
    if raw is None:
        return 50
    try:
        v = int(raw)
    except Exception:
        return 50
    if v < 1:
        v = 1
    if v > 200:
        v = 200
    return v


def _clamp_offset(raw: int | None) -> int:
    if raw is None:
        return 0
    try:
        v = int(raw)
    except Exception:
        return 0
    return max(v, 0)


@router.get("/characters", response_model=CharactersListOut)
def api_list_characters(
    request: Request,
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> CharactersListOut:
    lim = _clamp_limit(limit)
    off = _clamp_offset(offset)
    items, total = _service(request).list_characters(limit=lim, offset=off)
    has_more = (off + lim) < total
    return CharactersListOut(items=items, page=PageOut(offset=off, limit=lim, total=total, has_more=has_more))


@router.post("/characters", response_model=CharacterOut, status_code=201)
def api_create_character(body: CharacterCreateIn, request: Request) -> CharacterOut:
    attributes = body.attributes.model_dump(exclude_none=True) if body.attributes else None
    return _service(request).create_character(
        name=body.name,
        job=body.job,
        attributes=attributes,
        request_id=_request_id(request),
    )


@router.get("/characters/{character_id}", response_model=CharacterOut)
def api_get_character(request: Request, character_id: int = Path(...)) -> CharacterOut:
    return _service(request).get_character(character_id)


@router.api_route("/characters/{character_id}", methods=["PUT", "PATCH"], response_model=CharacterOut)
def api_update_character(character_id: int, body: CharacterUpdateIn, request: Request) -> CharacterOut:
    return _service(request).update_character(
        character_id,
        body.model_dump(exclude_none=True),
        request_id=_request_id(request),
    )


@router.delete("/characters/{character_id}", status_code=204)
def api_delete_character(character_id: int, request: Request) -> Response:
    _service(request).delete_character(character_id, request_id=_request_id(request))
    return Response(status_code=204)
