from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse

from asc_grid.parsing import RequestState
from api.dependencies import get_cache, resolve_grid_path

router = APIRouter(prefix="/grids", tags=["grids"])


def _grid_path(path: str) -> Path:
    try:
        return resolve_grid_path(path)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("", status_code=202)
def submit_grid(path: str = Body(..., embed=True)):
    request_id = get_cache().submit(_grid_path(path))
    return {"request_id": request_id, "state": RequestState.PENDING.value}


@router.post("/parse")
def parse_grid_now(path: str = Body(..., embed=True)):
    # ParseError is turned into a 422 by the app-level handler.
    return get_cache().parse_sync(_grid_path(path)).to_outputs()


@router.get("/{request_id}")
def get_grid(request_id: str):
    state, grid = get_cache().poll(request_id)
    if state == RequestState.PENDING:
        return JSONResponse(status_code=202, content={"request_id": request_id, "state": state.value})
    if grid is None:
        raise HTTPException(status_code=404, detail=f"No result for request: {request_id}")
    return grid.to_outputs()
