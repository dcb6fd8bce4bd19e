from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import get_cors_origins
from api.routes.grids import router as grids_router
from asc_grid.parsing import ParseError


async def parse_error_response(request: Request, exc: ParseError) -> JSONResponse:
    # Only the kind and position go back to the client; messages quote file contents.
    return JSONResponse(status_code=422, content={"error": exc.kind, "line_number": exc.line_number})


def create_app() -> FastAPI:
    app = FastAPI(title="ASC Grid API", version="0.1.0")
    origins = get_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ParseError, parse_error_response)
    app.include_router(grids_router)

    @app.get("/healthz")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
