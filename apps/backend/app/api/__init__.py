"""Router registration for the ledger API."""

from fastapi import FastAPI

from . import entries, export, settings


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    # export.xlsx는 /entries/{entry_id} 보다 먼저 등록되어야 한다
    app.include_router(export.router, prefix="/api")
    app.include_router(entries.router, prefix="/api")
    app.include_router(settings.router, prefix="/api")
