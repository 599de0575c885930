from fastapi import FastAPI

from . import admin, auth, health, questions, responder, users


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(questions.router)
    app.include_router(responder.router)
    app.include_router(admin.router)
    app.include_router(users.router)
