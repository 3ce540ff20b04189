from fastapi import FastAPI

from . import assessments, careers, discovery, goals, health, portfolio, profile, quiz


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(profile.router)
    app.include_router(assessments.router)
    app.include_router(quiz.router)
    app.include_router(careers.router)
    app.include_router(goals.router)
    app.include_router(portfolio.router)
    app.include_router(discovery.router)
