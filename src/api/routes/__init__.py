"""API route registration."""

from fastapi import FastAPI

from src.api.routes import brands, categories, events, products, stats, system


def include_api_routes(app: FastAPI) -> None:
    """Attach all API routers to the application."""

    app.include_router(system.router)
    app.include_router(products.router)
    app.include_router(categories.router)
    app.include_router(brands.router)
    app.include_router(stats.router)
    app.include_router(events.router)
