"""
FastAPI Application Factory

Builds the HTTP surface over already-wired components. The app holds
the components on app.state; request handlers receive them through
dependencies, never through module globals.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import ledger
from ledger.api.errors import register_error_handlers
from ledger.api.routes import auth_router, health_router, transactions_router
from ledger.orchestrator import AppComponents, create_app_components


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        components: Pre-built components (tests pass in-memory ones).
                    Built from settings when omitted.
    """
    components = components or create_app_components()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        components.close()

    app = FastAPI(
        title="Personal Ledger API",
        version=ledger.__version__,
        lifespan=lifespan,
    )
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(transactions_router)
    return app
