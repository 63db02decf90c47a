"""
Case Assets Studio Backend: FastAPI application entry point.

This module initializes the FastAPI application that manages the generated
assets of case studies. It configures CORS and logging, connects to the
external asset store, and registers the case and asset routes.

The API acts as the backend of the asset management screen: it classifies
and renders assets, and drives their editing and regeneration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from case_assets.core.config import get_settings
from case_assets.core.logging_config import configure_logging
from case_assets.db.client import init_asset_store
from case_assets.routes import assets_routes, cases_routes

# ------------------------------------------------------------------------------
# Application initialization
# ------------------------------------------------------------------------------

app = FastAPI(
    title="Case Assets Studio",
    description="API to render, edit and regenerate generated case-study assets",
    version="0.1.0"
)

# ------------------------------------------------------------------------------
# Middleware configuration
# ------------------------------------------------------------------------------

# CORS middleware: allows cross-origin requests.
# Adjust 'allow_origins' for production deployment.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------------------
# Application startup events
# ------------------------------------------------------------------------------

@app.on_event("startup")
async def startup_asset_store():
    """
    Configure logging and the asset store client on application startup.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    init_asset_store()

# ------------------------------------------------------------------------------
# API routes registration
# ------------------------------------------------------------------------------

app.include_router(assets_routes.router, prefix="/cases", tags=["Assets"])
app.include_router(cases_routes.router, prefix="/cases", tags=["Cases"])
