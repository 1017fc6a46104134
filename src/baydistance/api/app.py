# src/baydistance/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance, mounts static assets, and serves the web UI.
Business logic lives in `baydistance.api.routes`, `baydistance.ranking` and
`baydistance.recommender`.
"""

from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.cors import CORSMiddleware

from baydistance.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="BayDistance API", version="0.1.0")

# CORS (dev-friendly): allow local frontends to call this API.
# - BAYDISTANCE_CORS_ORIGINS="http://localhost:3000,http://127.0.0.1:3000"
# - BAYDISTANCE_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("BAYDISTANCE_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("BAYDISTANCE_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)

BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = BASE_DIR / "web" / "templates"
STATIC_DIR = BASE_DIR / "web" / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    """Serve the single-page web UI."""
    return templates.TemplateResponse(request, "index.html", {"title": "Bay Area Cities Distance Calculator"})
