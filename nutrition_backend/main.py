# -*- coding: utf-8 -*-
"""Nutrition backend — FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .normalizer.api import router as normalizer_router


def create_app() -> FastAPI:
    logging.getLogger("nutrition_backend").setLevel(settings.log_level)

    app = FastAPI(
        title="Nutrition Backend",
        description="Normalization of meal, ingredient and recipe analysis from generative models.",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(normalizer_router)

    @app.get("/api/health")
    def health() -> dict:
        return {"ok": True}

    return app


app = create_app()
