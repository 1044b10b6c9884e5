#!/usr/bin/env python3
"""FastAPI leaderboard service: ranked best scores keyed by player name."""

from __future__ import annotations

import sqlite3
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import load_config
from .logger import get_logger, setup_logging
from .server_db import Database

logger = get_logger("server")


class ScoreIn(BaseModel):
    name: str = Field(min_length=1)
    score: int = Field(ge=0)
    date: Optional[str] = None   # Informational; the server stamps its own time


def create_app(db: Database) -> FastAPI:
    app = FastAPI(title="Cyber Fish Leaderboard")
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/scores")
    def get_scores():
        try:
            return [record.to_dict() for record in db.get_scores()]
        except sqlite3.Error:
            logger.exception("Failed to fetch scores")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch scores"})

    @app.post("/api/scores", status_code=201)
    def post_score(body: ScoreIn):
        try:
            db.upsert_score(body.name, body.score)
        except sqlite3.Error:
            logger.exception("Failed to save score for %s", body.name)
            return JSONResponse(status_code=500, content={"error": "Failed to save score"})
        return {"message": "Score saved successfully"}

    @app.get("/api/scores/check-name")
    def check_name(name: str = ""):
        try:
            return {"exists": db.name_exists(name)}
        except sqlite3.Error:
            logger.exception("Failed to check name %r", name)
            return JSONResponse(status_code=500, content={"error": "Failed to check name"})

    return app


def start_server():
    import uvicorn

    config = load_config()
    setup_logging(config.log_level, config.log_file)
    db = Database(config.server.db_file)
    logger.info("Server is running on port %d (db: %s)",
                config.server.port, config.server.db_file)
    try:
        uvicorn.run(create_app(db), host=config.server.host, port=config.server.port)
    finally:
        db.close()


if __name__ == "__main__":
    start_server()
