"""
Encore Rules Service - FastAPI Application
Hosts in-memory game sessions for the board UI and exposes the pure rule
queries (move validity, board validation)
"""

import logging
import os
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from .boards import OFFICIAL_BOARDS, get_board_configuration, list_board_ids, validate_board
from .config import get_settings
from .core.logging_config import configure_third_party_loggers, setup_logging
from .errors import EncoreError, RulesViolationError
from .models import (
    BoardConfiguration,
    BoardValidationResult,
    GameColor,
    GameState,
    Position,
    Square,
    Standing,
)
from .rules.scoring import standings
from .rules.validator import validate_move
from .scheduler import AsyncioScheduler
from .session import GameSession

settings = get_settings()

setup_logging("encore", level=settings.log_level)
configure_third_party_loggers()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Encore Rules Service",
    description="Rules engine and AI opponents for the Encore dice game",
    version="1.0.0",
)

scheduler = AsyncioScheduler()
sessions: Dict[str, GameSession] = {}


class CreateGameRequest(BaseModel):
    player_names: List[str] = Field(alias="playerNames", min_length=1)
    ai_players: Optional[List[bool]] = Field(None, alias="aiPlayers")
    board_ids: Optional[List[Optional[str]]] = Field(None, alias="boardIds")

    class Config:
        populate_by_name = True


class SelectDieRequest(BaseModel):
    die_id: str = Field(alias="dieId")

    class Config:
        populate_by_name = True


class ProposeMoveRequest(BaseModel):
    squares: List[Position]


class IsValidMoveRequest(BaseModel):
    squares: List[Position]
    color: GameColor
    board: List[List[Square]]


class IsValidMoveResponse(BaseModel):
    valid: bool
    rule: Optional[str] = None
    reason: Optional[str] = None


class GameResponse(BaseModel):
    """Snapshot returned by every game endpoint.

    ``accepted`` is False when the engine ignored the request (wrong
    phase, used die, illegal squares); the state is then unchanged.
    """
    accepted: bool = True
    state: GameState
    standings: List[Standing] = Field(default_factory=list)


def _snapshot(session: GameSession, accepted: bool = True) -> GameResponse:
    return GameResponse(
        accepted=accepted,
        state=session.state,
        standings=standings(session.state),
    )


def _get_session(game_id: str) -> GameSession:
    session = sessions.get(game_id)
    if session is None or session.state is None:
        raise HTTPException(status_code=404, detail=f"Unknown game: {game_id}")
    return session


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "Encore Rules Service",
        "status": "running",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check for container orchestration"""
    return {"status": "healthy", "games": len(sessions)}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.post("/games", response_model=GameResponse)
async def create_game(request: CreateGameRequest):
    session = GameSession(scheduler, settings)
    try:
        state = session.new_game(
            request.player_names, request.ai_players, request.board_ids
        )
    except EncoreError as e:
        logger.info(f"Game setup rejected: {e}")
        raise HTTPException(status_code=400, detail=e.to_dict())
    sessions[state.id] = session
    return _snapshot(session)


@app.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game_id: str):
    return _snapshot(_get_session(game_id))


@app.delete("/games/{game_id}")
async def delete_game(game_id: str):
    session = _get_session(game_id)
    session.cancel_timer()
    del sessions[game_id]
    return {"deleted": game_id}


@app.post("/games/{game_id}/roll", response_model=GameResponse)
async def roll_dice(game_id: str):
    session = _get_session(game_id)
    before = session.state
    return _snapshot(session, session.roll() is not before)


@app.post("/games/{game_id}/select-die", response_model=GameResponse)
async def select_die(game_id: str, request: SelectDieRequest):
    session = _get_session(game_id)
    before = session.state
    return _snapshot(session, session.select_die(request.die_id) is not before)


@app.post("/games/{game_id}/move", response_model=GameResponse)
async def propose_move(game_id: str, request: ProposeMoveRequest):
    session = _get_session(game_id)
    before = session.state
    return _snapshot(session, session.propose_move(request.squares) is not before)


@app.post("/games/{game_id}/skip", response_model=GameResponse)
async def skip_turn(game_id: str):
    session = _get_session(game_id)
    before = session.state
    return _snapshot(session, session.skip() is not before)


@app.post("/games/{game_id}/switch", response_model=GameResponse)
async def complete_player_switch(game_id: str):
    session = _get_session(game_id)
    before = session.state
    return _snapshot(session, session.complete_switch() is not before)


@app.get("/boards")
async def get_boards():
    return {
        "boardIds": list_board_ids(),
        "boards": [
            config.model_dump(by_alias=True) for config in OFFICIAL_BOARDS.values()
        ],
    }


@app.get("/boards/{board_id}", response_model=BoardConfiguration)
async def get_board(board_id: str):
    config = get_board_configuration(board_id)
    if config is None:
        raise HTTPException(status_code=404, detail=f"Unknown board: {board_id}")
    return config


@app.post("/boards/validate", response_model=BoardValidationResult)
async def post_validate_board(config: BoardConfiguration):
    return validate_board(config)


@app.post("/rules/is-valid-move", response_model=IsValidMoveResponse)
async def is_valid_move(request: IsValidMoveRequest):
    """Pure move check against a caller-supplied board; nothing is stored."""
    try:
        validate_move(request.squares, request.color, request.board)
    except RulesViolationError as e:
        return IsValidMoveResponse(valid=False, rule=e.rule_ref, reason=e.message)
    return IsValidMoveResponse(valid=True)


if __name__ == "__main__":
    import uvicorn

    port_str = os.getenv("ENCORE_PORT", "8001")
    try:
        port = int(port_str)
    except ValueError:
        port = 8001

    uvicorn.run(app, host="0.0.0.0", port=port)
