"""FastAPI app: the screens of the shared device call these routes for one game session."""

import random
from threading import Lock

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imposter.errors import ConfigurationError, NoGameError, PersistenceError, PreconditionError
from imposter.state import GameConfig
from imposter.words import WordSource
from api import settings
from api.game_store import FileGameStore, GameStore, MemoryGameStore
from api.models import (
    FinalRolePublic,
    GameCreateRequest,
    GameStateResponse,
    PlayerNamesRequest,
    ReplayRequest,
    RoleRevealResponse,
    VoteRequest,
    game_record_to_public,
)
from api.session import GameSession


app = FastAPI(title="Imposter API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

_session: GameSession | None = None
_session_lock = Lock()


def _build_store() -> GameStore:
    store_dir = settings.get_store_dir()
    if store_dir is None:
        return MemoryGameStore()
    return FileGameStore(store_dir)


def get_session() -> GameSession:
    """The single game session of this device; created on first use from env settings."""
    global _session
    with _session_lock:
        if _session is None:
            _session = GameSession(
                store=_build_store(),
                words=WordSource.from_file(settings.get_words_path()),
                rng=random.Random(settings.get_seed()),
            )
        return _session


@app.exception_handler(ConfigurationError)
async def _configuration_error(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NoGameError)
async def _no_game(request: Request, exc: NoGameError):
    return JSONResponse(status_code=404, content={"detail": "Game not found"})


@app.exception_handler(PreconditionError)
async def _precondition_error(request: Request, exc: PreconditionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def _persistence_error(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=503, content={"detail": f"Game storage error: {exc}"})


def _public(session: GameSession) -> GameStateResponse:
    record, saved = session.snapshot()
    return game_record_to_public(record, saved=saved)


@app.get("/game", response_model=GameStateResponse, tags=["Game"], summary="Get game state")
def get_game(session: GameSession = Depends(get_session)):
    """Get public game state."""
    return _public(session)


@app.post("/game", response_model=GameStateResponse, tags=["Game"], summary="Create game")
def create_game(body: GameCreateRequest, session: GameSession = Depends(get_session)):
    """Start a new game with the given table setup. Replaces any current game."""
    config = GameConfig(
        player_count=body.player_count,
        imposter_count=body.imposter_count,
        knowledge_level=body.knowledge_level,
    )
    session.configure(config)
    return _public(session)


@app.put("/game/players", response_model=GameStateResponse, tags=["Game"], summary="Set player names")
def set_players(body: PlayerNamesRequest, session: GameSession = Depends(get_session)):
    """Set the player names in turn order (before roles are assigned)."""
    session.set_player_names(body.names)
    return _public(session)


@app.post("/game/roles", response_model=GameStateResponse, tags=["Game"], summary="Assign roles")
def assign_roles(session: GameSession = Depends(get_session)):
    """Deal impostor/crewmate roles to the named players."""
    session.assign_roles()
    return _public(session)


@app.get("/game/roles/{index}", response_model=RoleRevealResponse, tags=["Game"], summary="Reveal a role")
def reveal_role(index: int, session: GameSession = Depends(get_session)):
    """Role (and the word, for crewmates) of the active player at index. Meant for one pair of eyes."""
    reveal = session.reveal_role(index)
    return RoleRevealResponse(player_name=reveal.player_name, role=reveal.role.value, word=reveal.word)


@app.post("/game/turn", response_model=GameStateResponse, tags=["Game"], summary="Next player")
def next_player(session: GameSession = Depends(get_session)):
    """Advance to the next player's turn; wraps into a new round."""
    session.advance_turn()
    return _public(session)


@app.post("/game/vote", response_model=GameStateResponse, tags=["Game"], summary="Vote a player out")
def vote(body: VoteRequest, session: GameSession = Depends(get_session)):
    """Eliminate the voted player and check the win condition."""
    session.resolve_vote(body.player_name)
    return _public(session)


@app.post("/game/next-round", response_model=GameStateResponse, tags=["Game"], summary="Continue")
def next_round(session: GameSession = Depends(get_session)):
    """Continue with the next round after a vote that did not end the game."""
    session.next_round()
    return _public(session)


@app.post("/game/replay", response_model=GameStateResponse | None, tags=["Game"], summary="Play again")
def replay(body: ReplayRequest, session: GameSession = Depends(get_session)):
    """Replay with the same players (new word, new roles), or discard the game."""
    if not body.same_players:
        session.replay_new()
        return None
    session.replay_same_players()
    return _public(session)


@app.get("/game/results", response_model=list[FinalRolePublic], tags=["Game"], summary="Final roles")
def results(session: GameSession = Depends(get_session)):
    """Everyone's role, eliminated players included. Only once the game is over."""
    record = session.require_record()
    if not record.ended:
        raise PreconditionError("Results are only available once the game is over")
    return [
        FinalRolePublic(player_name=r.player_name, role=r.role.value, eliminated=r.eliminated)
        for r in session.final_roles()
    ]


@app.post("/game/save", response_model=GameStateResponse, tags=["Game"], summary="Retry save")
def save(session: GameSession = Depends(get_session)):
    """Store the current game again after a failed save."""
    session.save()
    return _public(session)


@app.delete("/game", tags=["Game"], summary="Reset")
def reset(session: GameSession = Depends(get_session)):
    """Discard the current game."""
    session.replay_new()
    return {"status": "reset"}


@app.get("/health", tags=["System"], summary="Health check")
def health():
    return {"status": "ok"}
