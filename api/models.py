"""Pydantic request/response models for the API."""

from pydantic import BaseModel, Field, model_validator

from imposter.engine import final_roles
from imposter.rules import MAX_PLAYERS, MIN_IMPOSTERS, MIN_PLAYERS, KnowledgeLevel, max_imposters
from imposter.state import GameRecord

# Validation constants (no magic numbers in validation)
MAX_PLAYER_NAME_LENGTH = 50


class GameCreateRequest(BaseModel):
    """Body for POST /game."""

    player_count: int = Field(default=5, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    imposter_count: int = Field(default=1, ge=MIN_IMPOSTERS, description="At most half of player_count")
    knowledge_level: KnowledgeLevel = Field(
        default=KnowledgeLevel.NONE,
        description="none, little or some: selects the word list",
    )

    @model_validator(mode="after")
    def imposters_at_most_half(self) -> "GameCreateRequest":
        upper = max_imposters(self.player_count)
        if self.imposter_count > upper:
            raise ValueError(
                f"imposter_count ({self.imposter_count}) must be <= {upper} for {self.player_count} players"
            )
        return self


class PlayerNamesRequest(BaseModel):
    """Body for PUT /game/players. Order is the turn order."""

    names: list[str] = Field(..., min_length=MIN_PLAYERS, max_length=MAX_PLAYERS)

    @model_validator(mode="after")
    def names_not_too_long(self) -> "PlayerNamesRequest":
        for name in self.names:
            if len(name) > MAX_PLAYER_NAME_LENGTH:
                raise ValueError(f"player names must be at most {MAX_PLAYER_NAME_LENGTH} characters")
        return self


class VoteRequest(BaseModel):
    """Body for POST /game/vote."""

    player_name: str = Field(..., min_length=1)


class ReplayRequest(BaseModel):
    """Body for POST /game/replay."""

    same_players: bool = Field(
        default=True,
        description="If true, replay with the full original roster; otherwise discard the game",
    )


class PlayerPublic(BaseModel):
    """Roster entry: role only revealed once eliminated or when the game is over."""

    name: str
    active: bool
    role: str | None = Field(default=None, description="Only set for eliminated players or after the game")


class VoteResultPublic(BaseModel):
    voted_player_name: str
    was_impostor: bool


class RoleRevealResponse(BaseModel):
    """What one player sees on the shared device."""

    player_name: str
    role: str
    word: str | None = Field(default=None, description="Secret word; only for crewmates")


class FinalRolePublic(BaseModel):
    player_name: str
    role: str
    eliminated: bool


class GameStateResponse(BaseModel):
    """Public game state for GET /game."""

    player_count: int
    imposter_count: int
    knowledge_level: str
    players: list[str] = Field(description="Active players in turn order")
    roster: list[PlayerPublic] = Field(description="Everyone who started the game")
    roles_assigned: bool
    round: int
    turn_index: int
    current_player: str | None = None
    remaining_imposter_count: int
    remaining_crewmate_count: int
    last_vote_result: VoteResultPublic | None = None
    ended: bool
    winner: str | None = Field(default=None, description="crewmates or impostors when game over")
    secret_word: str | None = Field(default=None, description="Only revealed when the game is over")
    saved: bool = Field(default=True, description="False when the last change could not be persisted")


def game_record_to_public(record: GameRecord, saved: bool = True) -> GameStateResponse:
    """Build public response from a GameRecord; hide roles of active players and the word until the end."""
    if record.roles_assigned:
        roster = [
            PlayerPublic(
                name=r.player_name,
                active=not r.eliminated,
                role=r.role.value if (record.ended or r.eliminated) else None,
            )
            for r in final_roles(record)
        ]
    else:
        roster = [PlayerPublic(name=name, active=True) for name in record.players]

    last_vote = None
    if record.last_vote_result is not None:
        last_vote = VoteResultPublic(
            voted_player_name=record.last_vote_result.voted_player_name,
            was_impostor=record.last_vote_result.was_impostor,
        )

    return GameStateResponse(
        player_count=record.config.player_count,
        imposter_count=record.config.imposter_count,
        knowledge_level=record.config.knowledge_level.value,
        players=list(record.players),
        roster=roster,
        roles_assigned=record.roles_assigned,
        round=record.round,
        turn_index=record.turn_index,
        current_player=record.current_player if record.roles_assigned else None,
        remaining_imposter_count=record.remaining_imposter_count,
        remaining_crewmate_count=record.remaining_crewmate_count if record.roles_assigned else 0,
        last_vote_result=last_vote,
        ended=record.ended,
        winner=record.winner.value if record.winner else None,
        secret_word=record.secret_word if record.ended else None,
        saved=saved,
    )
