"""Squad snapshot models supplied by the roster collaborator."""

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import InvariantViolationError
from .enums import Position


class PositionEligibility(BaseModel):
    """Which on-field roles a player may replace."""

    model_config = ConfigDict(frozen=True)

    goalkeeper: bool = False
    defender: bool = False
    midfielder: bool = False
    forward: bool = False

    @classmethod
    def for_role(cls, role: Union[Position, str]) -> "PositionEligibility":
        """Eligibility covering exactly one role."""
        return cls(**{Position(role).value: True})

    @classmethod
    def full(cls) -> "PositionEligibility":
        return cls(goalkeeper=True, defender=True, midfielder=True, forward=True)

    @classmethod
    def none(cls) -> "PositionEligibility":
        return cls()

    @classmethod
    def from_positions(cls, positions: Iterable[Union[Position, str]]) -> "PositionEligibility":
        return cls(**{Position(p).value: True for p in positions})

    def positions(self) -> Tuple[Position, ...]:
        return tuple(p for p in Position if getattr(self, p.value))

    def has_any(self) -> bool:
        return bool(self.positions())

    def allows(self, role: Optional[Position]) -> bool:
        """Whether this player can fill a slot with the given role.

        A slot without a role is an outfield slot: any of defender, midfielder
        or forward qualifies, goalkeeper alone does not.
        """
        if role is None:
            return self.defender or self.midfielder or self.forward
        return getattr(self, Position(role).value)


class SquadPlayer(BaseModel):
    """Opaque player reference plus role and eligibility."""

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., min_length=1, description="Roster player identifier")
    name: str = Field(..., description="Display name")
    position: Optional[Position] = Field(None, description="On-field role when starting on field")
    eligibility: PositionEligibility = Field(..., description="Roles this player may replace")

    @model_validator(mode='before')
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        """Accept a bare id and derive name and eligibility when absent."""
        if isinstance(data, str):
            data = {"player_id": data}
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("name"):
                data["name"] = data.get("player_id")
            if data.get("eligibility") is None:
                position = data.get("position")
                if position is not None:
                    data["eligibility"] = PositionEligibility.for_role(position)
                else:
                    data["eligibility"] = PositionEligibility.full()
        return data

    @field_validator('eligibility', mode='before')
    @classmethod
    def coerce_eligibility(cls, v: Any) -> Any:
        """Allow eligibility to be given as a list of role names."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return PositionEligibility.from_positions(v)
        return v


PlayerLike = Union[SquadPlayer, str, Mapping[str, Any]]


def as_squad_players(
    items: Iterable[PlayerLike],
    player_names: Optional[Mapping[str, str]] = None,
) -> Tuple[SquadPlayer, ...]:
    """Normalize ids, dicts or SquadPlayer instances into a tuple of SquadPlayer."""
    names = player_names or {}
    players = []
    for item in items:
        if isinstance(item, SquadPlayer):
            players.append(item)
        elif isinstance(item, str):
            players.append(SquadPlayer(player_id=item, name=names.get(item) or item))
        else:
            players.append(SquadPlayer.model_validate(item))
    return tuple(players)


def ensure_unique_ids(field: Sequence[SquadPlayer], bench: Sequence[SquadPlayer]) -> None:
    """Raise if any id appears twice across field and bench."""
    seen = set()
    for player in (*field, *bench):
        if player.player_id in seen:
            raise InvariantViolationError("duplicate player id in squad", player_id=player.player_id)
        seen.add(player.player_id)


class SquadSnapshot(BaseModel):
    """Immutable engine input for one scheduling run."""

    model_config = ConfigDict(frozen=True)

    field_players: Tuple[SquadPlayer, ...] = Field(..., description="Players starting on field, in queue order")
    bench_players: Tuple[SquadPlayer, ...] = Field(default=(), description="Players starting on the bench, in queue order")
    total_match_minutes: int = Field(..., ge=0, description="Sum of both halves")
    max_simultaneous_subs: int = Field(..., ge=0, description="Cap on substitutions per round")

    @field_validator('field_players', 'bench_players', mode='before')
    @classmethod
    def coerce_players(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return as_squad_players(v)
        return v

    @model_validator(mode='after')
    def check_unique_ids(self) -> "SquadSnapshot":
        seen = set()
        for player in self.all_players:
            if player.player_id in seen:
                raise ValueError(f"duplicate player id in squad: {player.player_id}")
            seen.add(player.player_id)
        return self

    @classmethod
    def from_ids(
        cls,
        field_ids: Sequence[str],
        bench_ids: Sequence[str],
        total_match_minutes: int,
        max_simultaneous_subs: int,
        player_names: Optional[Mapping[str, str]] = None,
        eligibility: Optional[Mapping[str, Union[PositionEligibility, Iterable[str]]]] = None,
        positions: Optional[Mapping[str, Union[Position, str]]] = None,
    ) -> "SquadSnapshot":
        """Build a snapshot from id lists plus optional lookup tables."""
        names = player_names or {}
        elig = eligibility or {}
        roles = positions or {}

        def build(pid: str) -> SquadPlayer:
            return SquadPlayer.model_validate({
                "player_id": pid,
                "name": names.get(pid),
                "position": roles.get(pid),
                "eligibility": elig.get(pid),
            })

        return cls(
            field_players=tuple(build(pid) for pid in field_ids),
            bench_players=tuple(build(pid) for pid in bench_ids),
            total_match_minutes=total_match_minutes,
            max_simultaneous_subs=max_simultaneous_subs,
        )

    @classmethod
    def from_halves(
        cls,
        field_players: Sequence[PlayerLike],
        bench_players: Sequence[PlayerLike],
        minutes_per_half: int,
        max_simultaneous_subs: int,
    ) -> "SquadSnapshot":
        return cls(
            field_players=as_squad_players(field_players),
            bench_players=as_squad_players(bench_players),
            total_match_minutes=minutes_per_half * 2,
            max_simultaneous_subs=max_simultaneous_subs,
        )

    @property
    def all_players(self) -> Tuple[SquadPlayer, ...]:
        return self.field_players + self.bench_players

    @property
    def field_ids(self) -> Tuple[str, ...]:
        return tuple(p.player_id for p in self.field_players)

    @property
    def bench_ids(self) -> Tuple[str, ...]:
        return tuple(p.player_id for p in self.bench_players)

    @property
    def total_players(self) -> int:
        return len(self.field_players) + len(self.bench_players)

    @property
    def on_field_count(self) -> int:
        return len(self.field_players)

    @property
    def bench_size(self) -> int:
        return len(self.bench_players)

    @property
    def player_names(self) -> Dict[str, str]:
        return {p.player_id: p.name for p in self.all_players}
