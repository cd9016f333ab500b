"""Enumerations for lineup rotation models."""

from enum import Enum
from typing import Any, Optional


class Position(str, Enum):
    """On-field role a player occupies or may replace."""

    GOALKEEPER = "goalkeeper"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    FORWARD = "forward"

    @classmethod
    def _missing_(cls, value: Any) -> Optional["Position"]:
        """Accept abbreviations and case variations from roster exports."""
        if not isinstance(value, str):
            return None

        aliases = {
            "GK": cls.GOALKEEPER,
            "G": cls.GOALKEEPER,
            "KEEPER": cls.GOALKEEPER,
            "GOALIE": cls.GOALKEEPER,
            "GOALKEEPER": cls.GOALKEEPER,
            "DEF": cls.DEFENDER,
            "D": cls.DEFENDER,
            "DEFENDER": cls.DEFENDER,
            "MID": cls.MIDFIELDER,
            "M": cls.MIDFIELDER,
            "MIDFIELDER": cls.MIDFIELDER,
            "FWD": cls.FORWARD,
            "F": cls.FORWARD,
            "ST": cls.FORWARD,
            "FORWARD": cls.FORWARD,
        }
        return aliases.get(value.strip().upper())

    @property
    def abbreviation(self) -> str:
        return {
            Position.GOALKEEPER: "GK",
            Position.DEFENDER: "DEF",
            Position.MIDFIELDER: "MID",
            Position.FORWARD: "FWD",
        }[self]

