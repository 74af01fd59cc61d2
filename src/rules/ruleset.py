"""Rule switches that differ between variants"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Ruleset:
    pawn_double_step: bool = True
    castling: bool = True


CLASSIC_RULES = Ruleset()
