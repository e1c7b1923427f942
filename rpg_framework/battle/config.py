"""
Battle tuning constants.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BattleConfig(BaseModel):
    """
    Probabilities and multipliers used by battle resolution.

    Attributes:
        flee_chance: Chance that the party-wide run attempt succeeds
        critical_chance: Chance that a hit is critical
        critical_multiplier: Damage multiplier on a critical hit
        variance_ratio: Damage spread as a fraction of base damage
        minimum_damage: Floor for base and final damage
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    flee_chance: float = Field(default=0.60, ge=0.0, le=1.0)
    critical_chance: float = Field(default=0.05, ge=0.0, le=1.0)
    critical_multiplier: float = Field(default=1.5, ge=1.0)
    variance_ratio: float = Field(default=0.2, ge=0.0)
    minimum_damage: int = Field(default=1, ge=1)


DEFAULT_CONFIG = BattleConfig()
