"""
Character components - health and combat stats.
"""

from __future__ import annotations

from pydantic import Field, model_validator

from rpg_engine.core.component import Component, register_component


@register_component
class CharacterStats(Component):
    """
    Combat statistics of a unit.

    Attributes:
        attack: Offensive power
        defense: Damage reduction against attacks
    """
    attack: int = Field(default=10, ge=0)
    defense: int = Field(default=10, ge=0)


@register_component
class Health(Component):
    """
    Health points tracking.

    Attributes:
        max_hp: Maximum HP, fixed once created
        current: Current HP, always within [0, max_hp]
    """
    max_hp: int = Field(default=100, gt=0, frozen=True)
    current: int = Field(default=100, ge=0)

    @model_validator(mode='after')
    def _check_bounds(self) -> Health:
        if self.current > self.max_hp:
            raise ValueError(
                f"current health {self.current} exceeds max_hp {self.max_hp}"
            )
        return self

    @classmethod
    def full(cls, max_hp: int) -> Health:
        """Create health filled to its maximum."""
        return cls(max_hp=max_hp, current=max_hp)

    @property
    def is_dead(self) -> bool:
        """A unit is dead exactly when its health is zero."""
        return self.current == 0

    @property
    def percent(self) -> float:
        """Get health as percentage (0-1)."""
        return self.current / self.max_hp

    @property
    def is_full(self) -> bool:
        """Check if at full health."""
        return self.current >= self.max_hp

    def take_damage(self, amount: int) -> int:
        """
        Take damage, flooring health at zero.

        Args:
            amount: Damage to take

        Returns:
            Actual health removed
        """
        actual = max(0, min(amount, self.current))
        self.current -= actual
        return actual
