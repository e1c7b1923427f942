"""
Battle Components - validated data for battle units.

All components are Pydantic models. Battle rules live in the
battle package, not in components.
"""

from rpg_framework.components.character import (
    CharacterStats,
    Health,
)

__all__ = [
    "CharacterStats",
    "Health",
]
