"""
RPG Framework module.

Provides game-specific pieces built on top of the engine:
- Components (validated Pydantic data: health, combat stats)
- Battle (party-vs-group turn-based combat)
"""
