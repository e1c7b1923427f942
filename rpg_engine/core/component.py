"""
Component base class for validated data records.

Components hold unit data (health, combat stats) and only the small
state transitions that keep their own invariants intact. Battle rules
live in the battle framework, not here.

Usage:
    class Health(Component):
        current: int
        max_hp: int
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Components use Pydantic for:
    - Validation on construction and on assignment
    - JSON serialization
    - Default values
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid',
    )

    # Component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class Health(Component):
            current: int
            max_hp: int
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)
