"""Identity of a bindable field on a model object."""

from typing import Any


class FieldIdentity:
    """
    Identifies one bindable field: the object that owns it plus the field name.

    Equality compares the owner by identity, not by value. Two dataclass
    instances that happen to hold equal values are still different owners,
    so their fields never collide in an error mapping.

    Identities reference the model (or one of its substructures), never the
    edit context, so they stay valid across context rebuilds.
    """

    __slots__ = ("owner", "field_name")

    def __init__(self, owner: Any, field_name: str):
        if owner is None:
            raise ValueError("FieldIdentity owner cannot be None")
        if not isinstance(field_name, str) or not field_name:
            raise TypeError(f"field_name must be a non-empty str, got {field_name!r}")
        self.owner = owner
        self.field_name = field_name

    def get_value(self) -> Any:
        """Read the field's current value from its owner."""
        return getattr(self.owner, self.field_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldIdentity):
            return NotImplemented
        return self.owner is other.owner and self.field_name == other.field_name

    def __hash__(self) -> int:
        return hash((id(self.owner), self.field_name))

    def __repr__(self) -> str:
        return f"FieldIdentity({type(self.owner).__name__}@{id(self.owner):#x}, {self.field_name!r})"
