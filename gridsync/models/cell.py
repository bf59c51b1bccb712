from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, fields
from typing import Any

"""Cell view record and CellPatch.

Cell is the per-row, per-column record consumed by rendering. Records are
frozen: the Cell Mutator replaces a stored Cell with an updated copy instead of
editing it, so a reference held by a renderer never changes under it.

CellPatch is the closed set of fields a caller may update on a Cell. Fields left
at ``UNSET`` are not part of the patch; ``None`` is a legal cell value.
"""

__all__ = [
    "UNSET",
    "Cell",
    "CellPatch",
    "normalize_class_names",
]


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def normalize_class_names(names: Iterable[str] | str | None) -> tuple[str, ...]:
    """Return class names as an ordered tuple without duplicates or blanks.

    A single string is split on whitespace (``"a b"`` -> ``("a", "b")``).
    """
    if names is None:
        return ()
    if isinstance(names, str):
        names = names.split()
    seen: dict[str, None] = {}
    for name in names:
        name = str(name).strip()
        if name:
            seen.setdefault(name, None)
    return tuple(seen)


@dataclass(frozen=True)
class Cell:
    """Derived view record for one row x visible column."""
    row_key: Any
    column_name: str
    value: Any
    # Rendering (span) properties
    span_length: int = 0
    is_owner: bool = True
    owner_row_key: Any = None
    # State properties
    is_editable: bool = False
    is_disabled: bool = False
    class_names: tuple[str, ...] = ()
    option_list: tuple[Any, ...] = ()
    # Fields changed by the last Cell Mutator call on this record
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class CellPatch:
    """Partial update for one Cell. Field order is the order changes are reported in."""
    value: Any = UNSET
    is_editable: Any = UNSET
    is_disabled: Any = UNSET
    class_names: Any = UNSET
    option_list: Any = UNSET

    def __post_init__(self) -> None:
        if self.class_names is not UNSET:
            object.__setattr__(self, "class_names", normalize_class_names(self.class_names))
        if self.option_list is not UNSET:
            object.__setattr__(self, "option_list", tuple(self.option_list or ()))
        for name in ("is_editable", "is_disabled"):
            current = getattr(self, name)
            if current is not UNSET:
                object.__setattr__(self, name, bool(current))

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(field, new_value)`` for the fields set on this patch."""
        for f in fields(self):
            new_value = getattr(self, f.name)
            if new_value is not UNSET:
                yield f.name, new_value

    def is_empty(self) -> bool:
        return next(self.items(), None) is None
