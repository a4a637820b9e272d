"""Enum-based state lifecycle pattern.

Defines entity states as Python enums with an explicit transition table.
The table is the single source of truth for which states a conditional
update may start from, so the WHERE clause of a status-changing write is
derived from it rather than written by hand.

Example domain: the book status lifecycle (Available -> Rented).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

StateT = TypeVar("StateT", bound=Enum)


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TransitionTable(Generic[StateT]):
    """Allowed transitions: {current_state: (allowed_next_states, ...)}.

    Usage::

        lifecycle = TransitionTable({
            BookStatus.AVAILABLE: (BookStatus.RENTED,),
            BookStatus.RENTED: (),
        })
        lifecycle.sources_for(BookStatus.RENTED)  # (BookStatus.AVAILABLE,)
    """

    transitions: dict[StateT, tuple[StateT, ...]]

    def sources_for(self, to_state: StateT) -> tuple[StateT, ...]:
        """Every state that may move to to_state."""
        return tuple(
            state for state, targets in self.transitions.items()
            if to_state in targets
        )
