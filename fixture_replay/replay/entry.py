"""Key entries and value slots

A ``KeyEntry`` holds every (pattern -> values) correspondence recorded
under one key. Each correspondence lives in a ``ValueSlot`` whose values
are played back round-robin.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .descriptors import NO_RESULT, CallContext, Predicate


@dataclass
class ValueSlot:
    """Recorded values for one (key, pattern) pair"""

    pattern: Any
    values: list = field(default_factory=list)
    cursor: int = 0

    @property
    def is_predicate(self) -> bool:
        return isinstance(self.pattern, Predicate)

    def push_raw_value(self, raw_value: Any) -> None:
        self.values.append(raw_value)

    def next_raw_value(self) -> Any:
        """Return the value under the cursor and advance it.

        The cursor wraps to the start once every value has been read, so a
        slot with values [a, b] yields a, b, a, b, ...

        Returns:
            Raw value, or NO_RESULT if the slot is empty
        """
        if not self.values:
            return NO_RESULT

        raw_value = self.values[self.cursor]
        self.cursor = (self.cursor + 1) % len(self.values)
        return raw_value

    def rewind(self) -> None:
        self.cursor = 0


@dataclass
class KeyEntry:
    """All value slots registered under one key"""

    key: str
    ordinal: int
    value_slots: list[ValueSlot] = field(default_factory=list)
    value_counter: int = 0
    origin_name: Optional[str] = None

    def find_match(self, context: CallContext) -> Optional[ValueSlot]:
        """Find the slot serving a call.

        Slots are scanned in registration order and the last one that
        matches wins, so later registrations shadow earlier ones. Predicate
        slots match when their callable returns something truthy; literal
        slots match on structural equality with the call's parm.

        Args:
            context: Call context (store, this entry, the call)

        Returns:
            Matching slot, or None
        """
        equals = context.store.equals
        match = None
        for slot in self.value_slots:
            if slot.is_predicate:
                if slot.pattern(context):
                    match = slot
            elif equals(slot.pattern, context.call.parm):
                match = slot
        return match

    def slot_for_pattern(
        self,
        pattern: Any,
        equals: Callable[[Any, Any], bool],
    ) -> ValueSlot:
        """Get or create the slot for a newly registered pattern.

        Literal patterns are deduplicated by structural equality against the
        other literal slots. Predicates always get a fresh slot.
        """
        if not isinstance(pattern, Predicate):
            for slot in self.value_slots:
                if not slot.is_predicate and equals(slot.pattern, pattern):
                    return slot

        slot = ValueSlot(pattern=pattern)
        self.value_slots.append(slot)
        return slot

    def next_value_ordinal(self) -> int:
        self.value_counter += 1
        return self.value_counter

    def reserve_value_ordinal(self, ordinal: int) -> None:
        """Make sure the next generated value ordinal is above ``ordinal``"""
        if ordinal > self.value_counter:
            self.value_counter = ordinal

    @property
    def value_count(self) -> int:
        return sum(len(slot.values) for slot in self.value_slots)
