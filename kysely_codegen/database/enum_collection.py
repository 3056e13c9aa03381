"""Registry of enum types discovered during introspection."""

import logging
from typing import Dict, Iterator, List, Sequence, Tuple

from ..errors import SchemaInconsistencyError
from .data_types import EnumRef

logger = logging.getLogger(__name__)


class EnumCollection:
    """Deduplicates enum definitions and remembers registration order.

    Labels are kept in catalog declaration order and never re-sorted, since
    enum ordinals take part in comparisons. How an enum is rendered is up to
    the serializer; only identity and labels live here.
    """

    def __init__(self):
        self._enums: Dict[str, Tuple[str, ...]] = {}

    def register(self, identity: str, labels: Sequence[str]) -> EnumRef:
        """Register an enum and return its handle.

        Args:
            identity: Schema-qualified (or synthesized) enum name
            labels: Enum labels in declaration order

        Returns:
            EnumRef handle for the enum

        Raises:
            SchemaInconsistencyError: If the identity is already registered
                with different labels
        """
        labels = tuple(labels)
        existing = self._enums.get(identity)
        if existing is None:
            self._enums[identity] = labels
            logger.debug("Registered enum %s with %d labels", identity, len(labels))
        elif existing != labels:
            raise SchemaInconsistencyError(
                f"Enum '{identity}' registered with conflicting labels: "
                f"{list(existing)} vs {list(labels)}",
                details={"enum": identity, "existing": list(existing), "conflicting": list(labels)},
            )
        return EnumRef(identity)

    def get(self, handle: EnumRef) -> List[str]:
        """Return the labels for a handle."""
        try:
            return list(self._enums[handle.identity])
        except KeyError:
            raise KeyError(f"Unknown enum '{handle.identity}'") from None

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        """Iterate (identity, labels) in first-registration order."""
        for identity, labels in self._enums.items():
            yield identity, list(labels)

    def __contains__(self, identity: str) -> bool:
        return identity in self._enums

    def __len__(self) -> int:
        return len(self._enums)

    def __iter__(self) -> Iterator[str]:
        return iter(self._enums)
