"""Canonical payment outcome and per-provider status code tables."""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..exceptions import InvalidStatusTable, UnknownStatusCode

logger = logging.getLogger(__name__)


class CanonicalStatus(str, Enum):
    """Provider-independent outcome of a payment notification."""

    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
    CANCELED = "canceled"
    CHARGEBACK = "chargeback"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class StatusTable:
    """Closed mapping from provider status codes to ``CanonicalStatus``.

    Every value is checked when the table is built, so a provider module with
    a typo in its table fails at import time rather than on the first
    notification.
    """

    def __init__(self, codes: Mapping[str, CanonicalStatus], case_sensitive: bool = True) -> None:
        table: Dict[str, CanonicalStatus] = {}
        for code, status in codes.items():
            if not isinstance(status, CanonicalStatus):
                raise InvalidStatusTable(
                    f"Status code {code!r} maps to {status!r}, not a CanonicalStatus"
                )
            key = str(code) if case_sensitive else str(code).lower()
            if key in table and table[key] is not status:
                raise InvalidStatusTable(f"Status code {code!r} maps to two statuses")
            table[key] = status
        self._codes = MappingProxyType(table)
        self.case_sensitive = case_sensitive

    @property
    def codes(self) -> Mapping[str, CanonicalStatus]:
        return self._codes

    def resolve(self, code: Optional[str], strict: bool = False) -> CanonicalStatus:
        """Map ``code`` to its canonical status.

        Args:
            code: Raw provider status code
            strict: Raise instead of falling back to ``UNKNOWN``

        Returns:
            The mapped status, or ``CanonicalStatus.UNKNOWN`` for codes outside
            the table

        Raises:
            UnknownStatusCode: Only when ``strict`` is set and the code is
                unmapped
        """
        key = None if code is None else str(code).strip()
        if key is not None and not self.case_sensitive:
            key = key.lower()

        if key in self._codes:
            return self._codes[key]

        error = UnknownStatusCode(code)
        if strict:
            raise error
        logger.warning("%s; treating as %s", error, CanonicalStatus.UNKNOWN.value)
        return CanonicalStatus.UNKNOWN

    def __contains__(self, code: object) -> bool:
        key = str(code) if self.case_sensitive else str(code).lower()
        return key in self._codes

    def __len__(self) -> int:
        return len(self._codes)
