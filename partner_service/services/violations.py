from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from partner_service.core.error_codes import ErrorCodeLookup
from partner_service.core.errors import ErrorCodeNotFound

log = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    REQUIRED = "required"
    INVALID = "invalid"
    ALREADY_EXISTS = "already_exists"
    LIMIT_EXCEEDED = "limit_exceeded"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FieldViolation:
    kind: ViolationKind
    code: str | None

    @property
    def message(self) -> list[str]:
        return [self.kind.value]


@dataclass
class ViolationReport:
    """
    Per-invocation accumulator of field violations.

    Codes are resolved on ``add`` against the (endpoint, method) the report
    was opened for. A missing code is logged and the violation is still kept.
    """

    endpoint: str
    method: str
    lookup: ErrorCodeLookup = field(default_factory=ErrorCodeLookup)
    _items: dict[str, FieldViolation] = field(default_factory=dict)

    def add(self, field_name: str, kind: ViolationKind) -> None:
        try:
            code: str | None = self.lookup.get_code(self.endpoint, self.method, field_name, kind.value)
        except ErrorCodeNotFound as e:
            log.warning("error code lookup failed: %s", e)
            code = None
        self._items[field_name] = FieldViolation(kind=kind, code=code)

    def required(self, field_name: str) -> None:
        self.add(field_name, ViolationKind.REQUIRED)

    def invalid(self, field_name: str) -> None:
        self.add(field_name, ViolationKind.INVALID)

    def already_exists(self, field_name: str) -> None:
        self.add(field_name, ViolationKind.ALREADY_EXISTS)

    def limit_exceeded(self, field_name: str) -> None:
        self.add(field_name, ViolationKind.LIMIT_EXCEEDED)

    def not_found(self, field_name: str) -> None:
        self.add(field_name, ViolationKind.NOT_FOUND)

    def get(self, field_name: str) -> FieldViolation | None:
        return self._items.get(field_name)

    def kind_of(self, field_name: str) -> ViolationKind | None:
        v = self._items.get(field_name)
        return v.kind if v else None

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return {
            name: {"code": v.code, "message": v.message}
            for name, v in self._items.items()
        }
