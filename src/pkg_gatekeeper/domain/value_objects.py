# src/pkg_gatekeeper/domain/value_objects.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .constants import OPERATION_CODE_MAX
from .exceptions import OperationKindError


# --- Request value objects -----------------------------------------------


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """
    Framework-neutral view of an incoming request.

    Only what the authentication procedure needs: method, path and a
    case-insensitive header lookup.
    """
    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __init__(
            self,
            method: str,
            path: str,
            headers: Mapping[str, str] | None = None,
    ) -> None:
        object.__setattr__(self, "method", method.upper())
        object.__setattr__(self, "path", path)
        object.__setattr__(
            self,
            "headers",
            {k.lower(): v for k, v in (headers or {}).items()},
        )

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


# --- Audit value objects -------------------------------------------------


@dataclass(frozen=True, slots=True)
class Page:
    """
    Pagination window: `page_size` rows starting at zero-based `offset`.

    No upper bound on `page_size` is enforced here; callers bound it.
    """
    page_size: int
    offset: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 0:
            raise ValueError(f"page_size must be >= 0, got {self.page_size}")
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")


_CODE_RE = re.compile(r"[0-9]+")


def _parse_code(part: str, text: str) -> int:
    if not _CODE_RE.fullmatch(part):
        raise OperationKindError(f"Invalid operation kind {text!r}: {part!r} is not a code")
    code = int(part)
    if code > OPERATION_CODE_MAX:
        raise OperationKindError(
            f"Invalid operation kind {text!r}: {code} exceeds {OPERATION_CODE_MAX}"
        )
    return code


def check_operation_code(value: int, name: str) -> int:
    """
    Return `value` as an int if it fits an 8-bit operation code.

    Raises:
        OperationKindError if it lies outside 0..OPERATION_CODE_MAX.
    """
    code = int(value)
    if not 0 <= code <= OPERATION_CODE_MAX:
        raise OperationKindError(f"{name} must be in 0..{OPERATION_CODE_MAX}, got {code}")
    return code


def convert_operation_type(operation: int, resource: int) -> str:
    """(5, 2) -> "5-2"."""
    op = check_operation_code(operation, "operation")
    res = check_operation_code(resource, "resource")
    return f"{op}-{res}"


def parse_operation_type(text: str) -> Tuple[int, int]:
    """
    "5-2" -> (5, 2).

    Raises OperationKindError unless the string holds exactly two
    non-negative 8-bit codes separated by a single "-".
    """
    parts = text.split("-")
    if len(parts) != 2:
        raise OperationKindError(
            f"Invalid operation kind {text!r}: expected '<operation>-<resource>'"
        )
    return _parse_code(parts[0], text), _parse_code(parts[1], text)
