"""Request and reply messages exchanged between benchmark clients and servers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rttbench.matrix import multiply

OPERATION = "Mul"

Matrix = list[list[int]]


def _lowered(data: Any) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("message must be a JSON object")
    return {str(key).lower(): value for key, value in data.items()}


def _matrix(value: Any, name: str) -> Matrix:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(row, list) for row in value):
        raise ValueError(f"field {name!r} must be a list of lists")
    for row in value:
        for item in row:
            if isinstance(item, bool) or not isinstance(item, int):
                raise ValueError(f"field {name!r} must hold integers")
    return [list(row) for row in value]


def _text(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string")
    return value


@dataclass
class Request:
    """A request to apply ``operation`` to matrices ``a`` and ``b``."""

    operation: str
    a: Matrix = field(default_factory=list)
    b: Matrix = field(default_factory=list)
    client_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"operation": self.operation, "a": self.a, "b": self.b}
        if self.client_id:
            data["client_id"] = self.client_id
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Request:
        """Build a request; keys match case-insensitively and missing ones take defaults."""
        fields = _lowered(data)
        return cls(
            operation=_text(fields.get("operation"), "operation"),
            a=_matrix(fields.get("a"), "a"),
            b=_matrix(fields.get("b"), "b"),
            client_id=_text(fields.get("client_id"), "client_id"),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Request:
        return cls.from_dict(json.loads(text))


@dataclass
class Reply:
    """The result matrix ``r`` of a request, tagged with the requester's id."""

    r: Matrix | None = None
    client_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"r": self.r}
        if self.client_id:
            data["client_id"] = self.client_id
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Reply:
        """Build a reply; keys match case-insensitively and missing ones take defaults."""
        fields = _lowered(data)
        raw = fields.get("r")
        return cls(
            r=None if raw is None else _matrix(raw, "r"),
            client_id=_text(fields.get("client_id"), "client_id"),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Reply:
        return cls.from_dict(json.loads(text))


def handle_request(request: Request) -> Reply:
    """Carry out a multiplication request and return the reply for it."""
    if request.operation != OPERATION:
        raise ValueError(f"The only operation accepted is '{OPERATION}'.")
    return Reply(r=multiply(request.a, request.b), client_id=request.client_id)