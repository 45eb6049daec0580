"""Structured diagnostics returned by provider lifecycle calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    summary: str
    detail: str = ""
    attribute: Optional[str] = None

    def __str__(self) -> str:
        where = f" (attribute {self.attribute})" if self.attribute else ""
        text = f"{self.severity.capitalize()}: {self.summary}{where}"
        if self.detail:
            text += f"\n  {self.detail}"
        return text


class Diagnostics(list):
    """Ordered list of Diagnostic values."""

    def add_error(self, summary: str, detail: str = "", attribute: Optional[str] = None) -> None:
        self.append(Diagnostic(ERROR, summary, detail, attribute))

    def has_error(self) -> bool:
        return any(d.severity == ERROR for d in self)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self if d.severity == ERROR]
