"""Structured message templates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Template(ABC):
    """A Send API template; ``transform`` yields the ``message`` object."""

    @abstractmethod
    def transform(self) -> dict[str, Any]: ...
