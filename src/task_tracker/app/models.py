from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class Task:
    id: int
    title: str
    done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
