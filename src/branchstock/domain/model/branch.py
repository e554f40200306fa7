"""Branch aggregate — a physical location that can hold stock."""

from __future__ import annotations

from dataclasses import dataclass

from branchstock.domain.exceptions import ValidationError


@dataclass
class Branch:

    id: str
    name: str
    active: bool = True

    @staticmethod
    def create(branch_id: str, name: str) -> Branch:
        if not name or not name.strip():
            raise ValidationError("Branch name is required")
        return Branch(id=branch_id, name=name.strip())
