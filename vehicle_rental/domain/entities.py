"""Domain value objects shared by services and the API layer."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class Caller:
    """Authenticated identity initiating an operation."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, customer_id: int) -> bool:
        return self.id == customer_id
