"""In-memory keyed collection of climber records."""

from __future__ import annotations

import random
from collections.abc import Iterable

from .models import Climber, Role


class ClimberNotFoundError(KeyError):
    """Raised when an id is not present in the store."""

    def __init__(self, climber_id: int) -> None:
        super().__init__(climber_id)
        self.climber_id = climber_id

    def __str__(self) -> str:
        return f"no climber with id {self.climber_id}"


class ClimberStore:
    """Own every climber of a session, keyed by id."""

    type_label = "dict[int, Climber]"

    def __init__(
        self,
        climbers: Iterable[Climber] | None = None,
        *,
        id_min: int = 1000,
        id_max: int = 9999,
        rng: random.Random | None = None,
    ) -> None:
        if id_min >= id_max:
            raise ValueError(f"empty id range [{id_min}, {id_max})")
        self._climbers: dict[int, Climber] = {}
        self._id_min = id_min
        self._id_max = id_max
        self._rng = rng or random.Random()
        for climber in climbers or ():
            self.insert(climber)

    def __len__(self) -> int:
        return len(self._climbers)

    def __contains__(self, climber_id: object) -> bool:
        return climber_id in self._climbers

    def count(self) -> int:
        return len(self._climbers)

    def get(self, climber_id: int) -> Climber | None:
        return self._climbers.get(climber_id)

    def insert(self, climber: Climber) -> None:
        """Add or replace the record stored under ``climber.id``."""

        self._climbers[climber.id] = climber

    def update(self, climber_id: int, climber: Climber) -> Climber:
        """Replace the record at ``climber_id``, keeping that id."""

        if climber_id not in self._climbers:
            raise ClimberNotFoundError(climber_id)
        if climber.id != climber_id:
            climber = climber.model_copy(update={"id": climber_id})
        self._climbers[climber_id] = climber
        return climber

    def remove(self, climber_id: int) -> bool:
        return self._climbers.pop(climber_id, None) is not None

    def clear(self) -> None:
        self._climbers.clear()

    def all(self) -> list[Climber]:
        return [self._climbers[key] for key in sorted(self._climbers)]

    def filter_by_role(self, role: Role) -> list[Climber]:
        return [c for c in self.all() if c.role == role]

    def group_by_role(self) -> dict[Role, list[Climber]]:
        # Roles keep the order in which they are first met while walking ids
        # upwards.
        groups: dict[Role, list[Climber]] = {}
        for climber in self.all():
            groups.setdefault(climber.role, []).append(climber)
        return groups

    def next_id(self) -> int:
        """Draw a random unused id from ``[id_min, id_max)``."""

        taken = sum(1 for key in self._climbers if self._id_min <= key < self._id_max)
        if taken >= self._id_max - self._id_min:
            raise RuntimeError("id space exhausted")
        candidate = self._rng.randrange(self._id_min, self._id_max)
        while candidate in self._climbers:
            candidate = self._rng.randrange(self._id_min, self._id_max)
        return candidate
