"""Player model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Player:
    """A person waiting for, sitting on, or playing on a team.

    Identity is ``id``. A player's name is never edited in place; a
    substitution swaps in a different Player.
    """

    id: str
    name: str
    joined_at: datetime
    remote_id: int | None = None  # Entry id in the remote queue service, if mirrored

    def __post_init__(self):
        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise ValueError("Player name cannot be empty")
        object.__setattr__(self, "name", name)
