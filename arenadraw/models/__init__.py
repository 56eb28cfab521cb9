from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .progress import ProgressEntry  # noqa: F401
from .outcome import ALL_OUTCOMES, Outcome  # noqa: F401
from .team import ROUNDS, TeamRecord  # noqa: F401

__all__ = [
    "Base",
    "ProgressEntry",
    "ALL_OUTCOMES",
    "Outcome",
    "ROUNDS",
    "TeamRecord",
]
