"""Service layer for business logic."""

from .board_service import BoardHealth, BoardService, DoctorReport
from .card_service import CardService
from .project_service import ProjectService
from .reference import CardId, Ordinal, parse_reference, resolve_reference

__all__ = [
    "BoardHealth",
    "BoardService",
    "CardId",
    "CardService",
    "DoctorReport",
    "Ordinal",
    "ProjectService",
    "parse_reference",
    "resolve_reference",
]
