"""Enums for card mutations."""

from enum import Enum


class LabelAction(str, Enum):
    """What to do with a label on a card."""

    ADD = "add"
    REMOVE = "remove"


class Direction(str, Enum):
    """Neighbouring column to shift a card into."""

    LEFT = "left"
    RIGHT = "right"
