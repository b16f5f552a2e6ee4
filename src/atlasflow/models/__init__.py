"""Data models."""

from .board import DEFAULT_BOARD_TITLE, DEFAULT_TAGS, Board
from .card import Card
from .column import Column, ColumnTheme
from .drag import DragPayload
from .patch import CardPatch, ColumnPatch

__all__ = [
    "DEFAULT_BOARD_TITLE",
    "DEFAULT_TAGS",
    "Board",
    "Card",
    "CardPatch",
    "Column",
    "ColumnPatch",
    "ColumnTheme",
    "DragPayload",
]
