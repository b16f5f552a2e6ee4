"""Subcommands that drive the board service from the shell."""

from __future__ import annotations

import argparse
import logging

from ..models import Board, Card, CardPatch, Column, ColumnPatch, ColumnTheme
from ..services import BoardService
from ..utils import normalize_tag
from . import output

logger = logging.getLogger(__name__)

THEME_CHOICES = [theme.value for theme in ColumnTheme]

SHORT_ID_LENGTH = 8


def _short(identifier: str) -> str:
    return identifier[:SHORT_ID_LENGTH]


def resolve_column(board: Board, ref: str) -> Column | None:
    """
    Find a column by id, unique id prefix, or title (case-insensitive).

    Returns None if nothing matches or the reference is ambiguous.
    """
    column = board.get_column(ref)
    if column is not None:
        return column

    by_prefix = [c for c in board.columns if c.id.startswith(ref)]
    if len(by_prefix) == 1:
        return by_prefix[0]

    by_title = [c for c in board.columns if c.title.lower() == ref.lower()]
    if len(by_title) == 1:
        return by_title[0]
    return None


def resolve_card(board: Board, ref: str) -> tuple[Column, Card] | None:
    """Find a card anywhere on the board by id, unique id prefix, or title."""
    found = board.find_card(ref)
    if found is not None:
        return found

    by_prefix = [(col, card) for col, card in board.iter_cards() if card.id.startswith(ref)]
    if len(by_prefix) == 1:
        return by_prefix[0]

    by_title = [
        (col, card) for col, card in board.iter_cards() if card.title.lower() == ref.lower()
    ]
    if len(by_title) == 1:
        return by_title[0]
    return None


def add_subcommands(parser: argparse.ArgumentParser) -> None:
    """Register all board subcommands on ``parser``."""
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("show", help="Print the board")

    p = sub.add_parser("title", help="Set the board title")
    p.add_argument("title")

    p = sub.add_parser("column-add", help="Append a new column")
    p.add_argument("title")
    p.add_argument("--theme", choices=THEME_CHOICES, default=ColumnTheme.ROSE.value)

    p = sub.add_parser("column-edit", help="Rename or re-theme a column")
    p.add_argument("column")
    p.add_argument("--title")
    p.add_argument("--theme", choices=THEME_CHOICES)

    p = sub.add_parser("column-delete", help="Delete a column and its cards")
    p.add_argument("column")

    p = sub.add_parser("card-add", help="Append a card to a column")
    p.add_argument("column")
    p.add_argument("title")
    p.add_argument("--description")
    p.add_argument("--tag", action="append", default=[], dest="tags")

    p = sub.add_parser("card-edit", help="Edit a card's title or description")
    p.add_argument("card")
    p.add_argument("--title")
    p.add_argument("--description")
    p.add_argument("--clear-description", action="store_true")

    p = sub.add_parser("card-delete", help="Delete a card")
    p.add_argument("card")

    p = sub.add_parser("card-move", help="Move a card to a column and position")
    p.add_argument("card")
    p.add_argument("column")
    p.add_argument("--position", type=int, default=None)

    p = sub.add_parser("tag-add", help="Add a tag to the vocabulary")
    p.add_argument("tag")

    p = sub.add_parser("tag-remove", help="Remove a tag from the vocabulary and all cards")
    p.add_argument("tag")

    p = sub.add_parser("card-tag", help="Create a tag and attach it to a card")
    p.add_argument("card")
    p.add_argument("tag")

    p = sub.add_parser("card-toggle-tag", help="Attach or detach a tag on a card")
    p.add_argument("card")
    p.add_argument("tag")


def show_board(board: Board) -> None:
    """Print the board as an indented listing."""
    output.header(board.title)
    for column in board.columns:
        count = len(column.cards)
        noun = "card" if count == 1 else "cards"
        print(f"\n{column.title} [{column.theme.value}] {output.dim(_short(column.id))}")
        print(f"  {count} {noun}")
        for card in column.cards:
            tags = " ".join(f"#{tag}" for tag in card.tags)
            line = f"  {output.BULLET} {card.title} {output.dim(_short(card.id))}"
            print(f"{line} {tags}".rstrip())
            if card.description:
                print(f"      {card.description}")
    if board.available_tags:
        print(f"\nTags: {', '.join(board.available_tags)}")


def _column_command(args: argparse.Namespace, service: BoardService) -> int:
    column = resolve_column(service.board, args.column)
    if column is None:
        output.error(f"Column not found: {args.column}")
        return 1

    if args.command == "column-edit":
        fields = {}
        if args.title is not None:
            fields["title"] = args.title
        if args.theme is not None:
            fields["theme"] = args.theme
        patch = ColumnPatch(**fields)
        if patch.is_empty():
            output.error("Nothing to update: pass --title or --theme")
            return 1
        service.update_column(column.id, patch)
        output.success(f"Updated column '{column.title}'")
    elif args.command == "column-delete":
        service.delete_column(column.id)
        output.success(f"Deleted column '{column.title}' ({len(column.cards)} cards)")
    else:
        tags = [tag for tag in (normalize_tag(t) for t in args.tags) if tag]
        service.add_card(column.id, args.title, args.description, tags)
        output.success(f"Added card '{args.title}' to '{column.title}'")
    return 0


def _card_command(args: argparse.Namespace, service: BoardService) -> int:
    found = resolve_card(service.board, args.card)
    if found is None:
        output.error(f"Card not found: {args.card}")
        return 1
    column, card = found

    if args.command == "card-edit":
        fields = {}
        if args.title is not None:
            fields["title"] = args.title
        if args.clear_description:
            fields["description"] = None
        elif args.description is not None:
            fields["description"] = args.description
        patch = CardPatch(**fields)
        if patch.is_empty():
            output.error("Nothing to update: pass --title, --description or --clear-description")
            return 1
        service.update_card(column.id, card.id, patch)
        output.success(f"Updated card '{card.title}'")

    elif args.command == "card-delete":
        service.delete_card(column.id, card.id)
        output.success(f"Deleted card '{card.title}'")

    elif args.command == "card-move":
        target = resolve_column(service.board, args.column)
        if target is None:
            output.error(f"Column not found: {args.column}")
            return 1
        service.move_card(column.id, target.id, card.id, args.position)
        output.success(f"Moved '{card.title}' to '{target.title}'")

    else:
        tag = normalize_tag(args.tag)
        if not tag:
            output.error("Tag cannot be empty")
            return 1
        if args.command == "card-tag":
            service.create_card_tag(column.id, card.id, tag)
            output.success(f"Tagged '{card.title}' with '{tag}'")
        else:
            verb = "Removed" if card.has_tag(tag) else "Added"
            service.toggle_card_tag(column.id, card.id, tag)
            output.success(f"{verb} '{tag}' on '{card.title}'")
    return 0


def _tag_command(args: argparse.Namespace, service: BoardService) -> int:
    tag = normalize_tag(args.tag)
    if not tag:
        output.error("Tag cannot be empty")
        return 1
    if args.command == "tag-add":
        service.add_tag(tag)
        output.success(f"Tag '{tag}' available")
    else:
        service.remove_tag(tag)
        output.success(f"Tag '{tag}' removed from board")
    return 0


def run_command(args: argparse.Namespace, service: BoardService) -> int:
    """Execute the parsed subcommand. Returns a process exit code."""
    command = args.command or "show"

    if service.has_load_error:
        output.error(f"{service.load_error} (using default board)")

    if command == "show":
        show_board(service.board)
        return 0

    if command == "title":
        service.set_board_title(args.title)
        output.success(f"Board title set to '{args.title}'")
        exit_code = 0
    elif command == "column-add":
        board = service.add_column(args.title, args.theme)
        output.success(f"Added column '{args.title}' ({_short(board.columns[-1].id)})")
        exit_code = 0
    elif command in ("column-edit", "column-delete", "card-add"):
        exit_code = _column_command(args, service)
    elif command.startswith("card-"):
        exit_code = _card_command(args, service)
    else:
        exit_code = _tag_command(args, service)

    if service.persist_error:
        output.error(service.persist_error)
        return 1
    logger.debug("Command finished: %s (exit=%d)", command, exit_code)
    return exit_code
