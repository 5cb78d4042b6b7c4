# -*- coding: utf-8 -*-
"""
CLI tool for extracting a diet protocol guide from a book (text or PDF).

Usage:
    python -m mealplanner.protocol.cli extract <book.txt|book.pdf> [-o out.json] [--partition ID]
    python -m mealplanner.protocol.cli show [path]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import settings


def get_default_output_path() -> Path:
    """Get default guide path."""
    return settings.data_root / "protocol_guide.json"


def cmd_extract(args: argparse.Namespace) -> int:
    """Extract a guide from a text file."""
    from ..errors import ConfigurationError, MealPlannerError
    from ..profiles.storage import get_settings_for_update, save_settings
    from .extractor import extract_guide, guide_rules, read_text

    source = Path(args.source)
    if not source.is_file():
        print(f"Error: Source file not found: {source}")
        return 1

    if args.partition:
        try:
            settings.validate()
        except ConfigurationError as exc:
            print(f"Error: {exc}")
            return 1

    text = read_text(source, budget=args.max_chars)
    print(f"Read {len(text)} characters from {source}")
    print("Sending text to the model...")

    result = extract_guide(text, protocol=args.protocol)
    if not result.ok:
        print(f"Error: {result.error}")
        return 1
    guide = result.value

    out_path = Path(args.output) if args.output else get_default_output_path()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(guide.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    print(
        f"Saved {len(guide.rules)} rules, {len(guide.recipes)} recipes and "
        f"{len(guide.tips)} tips to {out_path}"
    )

    if args.partition:
        try:
            household = get_settings_for_update(args.partition)
            household.protocol_rules = guide_rules(guide)
            household.diet_protocol = args.protocol
            save_settings(args.partition, household)
        except MealPlannerError as exc:
            print(f"Error: could not update household settings: {exc.message}")
            return 1
        print(f"Stored {len(household.protocol_rules)} rules in household {args.partition}")

    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print a previously extracted guide."""
    from .models import ProtocolGuide

    path = Path(args.path) if args.path else get_default_output_path()
    if not path.exists():
        print(f"Error: Guide not found: {path}")
        print("Run 'extract' first.")
        return 1

    guide = ProtocolGuide.model_validate_json(path.read_text(encoding="utf-8"))

    sections = [
        ("Rules", guide.rules),
        ("Banned ingredients", guide.banned_ingredients),
        ("Allowed ingredients", guide.allowed_ingredients),
        ("Tips", guide.tips),
    ]
    for title, entries in sections:
        print(f"{title} ({len(entries)})")
        print("-" * 50)
        for entry in entries:
            print(f"  - {entry}")
        print()

    print(f"Recipes ({len(guide.recipes)})")
    print("-" * 50)
    for i, recipe in enumerate(guide.recipes, 1):
        print(f"[{i}] {recipe.title} ({len(recipe.ingredients)} ingredients)")
        if recipe.notes:
            print(f"    {recipe.notes}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Diet protocol extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract a guide from a text file")
    extract_parser.add_argument("source", help="Book as a UTF-8 text file or a PDF")
    extract_parser.add_argument(
        "-o", "--output",
        help="Where to write the guide (default: <data root>/protocol_guide.json)",
    )
    extract_parser.add_argument(
        "--partition",
        help="Household id whose settings receive the extracted rules",
    )
    extract_parser.add_argument(
        "--protocol",
        default="Super Gut",
        help="Protocol name (default: Super Gut)",
    )
    extract_parser.add_argument(
        "--max-chars",
        type=int,
        default=900_000,
        help="Character budget for the book text (default: 900000)",
    )

    # show command
    show_parser = subparsers.add_parser("show", help="Print an extracted guide")
    show_parser.add_argument("path", nargs="?", help="Guide file (default: <data root>/protocol_guide.json)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "extract": cmd_extract,
        "show": cmd_show,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
