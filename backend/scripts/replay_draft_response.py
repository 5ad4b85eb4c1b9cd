#!/usr/bin/env python3
"""Replay a saved AI response through the draft pipeline.

Runs the offline half of draft generation (parse, normalize, expand) on a raw
response captured from the completion backend, then prints the canonical
drafts as JSON. Useful for reproducing parse failures reported from
production without calling the backend again.

Run from backend directory:
    python scripts/replay_draft_response.py --kind cut saved_response.txt
    python scripts/replay_draft_response.py --kind scene saved.txt --expand --validate
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from src.models import CutDraft, SceneDraft
from src.services.catalog_service import ProductionCatalog, expand_draft, load_catalog
from src.services.draft_errors import ParseFailure
from src.services.draft_service import CUT_PIPELINE, SCENE_PIPELINE, renumber_orders
from src.services.normalization import normalize_draft
from src.services.response_parser import parse_draft_items

PIPELINES = {"scene": SCENE_PIPELINE, "cut": CUT_PIPELINE}
MODELS = {"scene": SceneDraft, "cut": CutDraft}


def replay(raw: str, kind: str, expand: bool = False, catalog_path: Path | None = None) -> list[dict]:
    """Parse, normalize and optionally expand a raw response."""
    pipeline = PIPELINES[kind]
    items = parse_draft_items(
        raw,
        pipeline.list_key,
        repair_truncated_lists=pipeline.repair_truncated_lists,
    )

    catalog = None
    if expand:
        catalog = ProductionCatalog.from_file(catalog_path) if catalog_path else load_catalog()

    drafts = [
        expand_draft(normalize_draft(item, pipeline.schema, index), catalog=catalog, enabled=expand)
        for index, item in enumerate(items)
    ]
    renumber_orders(drafts)
    return drafts


def validate(drafts: list[dict], kind: str) -> list[str]:
    """Check drafts against the response models. Returns error messages."""
    model = MODELS[kind]
    errors = []
    for position, draft in enumerate(drafts, start=1):
        try:
            model.model_validate(draft)
        except ValidationError as e:
            errors.append(f"{kind} #{position}: {e.error_count()} error(s)\n{e}")
    return errors


def main():
    parser = argparse.ArgumentParser(
        description="Replay a saved AI response through parse, normalize and expand"
    )
    parser.add_argument("file", type=Path, help="File containing the raw response text")
    parser.add_argument(
        "--kind",
        choices=sorted(PIPELINES),
        required=True,
        help="Draft kind the response was generated for",
    )
    parser.add_argument(
        "--expand",
        action="store_true",
        help="Expand catalog set codes after normalization",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Catalog JSON file (default: CATALOG_PATH or the bundled catalog)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the drafts against the response models",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write drafts JSON to this file instead of stdout",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show pipeline logs")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file.exists():
        print(f"Error: File {args.file} does not exist", file=sys.stderr)
        return 1

    raw = args.file.read_text(encoding="utf-8")

    try:
        drafts = replay(raw, args.kind, expand=args.expand, catalog_path=args.catalog)
    except ParseFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    output = json.dumps(drafts, ensure_ascii=False, indent=2)
    if args.out:
        args.out.write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {len(drafts)} {args.kind} draft(s) to {args.out}")
    else:
        print(output)

    if args.validate:
        errors = validate(drafts, args.kind)
        for message in errors:
            print(message, file=sys.stderr)
        if errors:
            return 3

    return 0


if __name__ == "__main__":
    sys.exit(main())
