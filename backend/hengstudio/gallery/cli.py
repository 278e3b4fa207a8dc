"""
Gallery CLI

Reorder the gallery manifest from a terminal.

    hengstudio-gallery show
    hengstudio-gallery move 12 14 --to 1
    hengstudio-gallery shift 3 --by -1
    hengstudio-gallery swap 4 9
    hengstudio-gallery delete 7 --yes
    hengstudio-gallery check

Positions are 1-based, as displayed. Every command loads the manifest into a
GallerySession, applies one operation and saves the renumbered result.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import settings
from ..models.gallery import is_densely_numbered
from ..storage.gallery_store import GalleryManifestStore
from .ordering import GallerySession, OrderingError, SelectMode

logger = logging.getLogger(__name__)


def _select_positions(session: GallerySession, positions: Sequence[int]) -> None:
    session.clear_selection()
    for position in positions:
        index = position - 1
        if index not in session.selected:
            session.select(index, SelectMode.TOGGLE)


def _print_entries(session: GallerySession, out) -> None:
    for entry in session.entries:
        out.write(f"{entry.number:>4}  {entry.name}  {entry.url}\n")
    out.write(f"{len(session)} entries\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hengstudio-gallery", description="Reorder the gallery manifest")
    parser.add_argument("--manifest", type=Path, default=None, help="Path to gallery.json (default: PUBLIC_DIR/gallery.json)")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="List entries in display order")
    sub.add_parser("check", help="Verify the manifest is numbered 1..N")

    move = sub.add_parser("move", help="Move entries to a position")
    move.add_argument("positions", type=int, nargs="+")
    move.add_argument("--to", type=int, required=True, dest="target")

    shift = sub.add_parser("shift", help="Move entries one step up or down")
    shift.add_argument("positions", type=int, nargs="+")
    shift.add_argument("--by", type=int, choices=(-1, 1), required=True, dest="delta")

    swap = sub.add_parser("swap", help="Exchange two entries")
    swap.add_argument("positions", type=int, nargs=2)

    delete = sub.add_parser("delete", help="Remove entries from the manifest")
    delete.add_argument("positions", type=int, nargs="+")
    delete.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def run(argv: Optional[List[str]] = None, out=None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    manifest = args.manifest or settings.gallery_manifest
    session = GallerySession(GalleryManifestStore(manifest))

    if args.command == "show":
        _print_entries(session, out)
        return 0
    if args.command == "check":
        if is_densely_numbered(GalleryManifestStore(manifest).load()):
            out.write("ok\n")
            return 0
        out.write("manifest numbering is not 1..N\n")
        return 1

    try:
        _select_positions(session, args.positions)
        if args.command == "move":
            session.move_to_position(args.target)
        elif args.command == "shift":
            if not session.move_by(args.delta):
                out.write("selection is already at the edge, nothing moved\n")
                return 1
        elif args.command == "swap":
            session.swap()
        elif args.command == "delete":
            if not args.yes:
                out.write(f"refusing to delete {len(session.selected)} entries without --yes\n")
                return 1
            session.delete_selected(confirmed=True)
    except OrderingError as e:
        out.write(f"error: {e}\n")
        return 2

    if session.has_changes:
        session.save()
        out.write(f"saved {len(session)} entries to {manifest}\n")
    else:
        out.write("no changes\n")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
