"""
Gallery Ordering

An editing session over the gallery manifest.

The session holds the ordered entries and a multi-selection of indices in
memory. Operations reorder, swap or delete the selected entries and renumber
the whole sequence 1..N afterwards. Nothing is durable until save(); reset()
throws the edits away and reloads the last saved manifest.

Precondition failures raise OrderingError before any state is touched.
"""
import enum
import logging
from typing import List, Optional, Protocol, Set

from ..models.gallery import GalleryEntry, renumber

logger = logging.getLogger(__name__)


class OrderingError(ValueError):
    """A gallery operation was refused; the session is unchanged."""


class ManifestSource(Protocol):
    """Where a session loads its entries from and saves them to."""

    def load(self) -> List[GalleryEntry]: ...

    def save(self, entries: List[GalleryEntry]) -> object: ...


class SelectMode(str, enum.Enum):
    """How a click changes the selection."""
    NONE = "none"      # plain click
    RANGE = "range"    # shift+click
    TOGGLE = "toggle"  # ctrl/cmd+click


class GallerySession:
    """In-memory reordering of gallery entries with multi-select."""

    def __init__(self, source: ManifestSource):
        self.source = source
        self.entries: List[GalleryEntry] = []
        self.selected: Set[int] = set()
        self.last_clicked: Optional[int] = None
        self._saved: List[GalleryEntry] = []
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def has_changes(self) -> bool:
        """True when the order differs from the last saved manifest."""
        if len(self.entries) != len(self._saved):
            return True
        return any(a.url != b.url for a, b in zip(self.entries, self._saved))

    @property
    def selection(self) -> List[int]:
        """Selected indices in ascending order."""
        return sorted(self.selected)

    def _set_entries(self, entries: List[GalleryEntry]) -> None:
        self.entries = renumber(entries)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.entries):
            raise OrderingError(f"Index {index} is outside 0-{len(self.entries) - 1}")

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, index: int, mode: SelectMode = SelectMode.NONE) -> None:
        """
        Update the selection as a click on index would.

        Args:
            index: 0-based entry index
            mode: NONE replaces the selection (clicking the sole selected
                entry clears it), RANGE adds last_clicked..index inclusive,
                TOGGLE flips one index
        """
        self._check_index(index)
        mode = SelectMode(mode)

        if mode is SelectMode.RANGE and self.last_clicked is not None:
            start, end = sorted((self.last_clicked, index))
            self.selected.update(range(start, end + 1))
        elif mode is SelectMode.TOGGLE:
            self.selected ^= {index}
        elif self.selected == {index}:
            self.selected = set()
        else:
            self.selected = {index}

        self.last_clicked = index

    def select_all(self) -> None:
        self.selected = set(range(len(self.entries)))

    def clear_selection(self) -> None:
        self.selected = set()
        self.last_clicked = None

    # ------------------------------------------------------------------
    # Reordering
    # ------------------------------------------------------------------

    def _move_block(self, target_idx: int) -> int:
        """Move the selected block so it starts at target_idx; returns the insert offset."""
        ordered = self.selection
        chosen = set(ordered)
        block = [self.entries[i] for i in ordered]
        remaining = [e for i, e in enumerate(self.entries) if i not in chosen]

        removed_before = sum(1 for i in ordered if i < target_idx)
        insert_at = max(0, min(len(remaining), target_idx - removed_before))

        self._set_entries(remaining[:insert_at] + block + remaining[insert_at:])
        self.selected = set(range(insert_at, insert_at + len(block)))
        return insert_at

    def move_to_position(self, target: int) -> int:
        """
        Move the selected entries, in their current relative order, to a
        1-based position.

        Returns:
            0-based index where the block now starts.

        Raises:
            OrderingError: If target is outside 1..N.
        """
        if not 1 <= target <= len(self.entries):
            raise OrderingError(f"Position must be between 1 and {len(self.entries)}")
        if not self.selected:
            return -1
        insert_at = self._move_block(target - 1)
        logger.debug(f"Moved {len(self.selected)} entries to position {target}")
        return insert_at

    def move_by(self, delta: int) -> bool:
        """
        Shift every selected entry one step up (-1) or down (+1).

        Returns:
            False without changes when the selection already touches the edge.
        """
        if delta not in (-1, 1):
            raise OrderingError("delta must be -1 or +1")
        ordered = self.selection
        if not ordered:
            return False
        if delta < 0 and ordered[0] == 0:
            return False
        if delta > 0 and ordered[-1] == len(self.entries) - 1:
            return False

        items = list(self.entries)
        # Walk toward the direction of travel so adjacent selected entries move together
        for idx in (ordered if delta < 0 else reversed(ordered)):
            items[idx], items[idx + delta] = items[idx + delta], items[idx]

        self._set_entries(items)
        self.selected = {idx + delta for idx in ordered}
        return True

    def swap(self) -> None:
        """Exchange the two selected entries."""
        if len(self.selected) != 2:
            raise OrderingError("Select exactly two entries to swap")
        a, b = self.selection
        items = list(self.entries)
        items[a], items[b] = items[b], items[a]
        self._set_entries(items)
        self.clear_selection()

    def delete_selected(self, confirmed: bool = False) -> int:
        """
        Remove the selected entries.

        Destructive: nothing happens unless confirmed is True.

        Returns:
            Number of entries removed.
        """
        if not self.selected or not confirmed:
            return 0
        count = len(self.selected)
        self._set_entries([e for i, e in enumerate(self.entries) if i not in self.selected])
        self.clear_selection()
        return count

    def drag_start(self, index: int) -> None:
        """Begin dragging index; an unselected entry becomes the only selection."""
        self._check_index(index)
        if index not in self.selected:
            self.selected = {index}

    def drag_drop(self, drop_index: int) -> int:
        """Drop the selected block onto the 0-based drop_index and keep it selected."""
        self._check_index(drop_index)
        if not self.selected:
            return -1
        return self._move_block(drop_index)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard in-memory edits and reload the saved manifest."""
        loaded = sorted(self.source.load(), key=lambda e: e.number)
        self._saved = renumber(loaded)
        self.entries = list(self._saved)
        self.clear_selection()

    def save(self) -> object:
        """Persist the current order verbatim as the new manifest (last writer wins)."""
        result = self.source.save(list(self.entries))
        self._saved = list(self.entries)
        logger.info(f"Saved gallery order ({len(self.entries)} entries)")
        return result
