from dataclasses import dataclass

from pagetodo.core.flatten import GroupHeader, ItemRow, Row


def wrap_step(current: int | None, length: int, delta: int) -> int | None:
    """Move an index by `delta` over `length` slots with wraparound.

    An unset index lands on 0. With nothing to move over the index is
    returned unchanged.
    """
    if length <= 0:
        return current
    if current is None:
        return 0
    return (current + delta) % length


@dataclass
class Selection:
    """Page index plus one flat cursor into the flattened rows of that page.

    Group and item are never stored here; `resolve` derives them from the
    row under the cursor.
    """

    selected_page: int | None = None
    flat_cursor: int | None = None

    def move_page(self, n_pages: int, delta: int) -> None:
        moved = wrap_step(self.selected_page, n_pages, delta)
        if moved != self.selected_page:
            # ページが変わったら先頭行から
            self.flat_cursor = None
        self.selected_page = moved

    def select_page(self, page: int | None) -> None:
        if page != self.selected_page:
            self.flat_cursor = None
        self.selected_page = page

    def move_cursor(self, rows: list[Row], delta: int) -> None:
        self.flat_cursor = wrap_step(self.flat_cursor, len(rows), delta)

    def sync(self, rows: list[Row]) -> None:
        """Clamp the cursor into ``[0, len(rows) - 1]``, or clear it when empty."""
        if not rows:
            self.flat_cursor = None
            return
        cursor = self.flat_cursor if self.flat_cursor is not None else 0
        self.flat_cursor = max(0, min(cursor, len(rows) - 1))

    def resolve(self, rows: list[Row]) -> tuple[int | None, int | None]:
        """Return ``(group, item)`` for the row under the cursor."""
        if self.flat_cursor is None or not 0 <= self.flat_cursor < len(rows):
            return None, None
        match rows[self.flat_cursor]:
            case GroupHeader(group=g):
                return g, None
            case ItemRow(group=g, item=i):
                return g, i
            case _:
                return None, None

    def locate(self, rows: list[Row], group: int, item: int | None = None) -> None:
        """Put the cursor on a given header/item row if it is visible."""
        target = GroupHeader(group) if item is None else ItemRow(group, item)
        try:
            self.flat_cursor = rows.index(target)
        except ValueError:
            self.sync(rows)

    def clear(self) -> None:
        self.selected_page = None
        self.flat_cursor = None
