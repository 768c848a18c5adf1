from dataclasses import dataclass

from pagetodo.core.models import Page


@dataclass(frozen=True)
class GroupHeader:
    group: int


@dataclass(frozen=True)
class ItemRow:
    group: int
    item: int


Row = GroupHeader | ItemRow


def flatten(page: Page) -> list[Row]:
    """Project a page's group/item tree onto one ordered list of rows.

    Each group contributes its header row, followed by one row per item
    when ``show_items`` is on. Recompute after every mutation; the rows
    hold indices, not references.
    """
    rows: list[Row] = []
    for group_index, group in enumerate(page.groups):
        rows.append(GroupHeader(group_index))
        if group.show_items:
            rows.extend(ItemRow(group_index, item_index) for item_index in range(len(group.items)))
    return rows
