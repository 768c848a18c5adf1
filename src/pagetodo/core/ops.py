from dataclasses import dataclass, field

from pyresults import Err, Ok, Result

from pagetodo.core.models import Group, Item, ItemState, Page, next_item_state
from pagetodo.util.ids import IdCounter
from pagetodo.util.logger import setup_logger

logger = setup_logger("pagetodo")


@dataclass(frozen=True)
class NotFound:
    """A page/group/item index that does not resolve against its owner."""

    what: str
    path: tuple[int, ...]

    def __str__(self) -> str:
        return f"{self.what} not found: {self.path}"


@dataclass
class Hierarchy:
    """Pages -> Groups -> Items, addressed by index paths.

    Every mutator takes indices resolved against the owning parent.
    A stale index never raises: the call changes nothing and returns
    ``Err(NotFound)``.

    Public API:
        - add_page() / rename_page()
        - add_group() / rename_group() / remove_group()
        - toggle_group_visibility() / clear_group_items()
        - add_todo() / rename_item() / remove_item() / move_item()
        - set_item_state() / cycle_item_state() / set_item_description()
    """

    pages: list[Page] = field(default_factory=list)
    ids: IdCounter = field(default_factory=IdCounter)

    # ---- lookup ------------------------------------------------------------

    def page(self, page: int) -> Result[Page, NotFound]:
        if 0 <= page < len(self.pages):
            return Ok[Page, NotFound](self.pages[page])
        return Err[Page, NotFound](NotFound("Page", (page,)))

    def group(self, page: int, group: int) -> Result[Group, NotFound]:
        match self.page(page):
            case Ok(p):
                if 0 <= group < len(p.groups):
                    return Ok[Group, NotFound](p.groups[group])
                return Err[Group, NotFound](NotFound("Group", (page, group)))
            case Err(e):
                return Err[Group, NotFound](e)
            case _:
                return Err[Group, NotFound](NotFound("Page", (page,)))

    def item(self, page: int, group: int, item: int) -> Result[Item, NotFound]:
        match self.group(page, group):
            case Ok(g):
                if 0 <= item < len(g.items):
                    return Ok[Item, NotFound](g.items[item])
                return Err[Item, NotFound](NotFound("Item", (page, group, item)))
            case Err(e):
                return Err[Item, NotFound](e)
            case _:
                return Err[Item, NotFound](NotFound("Group", (page, group)))

    # ---- pages -------------------------------------------------------------

    def add_page(self, title: str) -> int:
        """Append a page and return its index."""
        self.pages.append(Page(title=title))
        logger.debug("page added: %r", title)
        return len(self.pages) - 1

    def rename_page(self, page: int, title: str) -> Result[None, NotFound]:
        match self.page(page):
            case Ok(p):
                p.rename(title)
                return Ok[None, NotFound](None)
            case Err(e):
                return Err[None, NotFound](e)
            case _:
                return Err[None, NotFound](NotFound("Page", (page,)))

    # ---- groups ------------------------------------------------------------

    def add_group(self, page: int, title: str) -> Result[int, NotFound]:
        """Append a group (``show_items=True``) and return its index."""
        match self.page(page):
            case Ok(p):
                p.groups.append(Group(title=title))
                logger.debug("group added: %r on page %d", title, page)
                return Ok[int, NotFound](len(p.groups) - 1)
            case Err(e):
                return Err[int, NotFound](e)
            case _:
                return Err[int, NotFound](NotFound("Page", (page,)))

    def rename_group(self, page: int, group: int, title: str) -> Result[None, NotFound]:
        match self.group(page, group):
            case Ok(g):
                g.rename(title)
                return Ok[None, NotFound](None)
            case Err(e):
                return Err[None, NotFound](e)
            case _:
                return Err[None, NotFound](NotFound("Group", (page, group)))

    def remove_group(self, page: int, group: int) -> Result[Group, NotFound]:
        match self.group(page, group):
            case Ok(_):
                removed = self.pages[page].groups.pop(group)
                logger.debug("group removed: %r (%d items)", removed.title, len(removed.items))
                return Ok[Group, NotFound](removed)
            case Err(e):
                return Err[Group, NotFound](e)
            case _:
                return Err[Group, NotFound](NotFound("Group", (page, group)))

    def toggle_group_visibility(self, page: int, group: int) -> Result[bool, NotFound]:
        """Flip ``show_items`` and return the new value. Items are kept either way."""
        match self.group(page, group):
            case Ok(g):
                return Ok[bool, NotFound](g.toggle_show_items())
            case Err(e):
                return Err[bool, NotFound](e)
            case _:
                return Err[bool, NotFound](NotFound("Group", (page, group)))

    def clear_group_items(self, page: int, group: int) -> Result[int, NotFound]:
        """Drop every item of a group and return how many were removed."""
        match self.group(page, group):
            case Ok(g):
                removed = g.clear_items()
                logger.debug("group cleared: %r (%d items)", g.title, removed)
                return Ok[int, NotFound](removed)
            case Err(e):
                return Err[int, NotFound](e)
            case _:
                return Err[int, NotFound](NotFound("Group", (page, group)))

    # ---- items -------------------------------------------------------------

    def add_todo(self, page: int, group: int, title: str) -> Result[Item, NotFound]:
        """Append a new item with a fresh id.

        The id is only drawn once the group resolves, so a failed call
        does not consume one.
        """
        match self.group(page, group):
            case Ok(g):
                item = Item(id=self.ids.issue(), title=title)
                g.items.append(item)
                logger.debug("item added: #%d %r", item.id, title)
                return Ok[Item, NotFound](item)
            case Err(e):
                return Err[Item, NotFound](e)
            case _:
                return Err[Item, NotFound](NotFound("Group", (page, group)))

    def rename_item(self, page: int, group: int, item: int, title: str) -> Result[None, NotFound]:
        match self.item(page, group, item):
            case Ok(t):
                t.rename(title)
                return Ok[None, NotFound](None)
            case Err(e):
                return Err[None, NotFound](e)
            case _:
                return Err[None, NotFound](NotFound("Item", (page, group, item)))

    def set_item_description(self, page: int, group: int, item: int, text: str) -> Result[None, NotFound]:
        match self.item(page, group, item):
            case Ok(t):
                t.description = text
                return Ok[None, NotFound](None)
            case Err(e):
                return Err[None, NotFound](e)
            case _:
                return Err[None, NotFound](NotFound("Item", (page, group, item)))

    def set_item_state(self, page: int, group: int, item: int, state: ItemState) -> Result[None, NotFound]:
        match self.item(page, group, item):
            case Ok(t):
                t.state = state
                return Ok[None, NotFound](None)
            case Err(e):
                return Err[None, NotFound](e)
            case _:
                return Err[None, NotFound](NotFound("Item", (page, group, item)))

    def cycle_item_state(self, page: int, group: int, item: int) -> Result[ItemState, NotFound]:
        match self.item(page, group, item):
            case Ok(t):
                t.state = next_item_state(t.state)
                return Ok[ItemState, NotFound](t.state)
            case Err(e):
                return Err[ItemState, NotFound](e)
            case _:
                return Err[ItemState, NotFound](NotFound("Item", (page, group, item)))

    def remove_item(self, page: int, group: int, item: int) -> Result[Item, NotFound]:
        match self.item(page, group, item):
            case Ok(_):
                removed = self.pages[page].groups[group].items.pop(item)
                logger.debug("item removed: #%d %r", removed.id, removed.title)
                return Ok[Item, NotFound](removed)
            case Err(e):
                return Err[Item, NotFound](e)
            case _:
                return Err[Item, NotFound](NotFound("Item", (page, group, item)))

    def move_item(self, page: int, group: int, item: int, delta: int) -> Result[int, NotFound]:
        """Swap an item with its neighbour and return its new index.

        Moving past either end leaves the order as it is.
        """
        match self.item(page, group, item):
            case Ok(_):
                items = self.pages[page].groups[group].items
                target = item + delta
                if not 0 <= target < len(items):
                    return Ok[int, NotFound](item)
                items[item], items[target] = items[target], items[item]
                return Ok[int, NotFound](target)
            case Err(e):
                return Err[int, NotFound](e)
            case _:
                return Err[int, NotFound](NotFound("Item", (page, group, item)))
