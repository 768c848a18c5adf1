from dataclasses import dataclass


@dataclass
class IdCounter:
    """Strictly increasing item id source.

    Ids are handed out once and never returned, so an id stays unique
    for the whole session even after its item is removed.
    """

    next_id: int = 1

    def issue(self) -> int:
        issued = self.next_id
        self.next_id += 1
        return issued

    def peek(self) -> int:
        return self.next_id
