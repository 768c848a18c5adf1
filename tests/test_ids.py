import unittest

from pagetodo.util.ids import IdCounter


class TestIdCounter(unittest.TestCase):
    def test_starts_at_one(self) -> None:
        c = IdCounter()
        assert c.peek() == 1
        assert c.issue() == 1

    def test_strictly_increasing(self) -> None:
        c = IdCounter()
        out = [c.issue() for _ in range(5)]
        assert out == [1, 2, 3, 4, 5]
        assert c.peek() == 6

    def test_peek_does_not_consume(self) -> None:
        c = IdCounter()
        c.peek()
        c.peek()
        assert c.issue() == 1


if __name__ == "__main__":
    unittest.main()
