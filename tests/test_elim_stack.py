import threading

import pytest

from conkit.elim_stack import Contended, ElimStack, Node, Stack, TreiberStack


class AlwaysContended(Stack):
    """Inner stack whose every attempt loses a race, forcing elimination."""

    def try_push(self, node):
        raise Contended

    def try_pop(self):
        raise Contended

    def is_empty(self):
        return False


def run_push_pop(stack, threads=10, steps=10_000):
    failures = []

    def work():
        for i in range(steps):
            stack.push(i)
            try:
                stack.pop()
            except IndexError:
                failures.append(i)

    workers = [threading.Thread(target=work) for _ in range(threads)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    return failures


@pytest.mark.parametrize("factory", [TreiberStack, ElimStack])
def test_lifo_order(factory):
    stack = factory()
    for v in [1, 2, 3]:
        stack.push(v)
    assert [stack.pop(), stack.pop(), stack.pop()] == [3, 2, 1]


@pytest.mark.parametrize("factory", [TreiberStack, ElimStack])
def test_pop_empty_raises(factory):
    stack = factory()
    with pytest.raises(IndexError):
        stack.pop()


@pytest.mark.parametrize("factory", [TreiberStack, ElimStack])
def test_is_empty(factory):
    stack = factory()
    assert stack.is_empty() is True
    stack.push("a")
    assert stack.is_empty() is False
    assert stack.pop() == "a"
    assert stack.is_empty() is True


def test_none_value_round_trips():
    stack = TreiberStack()
    stack.push(None)
    assert stack.is_empty() is False
    assert stack.pop() is None
    assert stack.is_empty() is True


def test_treiber_try_push_and_try_pop_nodes():
    stack = TreiberStack()
    first, second = Node(10), Node(20)
    stack.try_push(first)
    stack.try_push(second)
    assert second.next is first
    assert stack.try_pop() is second
    assert stack.try_pop() is first
    assert stack.try_pop() is None


def test_treiber_concurrent_push():
    stack = TreiberStack()
    assert run_push_pop(stack) == []
    with pytest.raises(IndexError):
        stack.pop()


def test_elim_concurrent_push():
    stack = ElimStack()
    assert run_push_pop(stack) == []
    with pytest.raises(IndexError):
        stack.pop()


def test_elim_try_pop_without_offer_is_contended():
    stack = ElimStack(AlwaysContended())
    with pytest.raises(Contended):
        stack.try_pop()


def test_elim_unmatched_push_is_contended_and_slot_freed():
    stack = ElimStack(AlwaysContended())
    with pytest.raises(Contended):
        stack.try_push(Node(1))
    with pytest.raises(Contended):
        stack.try_pop()


def test_elimination_hands_value_from_push_to_pop():
    stack = ElimStack(AlwaysContended())
    pusher = threading.Thread(target=stack.push, args=("handed",))
    pusher.start()
    value = stack.pop()
    pusher.join(timeout=10)
    assert value == "handed"
    assert not pusher.is_alive()


def test_elim_delegates_to_inner_when_uncontended():
    inner = TreiberStack()
    stack = ElimStack(inner)
    stack.push(5)
    assert inner.is_empty() is False
    assert inner.pop() == 5
    assert stack.is_empty() is True