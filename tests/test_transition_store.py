import pytest

from PDAErrors import PDAError, InvalidState, InvalidSymbol, DeterminismViolation
from Transition import EPSILON, Transition, TransitionKey
from TransitionStore import TransitionStore


def build_store():
    return TransitionStore(3, "ab")


def assert_rejected(store, *args):
    before = store.snapshot()
    with pytest.raises(DeterminismViolation):
        store.add(*args)
    assert store.snapshot() == before


def test_key_ignores_target_and_push():
    assert Transition('a', 'Z', 'XX').key == Transition('a', 'Z', EPSILON).key
    assert Transition('a', 'Z', 'XX').key == TransitionKey('a', 'Z')
    assert hash(TransitionKey('a', 'Z')) == hash(Transition('a', 'Z', 'Q').key)
    assert TransitionKey('a', 'Z') != TransitionKey('a', EPSILON)


def test_push_symbols_leave_first_character_on_top():
    assert Transition('a', 'Z', 'XY').push_symbols() == ['Y', 'X']
    assert Transition('a', 'Z', EPSILON).push_symbols() == []
    assert Transition('a', 'Z', '').push_symbols() == []


def test_same_input_and_pop_conflicts_regardless_of_target():
    store = build_store()
    store.add(0, 0, 'a', 'Z', 'XZ')
    assert_rejected(store, 0, 1, 'a', 'Z', 'Y')
    assert_rejected(store, 0, 0, 'a', 'Z', 'XZ')


def test_epsilon_input_against_concrete_input():
    store = build_store()
    store.add(0, 0, 'a', 'Z', EPSILON)
    assert_rejected(store, 0, 1, EPSILON, 'Z', EPSILON)


def test_concrete_input_against_epsilon_input():
    store = build_store()
    store.add(0, 1, EPSILON, 'Z', EPSILON)
    assert_rejected(store, 0, 0, 'b', 'Z', 'Z')


def test_epsilon_pop_against_concrete_pop():
    store = build_store()
    store.add(0, 0, 'a', 'Z', EPSILON)
    assert_rejected(store, 0, 2, 'a', EPSILON, 'Y')


def test_concrete_pop_against_epsilon_pop():
    store = build_store()
    store.add(0, 0, 'a', EPSILON, 'Y')
    assert_rejected(store, 0, 1, 'a', 'Y', EPSILON)


def test_lambda_lambda_always_rejected():
    store = build_store()
    assert_rejected(store, 0, 0, EPSILON, EPSILON, 'X')
    assert_rejected(store, 7, -1, EPSILON, EPSILON, EPSILON)
    assert store.count() == 0


def test_non_conflicting_transitions_are_accepted():
    store = build_store()
    store.add(0, 0, 'a', 'Z', 'XZ')
    store.add(0, 1, 'b', 'Z', EPSILON)
    store.add(0, 2, 'a', 'Y', EPSILON)
    store.add(0, 1, EPSILON, 'W', EPSILON)
    # same key from another source state is independent
    store.add(1, 0, 'a', 'Z', 'XZ')
    assert len(store) == 5


def test_invalid_states_and_symbols():
    store = build_store()
    with pytest.raises(InvalidState):
        store.add(3, 0, 'a', 'Z', EPSILON)
    with pytest.raises(InvalidState):
        store.add(0, -1, 'a', 'Z', EPSILON)
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 'c', 'Z', EPSILON)
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 'a', 'ZZ', EPSILON)
    assert store.count() == 0


def test_popping_bottom_requires_pushing_it_back():
    store = build_store()
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 'a', '$', 'X')
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 'a', '$', EPSILON)
    store.add(0, 0, 'a', '$', 'X$')
    store.add(0, 0, 'b', '$', '$')
    assert store.count() == 2


def test_errors_share_a_base_class():
    for error in (InvalidState, InvalidSymbol, DeterminismViolation):
        assert issubclass(error, PDAError)
        assert issubclass(error, ValueError)


def test_groups_collect_transitions_by_target():
    store = build_store()
    store.add(0, 1, 'a', 'Z', EPSILON)
    store.add(0, 2, 'b', 'Z', EPSILON)
    store.add(0, 1, 'b', 'Y', EPSILON)

    groups = store.groups(0)
    assert [group.target for group in groups] == [1, 2]
    assert groups[0].transitions == [
        Transition('a', 'Z', EPSILON),
        Transition('b', 'Y', EPSILON),
    ]
    assert store.groups(1) == []


def test_lookup_prefers_exact_pop_then_epsilon_pop():
    store = build_store()
    store.add(0, 1, 'a', 'Z', 'Q')
    store.add(0, 2, 'b', EPSILON, 'R')

    target, transition = store.lookup(0, 'a', 'Z')
    assert (target, transition.push) == (1, 'Q')

    target, transition = store.lookup(0, 'b', 'Z')
    assert (target, transition.push) == (2, 'R')

    assert store.lookup(0, 'a', 'Y') is None
    assert store.lookup(1, 'a', 'Z') is None


def test_to_frame():
    store = build_store()
    store.add(0, 1, 'a', 'Z', 'XZ')
    store.add(2, 0, 'b', EPSILON, EPSILON)

    df = store.to_frame()
    assert list(df.columns) == ['Source', 'Consumed', 'Pop', 'Push', 'Target']
    assert df.values.tolist() == [
        [0, 'a', 'Z', 'XZ', 1],
        [2, 'b', EPSILON, EPSILON, 0],
    ]


def test_epsilon_marker_cannot_be_pushed():
    store = build_store()
    store.add(0, 0, 'b', 'Z', EPSILON)
    before = store.snapshot()

    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 'a', '$', 'X.$')
    with pytest.raises(InvalidSymbol):
        store.add(0, 1, 'a', 'Z', '..')
    assert store.snapshot() == before

    store.add(0, 1, 'a', 'Z', EPSILON)
    assert store.count() == 2


def test_bool_is_not_a_state():
    store = build_store()
    with pytest.raises(InvalidState):
        store.add(True, 0, 'a', 'Z', EPSILON)
    with pytest.raises(InvalidState):
        store.add(0, False, 'a', 'Z', EPSILON)
    with pytest.raises(InvalidState):
        store.groups(True)
    assert store.count() == 0


def test_non_string_input_symbol():
    store = build_store()
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, ['a'], 'Z', EPSILON)
    with pytest.raises(InvalidSymbol):
        store.add(0, 0, 1, 'Z', EPSILON)
    assert store.count() == 0
