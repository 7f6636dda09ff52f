import pytest

from mixtable import InvalidArgument, Table
from mixtable.settings import bind_settings

ARGS = [1, 2, 3, 4, 5, {'k': 4}, 7, 8, {'v': 10}]
ARRAY_VALS = [arg for arg in ARGS if not isinstance(arg, dict)]


@pytest.fixture
def table() -> Table:
    return Table(*ARGS)


def test_construct_splits_values_and_fields(table: Table):
    assert table.to_list() == [1, 2, 3, 4, 5, 7, 8]
    assert len(table) == 7
    assert dict(table.fields) == {'k': 4, 'v': 10}


def test_bundle_position_does_not_matter():
    for t in (Table({'k': 'x'}, 1, 2, 3), Table(1, {'k': 'x'}, 2, 3), Table(1, 2, 3, {'k': 'x'})):
        assert t.to_list() == [1, 2, 3]
        assert t['k'] == 'x'


def test_later_bundles_override_earlier_ones():
    t = Table({'a': 1, 'b': 2}, {'a': 3})
    assert dict(t.fields) == {'a': 3, 'b': 2}


def test_empty_construction():
    t = Table()
    assert t.to_list() == []
    assert dict(t.fields) == {}
    assert len(t) == 0
    assert not t


def test_of_is_an_alias_constructor():
    assert Table.of(1, {'a': 2}) == Table(1, {'a': 2})


def test_returns_the_value_at_index(table: Table):
    for i, val in enumerate(ARRAY_VALS):
        assert table[i] == val
    assert table[-1] == 8
    assert table[-7] == 1


def test_out_of_range_index_is_none(table: Table):
    assert table[7] is None
    assert table[500] is None
    assert table[-8] is None
    assert table.get(500, 'default') == 'default'


def test_returns_the_value_at_key(table: Table):
    assert table['k'] == 4
    assert table['v'] == 10
    assert table['missing'] is None
    assert table.get('missing', 0) == 0


def test_integer_field_keys_are_wrapped():
    t = Table('a', 'b', {3: 'three'})
    assert (3,) in t.fields
    assert 3 not in t.fields
    assert t[(3,)] == 'three'
    assert t[3] is None
    assert t.keys() == [(3,)]


def test_opaque_field_keys():
    t = Table({'two words': 1, 2.5: 'float', True: 'yes', ('a', 'b'): 'pair'})
    assert t['two words'] == 1
    assert t[2.5] == 'float'
    assert t[True] == 'yes'
    assert t[('a', 'b')] == 'pair'


def test_slices_and_ranges():
    t = Table(2, 23, 54, {'a': 4}, 49)
    assert t[2:4] == [54, 49]
    assert t[range(1, 3)] == [23, 54]
    assert t[10:20] == []
    assert t[::-1] == [49, 54, 23, 2]

    with pytest.raises(InvalidArgument):
        _ = t[::0]


def test_start_length_slice():
    t = Table(1, 2, 3, 4, 5)
    assert t.slice(1, 2) == [2, 3]
    assert t.slice(-2, 5) == [4, 5]
    assert t.slice(5, 1) == []
    assert t.slice(6, 1) == []
    assert t.slice(-6, 2) == []
    assert t.slice(0, 0) == []
    assert t.slice(2) == 3

    with pytest.raises(InvalidArgument):
        t.slice(1, -1)
    with pytest.raises(InvalidArgument):
        t.slice('a', 1)


def test_updates_the_value_at_index(table: Table):
    assert table[3] == 4
    table[3] = 34903489034
    assert table[3] == 34903489034
    table[-1] = 'last'
    assert table.last == 'last'


def test_sparse_write_pads_with_none():
    t = Table(54)
    t[4] = 100
    assert t.to_list() == [54, None, None, None, 100]
    assert len(t) == 5


def test_creates_a_new_value_at_index(table: Table):
    i = 500
    assert table[i] is None
    table[i] = 'something_new'
    assert table[i] == 'something_new'
    assert table.size == i + 1


def test_negative_write_before_start_is_invalid():
    t = Table(1, 2)
    with pytest.raises(InvalidArgument):
        t[-3] = 0
    with pytest.raises(ValueError):
        t.set(-3, 0)
    assert t.to_list() == [1, 2]


def test_max_sparse_gap_setting():
    bind_settings(max_sparse_gap=2)
    t = Table(1)
    t[3] = 'ok'
    assert t.to_list() == [1, None, None, 'ok']

    with pytest.raises(InvalidArgument):
        t[10] = 'too far'
    assert len(t) == 4


def test_slice_assignment():
    t = Table(1, 2, 3, 4)
    t[1:3] = ['a', 'b', 'c']
    assert t.to_list() == [1, 'a', 'b', 'c', 4]

    with pytest.raises(InvalidArgument):
        t[::2] = ['x']


def test_key_write_round_trip(table: Table):
    key = 'something_long_and_fake'
    assert table[key] is None
    table[key] = 0b0110
    assert table[key] == 6
    assert getattr(table, key) == 6

    table['v'] = 50000000
    assert table['v'] == 50000000
    assert table.v == 50000000


def test_set_returns_the_table():
    t = Table()
    assert t.set('a', 1).set(0, 'x') is t
    assert t.to_list() == ['x']
    assert t.a == 1


def test_start_length_pair_as_key():
    t = Table(1, 2, 3, 4, 5)
    assert t[1, 2] == [2, 3]
    assert t[-2, 5] == [4, 5]
    assert t[6, 1] == []
    assert t.get((0, 3)) == [1, 2, 3]

    with pytest.raises(InvalidArgument):
        _ = t[1, -1]


def test_start_length_pair_write():
    t = Table(1, 2, 3, 4, 5)
    t[1, 2] = ['a']
    assert t.to_list() == [1, 'a', 4, 5]

    with pytest.raises(InvalidArgument):
        t[9, 1] = ['x']


def test_pairs_that_are_not_two_ints_stay_field_keys():
    t = Table(1, 2, {(True, 1): 'bool pair', (1, 2, 3): 'triple', ('a', 1): 'mixed'})
    assert t[True, 1] == 'bool pair'
    assert t[1, 2, 3] == 'triple'
    assert t['a', 1] == 'mixed'
