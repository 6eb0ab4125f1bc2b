import pytest

from taxicat.categorical import MISSING, CategoricalColumn
from taxicat.errors import DuplicateLevel

pl = pytest.importorskip('polars')

from taxicat.dataflow.polars_adapter import PolarsFrameAdapter  # noqa: E402


def trips_df():
    return pl.DataFrame({
        'payment_type': [1, 2, 1, 5, None],
        'store_and_fwd_flag': ['N', 'N', 'Y', 'N', 'N'],
        'fare_amount': [8.5, 12.0, 6.5, 20.0, 3.0],
    })


def test_source_values_unknown_column():
    with pytest.raises(KeyError):
        PolarsFrameAdapter().source_values(trips_df(), 'RatecodeID')


def test_encode_with_labels():
    df = trips_df()
    new_df, cat = PolarsFrameAdapter().encode(
        df, 'payment_type', [1, 2, 3, 4],
        labels=['Credit card', 'Cash', 'No charge', 'Dispute'], on_missing=None)

    assert cat.to_list() == ['Credit card', 'Cash', 'Credit card', MISSING, MISSING]
    ser = new_df.get_column('payment_type')
    assert ser.dtype == pl.Enum(['Credit card', 'Cash', 'No charge', 'Dispute'])
    assert ser.to_list() == ['Credit card', 'Cash', 'Credit card', None, None]
    assert new_df.columns == df.columns
    assert df.get_column('payment_type').dtype == pl.Int64


def test_integer_levels_cast_to_strings():
    new_df, cat = PolarsFrameAdapter().encode(trips_df(), 'payment_type', None, on_missing=None)
    assert cat.levels == (1, 2, 5)
    assert new_df.get_column('payment_type').to_list() == ['1', '2', '1', '5', None]


def test_enum_collision_rejected():
    cat = CategoricalColumn.build([1, '1'], levels=[1, '1'], on_missing=None)
    with pytest.raises(DuplicateLevel):
        PolarsFrameAdapter().to_native(cat, 'x')


def test_reencode_enum_column():
    adapter = PolarsFrameAdapter()
    df, _ = adapter.encode(trips_df(), 'store_and_fwd_flag', ['Y', 'N'], on_missing=None)
    _, cat = adapter.encode(df, 'store_and_fwd_flag', ['N'], on_missing=None)
    assert cat.value_counts(include_missing=True) == {'N': 4, MISSING: 1}


def test_counts_frame():
    cat = CategoricalColumn.build(['b', 'x', 'b'], levels=['a', 'b'], on_missing=None)
    counts = PolarsFrameAdapter().counts_frame(cat, include_missing=True)
    expected = pl.DataFrame(
        {'level': ['a', 'b', None], 'count': [0, 2, 1]},
        schema={'level': pl.String, 'count': pl.Int64},
    )
    assert counts.equals(expected)
