"""Tests for datetime coercion and sentinel replacement."""
import logging

import numpy as np
import pandas as pd
import pytest

from taxicat.cleaning import (
    coerce_datetime_columns, missing_report, replace_out_of_range, replace_sentinels,
)


def trips_df():
    return pd.DataFrame({
        'pickup_datetime': ['2016-01-01 00:00:17', '2016-01-01 00:00:53', 'not a time'],
        'dropoff_datetime': ['2016-01-01 00:12:05', None, '2016-01-01 00:31:40'],
        'fare_amount': [8.5, -3.0, 250.0],
        'passenger_count': [1, 0, 6],
        'RatecodeID': [1, 99, 2],
    })


# ============================================================================
# Tests: coerce_datetime_columns
# ============================================================================

class TestCoerceDatetimeColumns:
    def test_parses_and_coerces_bad_values(self):
        df = trips_df()
        out = coerce_datetime_columns(df, ['pickup_datetime', 'dropoff_datetime'])
        assert pd.api.types.is_datetime64_any_dtype(out['pickup_datetime'])
        assert out['pickup_datetime'][0] == pd.Timestamp('2016-01-01 00:00:17')
        assert out['pickup_datetime'].isna().tolist() == [False, False, True]
        assert out['dropoff_datetime'].isna().tolist() == [False, True, False]

    def test_input_not_mutated(self):
        df = trips_df()
        coerce_datetime_columns(df, ['pickup_datetime'])
        assert df['pickup_datetime'][2] == 'not a time'

    def test_explicit_format(self):
        df = pd.DataFrame({'when': ['01/02/2016', '13/02/2016']})
        out = coerce_datetime_columns(df, ['when'], format='%d/%m/%Y')
        assert out['when'].tolist() == [pd.Timestamp('2016-02-01'), pd.Timestamp('2016-02-13')]

    def test_utc(self):
        df = pd.DataFrame({'when': ['2016-01-01 00:00:00']})
        out = coerce_datetime_columns(df, ['when'], utc=True)
        assert str(out['when'].dt.tz) == 'UTC'

    def test_already_temporal_left_alone(self):
        df = pd.DataFrame({'when': pd.to_datetime(['2016-01-01'])})
        out = coerce_datetime_columns(df, ['when'])
        pd.testing.assert_frame_equal(out, df)

    def test_unknown_column(self):
        with pytest.raises(KeyError):
            coerce_datetime_columns(trips_df(), ['tpep_pickup_datetime'])

    def test_logs_unparseable_count(self, caplog):
        with caplog.at_level(logging.INFO, logger="taxicat.cleaning"):
            coerce_datetime_columns(trips_df(), ['pickup_datetime'])
        assert "pickup_datetime: 1 values could not be parsed" in caplog.text


# ============================================================================
# Tests: replace_out_of_range
# ============================================================================

class TestReplaceOutOfRange:
    def test_lower_bound(self):
        fare = trips_df()['fare_amount']
        out = replace_out_of_range(fare, lower=0)
        assert out.isna().tolist() == [False, True, False]
        assert out[0] == 8.5
        assert out[2] == 250.0

    def test_both_bounds_integer_column(self):
        pc = trips_df()['passenger_count']
        out = replace_out_of_range(pc, lower=1, upper=6)
        assert out.dtype == 'float64'
        assert out.isna().tolist() == [False, True, False]
        assert out[2] == 6

    def test_exclusive_bounds(self):
        ser = pd.Series([0.0, 1.0, 5.0, 6.0])
        out = replace_out_of_range(ser, lower=0, upper=6, inclusive='neither')
        assert out.isna().tolist() == [True, False, False, True]

    def test_left_and_right(self):
        ser = pd.Series([0.0, 6.0])
        assert replace_out_of_range(ser, 0, 6, inclusive='left').isna().tolist() == [False, True]
        assert replace_out_of_range(ser, 0, 6, inclusive='right').isna().tolist() == [True, False]

    def test_no_bounds_is_copy(self):
        ser = pd.Series([1, -1])
        out = replace_out_of_range(ser)
        pd.testing.assert_series_equal(out, ser)
        assert out is not ser

    def test_existing_nan_untouched(self):
        ser = pd.Series([np.nan, 2.0, -1.0])
        out = replace_out_of_range(ser, lower=0)
        assert out.isna().tolist() == [True, False, True]

    def test_custom_sentinel_keeps_int_dtype(self):
        ser = pd.Series([1, 0, 3])
        out = replace_out_of_range(ser, lower=1, sentinel=-1)
        assert out.tolist() == [1, -1, 3]
        assert out.dtype == ser.dtype

    def test_nullable_integer(self):
        ser = pd.Series([1, None, -2], dtype='Int64')
        out = replace_out_of_range(ser, lower=0)
        assert out.isna().tolist() == [False, True, True]

    def test_input_not_mutated(self):
        ser = pd.Series([-1.0, 1.0])
        replace_out_of_range(ser, lower=0)
        assert ser[0] == -1.0

    def test_logs_only_when_replacing(self, caplog):
        with caplog.at_level(logging.INFO, logger="taxicat.cleaning"):
            replace_out_of_range(pd.Series([1.0, 2.0], name='fare_amount'), lower=0)
        assert caplog.records == []

        with caplog.at_level(logging.INFO, logger="taxicat.cleaning"):
            replace_out_of_range(pd.Series([-1.0, 2.0], name='fare_amount'), lower=0)
        assert "fare_amount: replaced 1 values outside [0, None]" in caplog.text

    def test_bad_inclusive(self):
        with pytest.raises(ValueError):
            replace_out_of_range(pd.Series([1.0]), lower=0, inclusive='all')

    def test_non_numeric(self):
        with pytest.raises(TypeError):
            replace_out_of_range(pd.Series(['a']), lower=0)
        with pytest.raises(TypeError):
            replace_out_of_range(pd.Series([True, False]), lower=0)


# ============================================================================
# Tests: replace_sentinels and missing_report
# ============================================================================

def test_replace_sentinels():
    rate = trips_df()['RatecodeID']
    out = replace_sentinels(rate, [99])
    assert out.isna().tolist() == [False, True, False]
    assert out[2] == 2


def test_replace_sentinels_no_match_keeps_dtype():
    ser = pd.Series([1, 2])
    out = replace_sentinels(ser, [-999])
    pd.testing.assert_series_equal(out, ser)


def test_replace_sentinels_logs_only_when_replacing(caplog):
    with caplog.at_level(logging.INFO, logger="taxicat.cleaning"):
        replace_sentinels(pd.Series([1, 2], name='RatecodeID'), [99])
    assert caplog.records == []

    with caplog.at_level(logging.INFO, logger="taxicat.cleaning"):
        replace_sentinels(pd.Series([1, 99], name='RatecodeID'), [99])
    assert "RatecodeID: replaced 1 sentinel values [99]" in caplog.text


def test_missing_report():
    df = trips_df()
    df['fare_amount'] = replace_out_of_range(df['fare_amount'], lower=0)
    report = missing_report(df)
    assert report.index.tolist() == list(df.columns)
    assert report['fare_amount'] == 1
    assert report['dropoff_datetime'] == 1
    assert report['passenger_count'] == 0
