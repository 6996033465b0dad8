from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from analyzers.data_type_analyzer import DataTypeAnalyzer, is_empty, to_number


@pytest.fixture
def analyzer():
    return DataTypeAnalyzer()


def column(values):
    return pd.DataFrame({'col': values}, dtype=object)


@pytest.mark.parametrize('value, expected', [
    (42, 'numeric'),
    (3.5, 'numeric'),
    (np.int64(7), 'numeric'),
    ('3.14', 'numeric'),
    ('-1e3', 'numeric'),
    (' 12 ', 'numeric'),
    (True, 'boolean'),
    ('Yes', 'boolean'),
    ('FALSE', 'boolean'),
    ('2024-01-15', 'date'),
    ('01/15/2024', 'date'),
    ('15.01.2024', 'date'),
    ('2024-01-15T10:30:00', 'date'),
    (datetime(2024, 1, 1), 'date'),
    (pd.Timestamp('2024-01-01'), 'date'),
    ('13/45/2024', 'text'),
    ('1,234', 'text'),
    ('hello', 'text'),
    (float('inf'), 'text'),
    ('1e999', 'text'),
    ('-1e999', 'text'),
])
def test_classify_value(analyzer, value, expected):
    assert analyzer.classify_value(value) == expected


def test_majority_vote_picks_dominant_type(analyzer):
    result = analyzer.analyze(column(['1', '2', 'x']))['col']

    assert result['inferred_type'] == 'numeric'
    assert result['confidence'] == pytest.approx(2 / 3)
    assert result['type_counts'] == {'numeric': 2, 'date': 0, 'boolean': 0, 'text': 1}


def test_tie_falls_back_to_text(analyzer):
    result = analyzer.analyze(column(['1', 'a']))['col']

    assert result['inferred_type'] == 'text'
    assert result['confidence'] == 0.5


def test_date_and_boolean_columns(analyzer):
    df = pd.DataFrame({
        'when': ['2024-01-01', '2024-02-01', 'soon'],
        'flag': ['yes', 'no', 'yes'],
    }, dtype=object)
    results = analyzer.analyze(df)

    assert results['when']['inferred_type'] == 'date'
    assert results['flag']['inferred_type'] == 'boolean'


def test_empty_column_is_text(analyzer):
    result = analyzer.analyze(column([None, '', '   ']))['col']

    assert result['inferred_type'] == 'text'
    assert result['confidence'] == 0.0
    assert result['empty_count'] == 3
    assert result['fill_rate'] == 0.0
    assert result['sample_values'] == []


def test_counts_and_fill_rate(analyzer):
    result = analyzer.analyze(column(['1', None, '3', '3']))['col']

    assert result['total_count'] == 4
    assert result['non_empty_count'] == 3
    assert result['empty_count'] == 1
    assert result['fill_rate'] == 75.0
    assert result['unique_count'] == 2
    assert result['sample_values'] == ['1', '3', '3']


def test_only_sampled_cells_vote():
    analyzer = DataTypeAnalyzer(sample_size=3)
    result = analyzer.analyze(column(['a', 'b', 'c', '1', '2', '3', '4']))['col']

    assert result['inferred_type'] == 'text'
    assert result['sample_size'] == 3
    assert result['non_empty_count'] == 7


def test_table_without_rows(analyzer):
    result = analyzer.analyze(pd.DataFrame({'col': []}, dtype=object))['col']

    assert result['fill_rate'] == 0.0
    assert result['inferred_type'] == 'text'


@pytest.mark.parametrize('value, expected', [
    ('12', 12.0),
    (' -2.5 ', -2.5),
    (7, 7.0),
    (True, None),
    ('abc', None),
    ('1e999', None),
    (float('nan'), None),
    (None, None),
])
def test_to_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize('value, expected', [
    (None, True),
    ('', True),
    ('  ', True),
    (float('nan'), True),
    (pd.NaT, True),
    (0, False),
    ('0', False),
    (False, False),
])
def test_is_empty(value, expected):
    assert is_empty(value) is expected


def test_overflowing_literals_vote_as_text(analyzer):
    result = analyzer.analyze(column(['1', '2', '1e999']))['col']

    assert result['inferred_type'] == 'numeric'
    assert result['type_counts']['text'] == 1
