import json

import pandas as pd
import pytest

from analyzers.spreadsheet_analyzer import SpreadsheetAnalyzer
from parsers.csv_parser import CSVParser

HEADERS = ['product', 'sales', 'date', 'active']
ROWS = [
    ['Widget', 100.5, '2024-01-01', 'yes'],
    ['Gadget', 200, '2024-01-02', 'no'],
    ['Widget', 150, '2024-01-03', 'yes'],
    ['Doohickey', 175.25, '2024-01-04', 'yes'],
    ['Gizmo', 5000, '2024-01-05', 'no'],
    ['Widget', 120, '2024-01-06', 'yes'],
]


@pytest.fixture
def results():
    return SpreadsheetAnalyzer(preview_rows=3).analyze_rows(HEADERS, ROWS)


def test_summary(results):
    summary = results['summary']

    assert summary['total_rows'] == 6
    assert summary['total_columns'] == 4
    assert summary['headers'] == HEADERS
    assert summary['numeric_columns'] == 1
    assert summary['date_columns'] == 1
    assert summary['boolean_columns'] == 1
    assert summary['text_columns'] == 1
    assert summary['data_quality'] == 100


def test_data_types(results):
    assert results['data_types'] == {
        'product': 'text',
        'sales': 'numeric',
        'date': 'date',
        'active': 'boolean',
    }


def test_numeric_statistics(results):
    sales = results['column_stats']['sales']

    assert sales['count'] == 6
    assert sales['sum'] == pytest.approx(5745.75)
    assert sales['median'] == pytest.approx(162.625)
    assert results['column_stats']['product']['most_common'] == 'Widget'


def test_outlier_is_flagged(results):
    assert results['outliers']['sales']['count'] == 1
    assert results['outliers']['sales']['values'] == [5000.0]


def test_preview_rows(results):
    assert len(results['sample_data']) == 3
    assert results['sample_data'][0] == ['Widget', 100.5, '2024-01-01', 'yes']


def test_results_are_json_ready(results):
    assert json.loads(json.dumps(results)) == results


def test_analyze_parsed_csv(sales_csv):
    results = SpreadsheetAnalyzer().analyze(CSVParser().parse(sales_csv))

    assert results['data_types']['units'] == 'numeric'
    assert results['correlations']['matrix']['sales']['units'] == pytest.approx(1.0, abs=0.01)
    assert results['distributions']['sales']['histogram']['bins'][0] == 5


def test_table_with_headers_only():
    results = SpreadsheetAnalyzer().analyze_rows(['a', 'b'], [])

    assert results['summary']['total_rows'] == 0
    assert results['summary']['data_quality'] == 0
    assert results['column_stats']['a']['count'] == 0
    assert results['correlations'] == {}


def test_duplicate_headers_are_analyzed_separately():
    results = SpreadsheetAnalyzer().analyze_rows(['amount', 'amount'], [[1, 'x'], [3, 'y']])

    assert results['summary']['headers'] == ['amount', 'amount.1']
    assert results['data_types'] == {'amount': 'numeric', 'amount.1': 'text'}
    assert results['column_stats']['amount']['sum'] == 4


def test_dataframe_with_duplicate_columns():
    df = pd.DataFrame([[1, 2], [3, 4]], columns=['v', 'v'], dtype=object)
    results = SpreadsheetAnalyzer().analyze(df)

    assert list(results['data_types']) == ['v', 'v.1']
    assert results['column_stats']['v.1']['mean'] == 3


def test_overflowing_numbers_are_left_out_of_statistics():
    results = SpreadsheetAnalyzer().analyze_rows(['v'], [['1'], ['2'], ['1e999']])

    assert results['data_types']['v'] == 'numeric'
    assert results['column_stats']['v']['count'] == 2
    assert results['column_stats']['v']['max'] == 2
    assert sum(results['distributions']['v']['histogram']['bins']) == 2
    json.dumps(results)


def test_collision_between_unnamed_and_named_columns(tmp_path):
    path = tmp_path / 'collide.csv'
    path.write_text("a,,Column_2\n1,2,3\n4,5,6\n", encoding='utf-8')

    results = SpreadsheetAnalyzer().analyze(CSVParser().parse(path))

    assert results['summary']['total_columns'] == 3
    assert results['column_stats']['Column_2']['sum'] == 9
