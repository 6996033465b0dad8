import csv
import json

import numpy as np
import pandas as pd
import pytest

from analyzers.spreadsheet_analyzer import SpreadsheetAnalyzer
from reporting.export_utils import CSV_FIELDS, ExportUtils
from reporting.json_utils import make_json_serializable


@pytest.fixture
def results():
    return SpreadsheetAnalyzer().analyze_rows(
        ['<b>name</b>', 'x', 'y'],
        [['a', 1, 2], ['b', 2, 4.1], ['c', 3, 5.9], ['d', 4, 8.2], ['e', 5, 9.8]],
    )


@pytest.fixture
def exporter(tmp_path):
    return ExportUtils(str(tmp_path / 'exports'))


@pytest.mark.parametrize('format_type', ExportUtils.formats)
def test_every_format_writes_a_file(exporter, results, format_type):
    path = exporter.export(results, format_type, 'report')

    assert path.endswith(f'.{format_type}')
    with open(path, encoding='utf-8') as f:
        assert f.read()


def test_json_export(exporter, results):
    with open(exporter.export(results, 'json', 'report'), encoding='utf-8') as f:
        assert json.load(f) == results


def test_csv_export_has_one_row_per_column(exporter, results):
    with open(exporter.export(results, 'csv', 'report'), newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        rows = list(reader)

    assert reader.fieldnames == CSV_FIELDS
    assert [row['column_name'] for row in rows] == ['<b>name</b>', 'x', 'y']
    assert rows[1]['inferred_type'] == 'numeric'
    assert float(rows[1]['mean']) == 3.0
    assert rows[0]['most_common'] == 'a'


def test_html_export_escapes_cell_text(exporter, results):
    with open(exporter.export(results, 'html', 'report'), encoding='utf-8') as f:
        html = f.read()

    assert '&lt;b&gt;name&lt;/b&gt;' in html
    assert '<b>name</b>' not in html
    assert 'Correlations' in html


def test_text_export_lists_strong_correlations(exporter, results):
    with open(exporter.export(results, 'TXT', 'report'), encoding='utf-8') as f:
        report = f.read()

    assert 'STRONG CORRELATIONS' in report
    assert 'x <-> y' in report


def test_unsupported_format(exporter, results):
    with pytest.raises(ValueError, match='Unsupported export format'):
        exporter.export(results, 'pdf', 'report')


def test_make_json_serializable():
    value = make_json_serializable({
        1: np.int64(3),
        'floats': np.array([1.5, np.nan]),
        'inf': float('inf'),
        'flag': np.bool_(True),
        'when': pd.Timestamp('2024-01-02'),
        'pair': (np.float64(0.5), None),
    })

    assert value == {
        '1': 3,
        'floats': [1.5, None],
        'inf': None,
        'flag': True,
        'when': '2024-01-02T00:00:00',
        'pair': [0.5, None],
    }
    assert type(value['1']) is int
    json.dumps(value)


def test_html_export_with_undefined_correlation(exporter):
    results = SpreadsheetAnalyzer().analyze_rows(['x', 'flat'], [[1, 7], [2, 7], [3, 7]])

    with open(exporter.export(results, 'html', 'report'), encoding='utf-8') as f:
        html = f.read()

    assert results['correlations']['pairs'][0]['correlation'] is None
    assert '<td>flat</td>' in html
