import logging

from parsers.file_parser import table_from_rows, unique_names
from reporting.json_utils import make_json_serializable
from .data_type_analyzer import DataTypeAnalyzer, COLUMN_TYPES
from .statistics_analyzer import StatisticsAnalyzer
from .pattern_analyzer import PatternAnalyzer


class SpreadsheetAnalyzer:
    """Runs type inference, summary statistics and pattern analysis over one table"""

    def __init__(self, sample_size=1000, histogram_bins=10, preview_rows=10):
        self.data_type_analyzer = DataTypeAnalyzer(sample_size=sample_size)
        self.statistics_analyzer = StatisticsAnalyzer()
        self.pattern_analyzer = PatternAnalyzer(histogram_bins=histogram_bins)
        self.preview_rows = preview_rows

    def analyze(self, df):
        """Analyze a DataFrame of raw cell values and return JSON-ready results"""
        if df.columns.duplicated().any():
            df = df.copy()
            df.columns = unique_names(df.columns)

        column_types = self.data_type_analyzer.analyze(df)
        column_stats = self.statistics_analyzer.analyze(df, column_types)
        patterns = self.pattern_analyzer.analyze(df, column_types)

        data_types = {col: info['inferred_type'] for col, info in column_types.items()}
        type_totals = {
            f'{kind}_columns': sum(1 for inferred in data_types.values() if inferred == kind)
            for kind in COLUMN_TYPES
        }

        summary = {
            'total_rows': len(df),
            'total_columns': len(df.columns),
            'headers': [str(col) for col in df.columns],
            'data_quality': patterns['data_quality']['score'],
        }
        summary.update(type_totals)

        results = {
            'summary': summary,
            'data_types': data_types,
            'column_types': column_types,
            'column_stats': column_stats,
            'correlations': patterns['correlations'],
            'outliers': patterns['outliers'],
            'distributions': patterns['distributions'],
            'trends': patterns['trends'],
            'data_quality': patterns['data_quality'],
            'sample_data': df.head(self.preview_rows).values.tolist(),
        }

        logging.info(f"Analyzed table with {summary['total_rows']} rows and {summary['total_columns']} columns "
                     f"(quality {summary['data_quality']}%)")

        return make_json_serializable(results)

    def analyze_rows(self, headers, rows):
        """Analyze a header row plus a 2-D array of cell values"""
        return self.analyze(table_from_rows(headers, rows))
