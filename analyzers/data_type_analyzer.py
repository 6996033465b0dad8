import re
import logging
import numbers
from collections import Counter
from datetime import date, datetime

import numpy as np
import pandas as pd

NUMERIC = 'numeric'
DATE = 'date'
BOOLEAN = 'boolean'
TEXT = 'text'

COLUMN_TYPES = (NUMERIC, DATE, BOOLEAN, TEXT)

NUMBER_PATTERN = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')
BOOLEAN_TOKENS = {'true', 'false', 'yes', 'no'}


def is_empty(value):
    """True for None, NaN/NaT and whitespace-only strings"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_number(value):
    """Convert a cell to float, or None when it does not hold a number"""
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, numbers.Number):
        number = float(value)
        return number if np.isfinite(number) else None
    if isinstance(value, str) and NUMBER_PATTERN.match(value.strip()):
        # literals like 1e999 overflow to inf
        number = float(value.strip())
        return number if np.isfinite(number) else None
    return None


class DataTypeAnalyzer:
    """Analyzer for classifying spreadsheet columns as numeric, date, boolean or text"""

    def __init__(self, sample_size=1000):
        self.sample_size = sample_size

        self.date_patterns = [
            re.compile(r'\d{4}-\d{2}-\d{2}'),    # YYYY-MM-DD
            re.compile(r'\d{2}/\d{2}/\d{4}'),    # MM/DD/YYYY
            re.compile(r'\d{2}-\d{2}-\d{4}'),    # MM-DD-YYYY
            re.compile(r'\d{4}/\d{2}/\d{2}'),    # YYYY/MM/DD
            re.compile(r'\d{2}\.\d{2}\.\d{4}'),  # DD.MM.YYYY
        ]

    def analyze(self, df):
        """Analyze data types for all columns in DataFrame"""
        results = {}

        for column in df.columns:
            results[column] = self._analyze_column(df[column], column)

        for col, info in results.items():
            logging.debug(f"Column '{col}': {info['inferred_type']} "
                          f"(confidence {info['confidence']:.2f}, {info['empty_count']} empty, "
                          f"{info['unique_count']} unique)")

        return results

    def classify_value(self, value):
        """Classify a single non-empty cell"""
        if isinstance(value, (bool, np.bool_)):
            return BOOLEAN

        if isinstance(value, numbers.Number):
            return NUMERIC if np.isfinite(float(value)) else TEXT

        if isinstance(value, (datetime, date, np.datetime64)):
            return DATE

        if not isinstance(value, str):
            return TEXT

        text = value.strip()
        if NUMBER_PATTERN.match(text):
            return NUMERIC if to_number(text) is not None else TEXT

        if self._looks_like_date(text):
            return DATE

        if text.lower() in BOOLEAN_TOKENS:
            return BOOLEAN

        return TEXT

    def _looks_like_date(self, text):
        if not any(pattern.match(text) for pattern in self.date_patterns):
            return False
        try:
            return pd.notna(pd.to_datetime(text, errors='coerce'))
        except (ValueError, OverflowError):
            return False

    def _analyze_column(self, series, column_name):
        """Analyze a single column and determine its data type by majority vote"""
        values = [value for value in series.tolist() if not is_empty(value)]
        sample = values[:self.sample_size]

        type_counts = Counter(self.classify_value(value) for value in sample)

        inferred_type = TEXT
        if type_counts:
            leader, leader_count = type_counts.most_common(1)[0]
            # A tie for first place falls back to text
            if all(count < leader_count for kind, count in type_counts.items() if kind != leader):
                inferred_type = leader

        total_count = len(series)
        non_empty_count = len(values)

        return {
            'column_name': column_name,
            'inferred_type': inferred_type,
            'confidence': type_counts[inferred_type] / len(sample) if sample else 0.0,
            'type_counts': {kind: type_counts.get(kind, 0) for kind in COLUMN_TYPES},
            'sample_size': len(sample),
            'total_count': total_count,
            'non_empty_count': non_empty_count,
            'empty_count': total_count - non_empty_count,
            'fill_rate': round(non_empty_count / total_count * 100, 1) if total_count else 0.0,
            'unique_count': len(set(values)),
            'sample_values': values[:5],
        }
