import logging
from collections import Counter

import numpy as np
import pandas as pd
from scipy import stats

from .data_type_analyzer import NUMERIC, DATE, is_empty, to_number


def numeric_series(series):
    """Numeric cells of a column as floats, indexed by their row position"""
    return series.map(to_number).dropna().astype(float)


def describe_numeric(values):
    """Summary statistics for a 1-D collection of numbers.

    Standard deviation, skewness and kurtosis are population moments, so a
    column is described as the whole population rather than a sample of it.
    Skewness and (excess) kurtosis are undefined when every value is equal
    and come back as None.
    """
    data = np.asarray(values, dtype=float)

    if data.size == 0:
        return {
            'count': 0, 'sum': 0.0, 'mean': None, 'median': None,
            'min': None, 'max': None, 'range': None, 'std': None,
            'variance': None, 'skewness': None, 'kurtosis': None,
            'quartiles': {'q1': None, 'q2': None, 'q3': None},
        }

    std = float(data.std())
    q1, q2, q3 = np.percentile(data, [25, 50, 75])

    return {
        'count': int(data.size),
        'sum': float(data.sum()),
        'mean': float(data.mean()),
        'median': float(np.median(data)),
        'min': float(data.min()),
        'max': float(data.max()),
        'range': float(data.max() - data.min()),
        'std': std,
        'variance': float(data.var()),
        'skewness': float(stats.skew(data)) if std > 0 else None,
        'kurtosis': float(stats.kurtosis(data)) if std > 0 else None,
        'quartiles': {'q1': float(q1), 'q2': float(q2), 'q3': float(q3)},
    }


class StatisticsAnalyzer:
    """Analyzer computing per-column summary statistics"""

    def __init__(self, top_values_limit=5, frequency_limit=50):
        self.top_values_limit = top_values_limit
        self.frequency_limit = frequency_limit

    def analyze(self, df, data_types):
        """Summarize every column according to its inferred type"""
        results = {}

        for column in df.columns:
            type_info = data_types[column]

            if type_info['inferred_type'] == NUMERIC:
                summary = {'type': 'numeric'}
                summary.update(describe_numeric(numeric_series(df[column])))
            else:
                summary = self._categorical_summary(df[column])
                if type_info['inferred_type'] == DATE:
                    summary.update(self._date_range(df[column]))

            summary['empty_count'] = type_info['empty_count']
            summary['fill_rate'] = type_info['fill_rate']
            results[column] = summary

        logging.debug(f"Computed summary statistics for {len(results)} columns")
        return results

    def _categorical_summary(self, series):
        values = [value for value in series.tolist() if not is_empty(value)]
        frequency = Counter(self._label(value) for value in values)
        top_values = frequency.most_common(self.top_values_limit)

        return {
            'type': 'categorical',
            'count': len(values),
            'unique': len(frequency),
            'most_common': top_values[0][0] if top_values else None,
            'top_values': [{'value': value, 'count': count} for value, count in top_values],
            'frequency': dict(frequency.most_common(self.frequency_limit)),
        }

    def _date_range(self, series):
        values = [value for value in series.tolist() if not is_empty(value)]
        try:
            dates = pd.to_datetime(pd.Series(values, dtype=object), errors='coerce', format='mixed').dropna()
        except (ValueError, TypeError) as e:
            logging.warning(f"Could not compute date range for '{series.name}': {str(e)}")
            return {'earliest': None, 'latest': None}

        if dates.empty:
            return {'earliest': None, 'latest': None}

        return {
            'earliest': dates.min().isoformat(),
            'latest': dates.max().isoformat(),
        }

    @staticmethod
    def _label(value):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
