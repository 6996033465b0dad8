import math

import pandas as pd
import numpy as np
import logging

from .data_type_analyzer import NUMERIC
from .statistics_analyzer import numeric_series

MIN_OUTLIER_VALUES = 5
MIN_TREND_VALUES = 6
MAX_REPORTED_OUTLIERS = 50
STRONG_CORRELATION = 0.7


def round_half_up(value):
    """Round to the nearest integer with halves going up (88.5 -> 89)"""
    return int(math.floor(value + 0.5))


def correlation_strength(value):
    magnitude = abs(value)
    if magnitude >= 0.9:
        return 'very_strong'
    if magnitude >= 0.7:
        return 'strong'
    if magnitude >= 0.3:
        return 'moderate'
    return 'weak'


def build_histogram(values, bin_count=10):
    """Bucket numbers into bin_count fixed-width bins between min and max.

    The maximum lands in the last bin. When every value is equal the width is
    zero and all of them go to the first bin.
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return {'bins': [0] * bin_count, 'labels': [], 'edges': [], 'bin_width': None}

    low, high = float(data.min()), float(data.max())
    # divide before subtracting so values near the float limits do not overflow
    width = high / bin_count - low / bin_count

    if width == 0:
        counts = np.zeros(bin_count, dtype=int)
        counts[0] = data.size
    else:
        positions = np.floor(data / width - low / width)
        indexes = np.clip(positions, 0, bin_count - 1).astype(int)
        counts = np.bincount(indexes, minlength=bin_count)

    edges = [low + i * width for i in range(bin_count + 1)]
    labels = [f"{edges[i]:.1f}-{edges[i + 1]:.1f}" for i in range(bin_count)]

    return {
        'bins': [int(count) for count in counts],
        'labels': labels,
        'edges': edges,
        'bin_width': width,
    }


class PatternAnalyzer:
    """Analyzer for correlations, outliers, distributions and data quality"""

    def __init__(self, histogram_bins=10):
        self.histogram_bins = histogram_bins

    def analyze(self, df, data_types):
        """Perform pattern analysis on DataFrame given its inferred column types"""
        numeric_columns = [col for col in df.columns if data_types[col]['inferred_type'] == NUMERIC]
        numeric_data = {col: numeric_series(df[col]) for col in numeric_columns}

        results = {
            'outliers': self._detect_outliers(numeric_data),
            'correlations': self._analyze_correlations(numeric_data),
            'distributions': self._analyze_distributions(numeric_data),
            'trends': self._detect_trends(numeric_data),
            'data_quality': self._assess_data_quality(df, data_types),
        }

        return results

    def _detect_outliers(self, numeric_data):
        """Detect outliers in numeric columns with 1.5 x IQR fences"""
        outliers = {}

        for col, data in numeric_data.items():
            if len(data) < MIN_OUTLIER_VALUES:
                continue

            q1, q3 = np.percentile(data, [25, 75])
            iqr = q3 - q1
            lower_bound = q1 - 1.5 * iqr
            upper_bound = q3 + 1.5 * iqr

            iqr_outliers = data[(data < lower_bound) | (data > upper_bound)]
            outliers[col] = {
                'count': len(iqr_outliers),
                'percentage': len(iqr_outliers) / len(data) * 100,
                'q1': float(q1),
                'q3': float(q3),
                'iqr': float(iqr),
                'lower_bound': float(lower_bound),
                'upper_bound': float(upper_bound),
                'values': iqr_outliers.tolist()[:MAX_REPORTED_OUTLIERS],
                'row_indices': [int(i) for i in iqr_outliers.index[:MAX_REPORTED_OUTLIERS]],
            }

            logging.debug(f"[Outliers] Column: {col} | IQR outliers: {len(iqr_outliers)} "
                          f"({outliers[col]['percentage']:.2f}%)")

        return outliers

    def _analyze_correlations(self, numeric_data):
        """Pearson correlations between numeric columns over rows where both are numeric"""
        correlations = {}

        if len(numeric_data) < 2:
            return correlations

        # Align on row position; pandas drops incomplete pairs per column pair
        numeric_df = pd.DataFrame(numeric_data)
        corr_matrix = numeric_df.corr(method='pearson', min_periods=2)

        columns = list(corr_matrix.columns)
        pairs = []
        for i in range(len(columns)):
            for j in range(i + 1, len(columns)):
                corr_val = corr_matrix.iloc[i, j]
                # Undefined without two shared rows or with a constant column
                defined = not pd.isna(corr_val)
                pairs.append({
                    'column1': columns[i],
                    'column2': columns[j],
                    'correlation': float(corr_val) if defined else None,
                    'strength': correlation_strength(corr_val) if defined else None,
                })

        # Undefined pairs sort last
        pairs.sort(key=lambda pair: -1 if pair['correlation'] is None else abs(pair['correlation']), reverse=True)

        correlations['columns'] = columns
        correlations['matrix'] = {
            col1: {
                col2: (None if pd.isna(corr_matrix.loc[col1, col2]) else float(corr_matrix.loc[col1, col2]))
                for col2 in columns
            }
            for col1 in columns
        }
        correlations['pairs'] = pairs
        correlations['strong_correlations'] = [
            pair for pair in pairs
            if pair['correlation'] is not None and abs(pair['correlation']) >= STRONG_CORRELATION
        ]

        return correlations

    def _analyze_distributions(self, numeric_data):
        """Histogram and box plot data for each numeric column"""
        distributions = {}

        for col, data in numeric_data.items():
            if len(data) == 0:
                continue

            q1, median, q3 = np.percentile(data, [25, 50, 75])
            distributions[col] = {
                'histogram': build_histogram(data.to_numpy(), self.histogram_bins),
                'boxplot': {
                    'min': float(data.min()),
                    'q1': float(q1),
                    'median': float(median),
                    'q3': float(q3),
                    'max': float(data.max()),
                },
            }

        return distributions

    def _detect_trends(self, numeric_data):
        """Least-squares slope of each numeric column against row order"""
        trends = {}

        for col, data in numeric_data.items():
            if len(data) < MIN_TREND_VALUES:
                continue

            y = data.to_numpy()
            x = np.arange(len(y), dtype=float)
            x_diff = x - x.mean()
            slope = float((x_diff * (y - y.mean())).sum() / (x_diff ** 2).sum())
            intercept = float(y.mean() - slope * x.mean())

            if abs(slope) < 1e-12:
                direction = 'stable'
            elif slope > 0:
                direction = 'increasing'
            else:
                direction = 'decreasing'

            trends[col] = {
                'slope': slope,
                'intercept': intercept,
                'direction': direction,
                'points': len(y),
            }

        return trends

    def _assess_data_quality(self, df, data_types):
        """Assess overall data quality"""
        quality = {}

        fill_rates = [info['fill_rate'] for info in data_types.values()]
        quality['score'] = round_half_up(sum(fill_rates) / len(fill_rates)) if fill_rates else 0

        total_cells = df.shape[0] * df.shape[1]
        missing_cells = sum(info['empty_count'] for info in data_types.values())

        quality['completeness'] = {
            'score': (total_cells - missing_cells) / total_cells * 100 if total_cells else 0.0,
            'missing_cells': int(missing_cells),
            'total_cells': int(total_cells)
        }

        logging.debug(f"[Data Quality] Completeness: {quality['completeness']['score']:.2f}% "
                      f"({missing_cells} missing out of {total_cells})")

        # Check for duplicate rows
        duplicate_rows = int(df.astype(str).duplicated().sum()) if len(df) else 0
        quality['duplicate_rows'] = {
            'count': duplicate_rows,
            'percentage': duplicate_rows / len(df) * 100 if len(df) else 0.0
        }

        # Columns holding a single value (zero variance)
        quality['constant_columns'] = [
            col for col, info in data_types.items()
            if info['non_empty_count'] > 0 and info['unique_count'] <= 1
        ]

        # Columns whose sampled cells disagree on type
        quality['mixed_type_columns'] = [
            col for col, info in data_types.items()
            if sum(1 for count in info['type_counts'].values() if count > 0) > 1
        ]

        return quality
