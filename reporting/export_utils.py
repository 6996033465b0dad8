import json
import csv
import os
from datetime import datetime
from html import escape
import logging

from .json_utils import make_json_serializable

CSV_FIELDS = [
    'column_name', 'inferred_type', 'confidence', 'fill_rate', 'empty_count', 'unique_count',
    'count', 'sum', 'mean', 'median', 'std', 'min', 'max', 'skewness', 'kurtosis',
    'most_common', 'outlier_count',
]


class ExportUtils:
    """Utility class for exporting spreadsheet analysis results in various formats"""

    formats = ('json', 'csv', 'html', 'txt')

    def __init__(self, export_dir="exports"):
        self.export_dir = export_dir
        os.makedirs(self.export_dir, exist_ok=True)

    def export(self, results, format_type, name):
        """Export analysis results in specified format"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{name}_{timestamp}"

        format_type = format_type.lower()
        if format_type == 'json':
            filepath = self._export_json(results, filename)
        elif format_type == 'csv':
            filepath = self._export_csv(results, filename)
        elif format_type == 'html':
            filepath = self._export_html(results, filename)
        elif format_type == 'txt':
            filepath = self._export_text(results, filename)
        else:
            raise ValueError(f"Unsupported export format: {format_type}")

        logging.info(f"Exported {format_type} report to {filepath}")
        return filepath

    def _export_json(self, results, filename):
        """Export results as JSON"""
        filepath = os.path.join(self.export_dir, f"{filename}.json")

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(make_json_serializable(results), f, indent=2, ensure_ascii=False)

        return filepath

    def _export_csv(self, results, filename):
        """Export one row per column with its type and statistics"""
        filepath = os.path.join(self.export_dir, f"{filename}.csv")

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(self.flatten_columns(results))

        return filepath

    def _export_html(self, results, filename):
        """Export results as HTML report"""
        filepath = os.path.join(self.export_dir, f"{filename}.html")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self._generate_html_report(results, filename))

        return filepath

    def _export_text(self, results, filename):
        """Export results as plain text report"""
        filepath = os.path.join(self.export_dir, f"{filename}.txt")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self._generate_text_report(results, filename))

        return filepath

    @staticmethod
    def flatten_columns(results):
        """Flatten per-column results into rows for tabular export"""
        rows = []
        column_types = results.get('column_types', {})
        column_stats = results.get('column_stats', {})
        outliers = results.get('outliers', {})

        for column, type_info in column_types.items():
            stats = column_stats.get(column, {})
            rows.append({
                'column_name': column,
                'inferred_type': type_info.get('inferred_type', ''),
                'confidence': type_info.get('confidence', 0),
                'fill_rate': type_info.get('fill_rate', 0),
                'empty_count': type_info.get('empty_count', 0),
                'unique_count': type_info.get('unique_count', 0),
                'count': stats.get('count', 0),
                'sum': stats.get('sum', ''),
                'mean': stats.get('mean', ''),
                'median': stats.get('median', ''),
                'std': stats.get('std', ''),
                'min': stats.get('min', ''),
                'max': stats.get('max', ''),
                'skewness': stats.get('skewness', ''),
                'kurtosis': stats.get('kurtosis', ''),
                'most_common': stats.get('most_common', ''),
                'outlier_count': outliers.get(column, {}).get('count', ''),
            })

        return rows

    @staticmethod
    def _fmt(value, digits=2):
        if value is None or value == '':
            return '-'
        if isinstance(value, float):
            return f"{value:.{digits}f}"
        return str(value)

    def _generate_html_report(self, results, filename):
        """Generate HTML report"""
        summary = results.get('summary', {})
        html = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Spreadsheet Analysis Report - {escape(filename)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }}
        .header {{ background-color: #f4f4f4; padding: 20px; border-radius: 5px; margin-bottom: 20px; }}
        .section {{ margin-bottom: 30px; }}
        table {{ border-collapse: collapse; width: 100%; margin-bottom: 20px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
        .metric {{ background-color: #e7f3ff; padding: 10px; border-radius: 3px; margin: 5px 0; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>Spreadsheet Analysis Report</h1>
        <p><strong>File:</strong> {escape(filename)}</p>
        <p><strong>Generated:</strong> {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
    </div>
    <div class="section">
        <h2>Summary</h2>
        <div class="metric">Total Rows: {summary.get('total_rows', 0)}</div>
        <div class="metric">Total Columns: {summary.get('total_columns', 0)}</div>
        <div class="metric">Numeric / Date / Boolean / Text Columns: {summary.get('numeric_columns', 0)} / {summary.get('date_columns', 0)} / {summary.get('boolean_columns', 0)} / {summary.get('text_columns', 0)}</div>
        <div class="metric">Data Quality Score: {summary.get('data_quality', 0)}%</div>
    </div>
    <div class="section">
        <h2>Columns</h2>
        <table>
            <tr>
                <th>Column</th><th>Type</th><th>Fill Rate</th><th>Mean</th><th>Median</th>
                <th>Std Dev</th><th>Min</th><th>Max</th><th>Outliers</th>
            </tr>
"""
        for row in self.flatten_columns(results):
            html += f"""            <tr>
                <td>{escape(str(row['column_name']))}</td>
                <td>{escape(row['inferred_type'])}</td>
                <td>{self._fmt(row['fill_rate'], 1)}%</td>
                <td>{self._fmt(row['mean'])}</td>
                <td>{self._fmt(row['median'])}</td>
                <td>{self._fmt(row['std'])}</td>
                <td>{self._fmt(row['min'])}</td>
                <td>{self._fmt(row['max'])}</td>
                <td>{self._fmt(row['outlier_count'])}</td>
            </tr>
"""
        html += """        </table>
    </div>
"""

        pairs = results.get('correlations', {}).get('pairs', [])
        if pairs:
            html += """    <div class="section">
        <h2>Correlations</h2>
        <table>
            <tr><th>Column 1</th><th>Column 2</th><th>Pearson r</th><th>Strength</th></tr>
"""
            for pair in pairs:
                html += f"""            <tr>
                <td>{escape(pair['column1'])}</td>
                <td>{escape(pair['column2'])}</td>
                <td>{self._fmt(pair['correlation'], 3)}</td>
                <td>{self._fmt(pair['strength'])}</td>
            </tr>
"""
            html += """        </table>
    </div>
"""

        html += """</body>
</html>
"""
        return html

    def _generate_text_report(self, results, filename):
        """Generate plain text report"""
        summary = results.get('summary', {})
        separator = '-' * 20
        report = f"""SPREADSHEET ANALYSIS REPORT
{'=' * 50}

File: {filename}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

SUMMARY
{separator}
Total Rows: {summary.get('total_rows', 0)}
Total Columns: {summary.get('total_columns', 0)}
Numeric Columns: {summary.get('numeric_columns', 0)}
Date Columns: {summary.get('date_columns', 0)}
Boolean Columns: {summary.get('boolean_columns', 0)}
Text Columns: {summary.get('text_columns', 0)}
Data Quality Score: {summary.get('data_quality', 0)}%

COLUMNS
{separator}
"""
        report += f"{'Column':<20} {'Type':<10} {'Fill %':<8} {'Mean':<12} {'Median':<12} {'Std':<12} {'Outliers':<8}\n"
        report += f"{'-' * 86}\n"

        for row in self.flatten_columns(results):
            report += (f"{str(row['column_name'])[:20]:<20} {row['inferred_type']:<10} "
                       f"{self._fmt(row['fill_rate'], 1):<8} {self._fmt(row['mean']):<12} "
                       f"{self._fmt(row['median']):<12} {self._fmt(row['std']):<12} "
                       f"{self._fmt(row['outlier_count']):<8}\n")

        strong = results.get('correlations', {}).get('strong_correlations', [])
        if strong:
            report += f"\nSTRONG CORRELATIONS\n{separator}\n"
            for pair in strong:
                report += f"{pair['column1']} <-> {pair['column2']}: {pair['correlation']:.3f} ({pair['strength']})\n"

        return report
