import pandas as pd
import logging
from abc import ABC, abstractmethod

# Cell values treated as missing once stripped
NULL_TOKENS = {'', 'nan', 'NaN', 'NULL', 'null', 'N/A', 'n/a'}


class ParseError(Exception):
    """Raised when an uploaded spreadsheet cannot be read"""


def _free_name(name, taken):
    candidate = name
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f'{name}.{suffix}'
    return candidate


def unique_names(names):
    """Make column names unique the way pandas' readers do: amount, amount.1, amount.2"""
    seen = set()
    result = []
    for name in names:
        name = _free_name(str(name), seen)
        seen.add(name)
        result.append(name)
    return result


def _normalize_cell(value):
    if isinstance(value, str):
        value = value.strip()
        if value in NULL_TOKENS:
            return None
    return value


class BaseParser(ABC):
    """Abstract base class for spreadsheet parsers"""

    @abstractmethod
    def parse(self, file_path):
        """Parse file and return pandas DataFrame of raw cell values"""
        pass

    def _clean_dataframe(self, df):
        """Clean and standardize the DataFrame"""
        df = df.astype(object).map(_normalize_cell)

        # Remove completely empty rows
        df = df.dropna(how='all').reset_index(drop=True)

        # Handle unnamed columns (common in Excel files); drop the ones without data
        taken = {str(col) for col in df.columns}
        columns = []
        keep = []
        for i, col in enumerate(df.columns):
            name = str(col)
            if name.startswith('Unnamed:'):
                if df.iloc[:, i].isna().all():
                    continue
                name = _free_name(f'Column_{i + 1}', taken)
                taken.add(name)
            columns.append(name)
            keep.append(i)

        df = df.iloc[:, keep]
        df.columns = unique_names(columns)
        return df


def table_from_rows(headers, rows):
    """Build a DataFrame from a header row and a 2-D array of cell values.

    Short rows are padded with empty cells and extra cells are ignored, so a
    ragged array from a spreadsheet export lines up with its headers.
    """
    width = len(headers)
    normalized = []
    for row in rows:
        row = list(row)[:width]
        row.extend([None] * (width - len(row)))
        normalized.append([_normalize_cell(value) for value in row])

    df = pd.DataFrame(normalized, columns=unique_names(headers), dtype=object)
    return df.dropna(how='all').reset_index(drop=True)


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser

        excel_parser = ExcelParser()
        self.parsers = {
            'csv': CSVParser(),
            'xls': excel_parser,
            'xlsx': excel_parser,
        }

    def get_parser(self, file_type):
        """Get parser for specific file type"""
        parser = self.parsers.get(file_type.lower())
        if not parser:
            logging.warning(f"No parser registered for file type '{file_type}'")
            raise ValueError(f"Unsupported file type: {file_type}")
        return parser

    @property
    def supported_types(self):
        return set(self.parsers)
