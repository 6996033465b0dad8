import pandas as pd
import logging
from .file_parser import BaseParser, ParseError


class CSVParser(BaseParser):
    """Parser for CSV files"""

    encodings = ['utf-8', 'latin-1', 'cp1252', 'iso-8859-1']
    separators = [',', ';', '\t', '|']

    def parse(self, file_path):
        """Parse CSV file and return pandas DataFrame"""
        try:
            # Try different encodings and separators
            for encoding in self.encodings:
                for sep in self.separators:
                    try:
                        df = self._read(file_path, encoding=encoding, sep=sep)
                    except (UnicodeDecodeError, pd.errors.ParserError):
                        continue

                    # A single column usually means the separator guess was wrong
                    if len(df.columns) > 1:
                        logging.info(f"Successfully parsed CSV with encoding={encoding}, separator='{sep}'")
                        return self._clean_dataframe(df)

            # Fall back to a single-column read with default settings
            try:
                df = self._read(file_path, encoding='utf-8')
            except UnicodeDecodeError:
                df = self._read(file_path, encoding='latin-1')
            return self._clean_dataframe(df)

        except pd.errors.EmptyDataError:
            logging.error(f"CSV file {file_path} is empty")
            raise ParseError("Failed to parse CSV file: the file appears to be empty")
        except Exception as e:
            logging.error(f"Error parsing CSV file {file_path}: {str(e)}")
            raise ParseError(f"Failed to parse CSV file: {str(e)}") from e

    def _read(self, file_path, **kwargs):
        # Keep every cell as raw text; type inference does its own sniffing
        return pd.read_csv(file_path, dtype=str, keep_default_na=False, **kwargs)
