import pandas as pd
import logging
from .file_parser import BaseParser, ParseError


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx)"""

    def parse(self, file_path):
        """Parse the first worksheet of an Excel file and return pandas DataFrame"""
        try:
            with pd.ExcelFile(file_path) as excel_file:
                sheet_name = excel_file.sheet_names[0]
                if len(excel_file.sheet_names) > 1:
                    logging.info(f"Workbook has {len(excel_file.sheet_names)} sheets, using '{sheet_name}'")

                # dtype=object keeps numbers, booleans and datetimes as the cells hold them
                df = excel_file.parse(sheet_name, dtype=object)

            df = self._clean_dataframe(df)
            logging.info(f"Using sheet '{sheet_name}' with {len(df)} rows")
            return df

        except Exception as e:
            logging.error(f"Error parsing Excel file {file_path}: {str(e)}")
            raise ParseError(f"Failed to parse Excel file: {str(e)}") from e
