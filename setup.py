"""
Excel Analytics Pro Setup Instructions

To run this application on your local system:

1. Install Python 3.10+ if not already installed

2. Create a virtual environment:
   python -m venv excel_analytics_env

3. Activate the virtual environment:
   - Windows: excel_analytics_env\\Scripts\\activate
   - Mac/Linux: source excel_analytics_env/bin/activate

4. Install the package (add [test] for pytest):
   pip install -e .[test]

5. Set environment variables (optional):
   - SESSION_SECRET=your-secret-key-here
   - DATABASE_URL=sqlite:///excel_analytics.db (default)
   - UPLOAD_FOLDER=uploads, EXPORT_FOLDER=exports
   - TYPE_SAMPLE_SIZE=1000, HISTOGRAM_BINS=10, PREVIEW_ROWS=10
   - LOG_LEVEL=INFO

6. Run the application:
   python app.py

   Or with gunicorn:
   gunicorn --bind 0.0.0.0:5000 "app:create_app()"

7. Analyze files from the command line:
   python analysis_exporter.py sales.xlsx customers.csv -o analysis.json

File Structure:
├── app.py                          # Flask app factory and configuration
├── models.py                       # Upload history model
├── routes.py                       # JSON API routes
├── analysis_exporter.py            # Batch analysis / command line
├── analyzers/
│   ├── data_type_analyzer.py       # Column type inference
│   ├── statistics_analyzer.py      # Summary statistics
│   ├── pattern_analyzer.py         # Correlations, outliers, histograms, quality
│   └── spreadsheet_analyzer.py     # Full pipeline for one table
├── parsers/
│   ├── file_parser.py              # Base parser, factory, row tables
│   ├── csv_parser.py               # CSV parser
│   └── excel_parser.py             # Excel parser
├── reporting/
│   ├── json_utils.py               # JSON conversion of numpy/pandas values
│   └── export_utils.py             # JSON/CSV/HTML/TXT reports
└── tests/
"""
from setuptools import setup, find_namespace_packages

setup(
    name="excel-analytics-pro",
    version="1.0.0",
    description="Spreadsheet upload service with column type inference and descriptive statistics",
    python_requires=">=3.10",
    py_modules=["app", "models", "routes", "analysis_exporter"],
    packages=find_namespace_packages(include=["analyzers", "parsers", "reporting"]),
    install_requires=[
        "Flask>=2.3.3",
        "Flask-SQLAlchemy>=3.0.5",
        "Werkzeug>=2.3.7",
        "gunicorn>=21.2.0",
        "pandas>=2.1.1",
        "numpy>=1.25.2",
        "openpyxl>=3.1.2",
        "xlrd>=2.0.1",
        "scipy>=1.11.3",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "excel-analytics=analysis_exporter:main",
        ],
    },
)
