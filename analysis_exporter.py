import os
import json
import logging
import argparse

from analyzers.spreadsheet_analyzer import SpreadsheetAnalyzer
from parsers.file_parser import FileParserFactory
from reporting.json_utils import make_json_serializable


class AnalysisExporter:
    def __init__(self, sample_size=1000, histogram_bins=10, preview_rows=10):
        self.analyzer = SpreadsheetAnalyzer(
            sample_size=sample_size,
            histogram_bins=histogram_bins,
            preview_rows=preview_rows
        )

    def run_full_analysis(self, parsed_data):
        """
        Run full analysis pipeline and return results as dictionary
        """
        results = {
            "files": {},
            "summary": {}
        }

        analyzed = {}

        # Per-file analysis
        for filename, file_info in parsed_data.items():
            data = file_info["data"]
            if data is not None and len(data.columns) > 0:
                analyzed[filename] = self.analyzer.analyze(data)
            else:
                logging.warning(f"Skipping {filename}: no columns found")

        results["files"] = analyzed
        results["summary"] = generate_analysis_summary(analyzed)

        return results

    def export_to_json(self, parsed_data, output_file="analysis_results.json"):
        """
        Run analysis and save results to a JSON file
        """
        results = self.run_full_analysis(parsed_data)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(make_json_serializable(results), f, indent=4, ensure_ascii=False)

        return output_file


def generate_analysis_summary(file_results):
    """Generate overall analysis summary"""
    summaries = [result["summary"] for result in file_results.values()]

    return {
        "total_files": len(summaries),
        "total_rows": sum(summary["total_rows"] for summary in summaries),
        "total_columns": sum(summary["total_columns"] for summary in summaries),
        "data_quality_score": (
            sum(summary["data_quality"] for summary in summaries) / len(summaries) if summaries else 0
        )
    }


def parse_files(paths):
    """Parse spreadsheet paths into the {filename: {"data", "file_type"}} layout"""
    file_parser = FileParserFactory()
    parsed_data = {}

    for path in paths:
        ext = os.path.splitext(path)[1].lstrip(".").lower()
        parser = file_parser.get_parser(ext)
        parsed_data[os.path.basename(path)] = {"data": parser.parse(path), "file_type": ext}

    return parsed_data


def main(argv=None):
    arg_parser = argparse.ArgumentParser(description="Analyze spreadsheet files and write the results as JSON")
    arg_parser.add_argument("files", nargs="+", help=".csv, .xls or .xlsx files")
    arg_parser.add_argument("-o", "--output", default="analysis_results.json", help="output JSON file")
    arg_parser.add_argument("--bins", type=int, default=10, help="histogram bins per numeric column")
    arg_parser.add_argument("--sample-size", type=int, default=1000, help="cells sampled for type inference")
    args = arg_parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    exporter = AnalysisExporter(sample_size=args.sample_size, histogram_bins=args.bins)
    output = exporter.export_to_json(parse_files(args.files), args.output)
    print(f"Analysis results saved to {output}")
    return output


if __name__ == "__main__":
    main()
