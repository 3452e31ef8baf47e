"""
Utility script for converting a beneficiary CSV to a JSON array of records.
Main logic lives in sendBeneficiaries/csv_converter.py (CSVConverter class);
this is the same as `sendbeneficiaries flatten -i <csv> -o <json>`.
"""
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))  # For direct script use
from sendBeneficiaries.csv_converter import CSVConverter


def main():
    if len(sys.argv) < 2:
        print("Usage: csv_to_records_json.py <csv_file> [json_file]", file=sys.stderr)
        return 1
    csv_path = Path(sys.argv[1])
    json_path = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    CSVConverter().convert_file(csv_path, json_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
