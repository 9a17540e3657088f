#!/usr/bin/env python
"""
Validate input data files against schema requirements.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data
"""
import argparse
import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.config import config, DATA_FILES
from ops_dashboard.data.loader import SourceLoadError, read_table
from ops_dashboard.data.schema import validate_schema

# Files the budget engine cannot run without
REQUIRED_FILES = ["targets"]


def validate_file(filepath: Path, table_name: str) -> dict:
    """Validate a single file."""
    result = {
        "exists": filepath.exists(),
        "rows": 0,
        "columns": 0,
        "valid": False,
        "missing_required": [],
        "missing_optional": [],
        "errors": []
    }

    if not result["exists"]:
        return result

    try:
        df = read_table(filepath)
        result["rows"] = len(df)
        result["columns"] = len(df.columns)
    except SourceLoadError as e:
        result["errors"].append(f"Failed to load: {e}")
        return result

    schema_result = validate_schema(df, table_name, strict=False)
    result["valid"] = schema_result["is_valid"]
    result["missing_required"] = schema_result["missing_required"]
    result["missing_optional"] = schema_result["missing_optional"]

    return result


def main():
    parser = argparse.ArgumentParser(description="Validate input data files")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )

    args = parser.parse_args()

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir

    print("=" * 60)
    print("Data Input Validation")
    print("=" * 60)
    print(f"Source directory: {data_dir}")
    print()

    all_valid = True

    for table_key, filename in DATA_FILES.items():
        print(f"Validating: {table_key}")
        print("-" * 40)

        result = validate_file(data_dir / filename, table_key)

        if result["exists"]:
            print(f"  ✓ Found: {filename}")
            print(f"    Rows: {result['rows']:,}")
            print(f"    Columns: {result['columns']}")

            if result["valid"]:
                print(f"  ✓ Schema valid")
            elif not result["errors"]:
                print(f"  ✗ Schema invalid")
                print(f"    Missing required: {result['missing_required']}")
                all_valid = False

            if result["missing_optional"]:
                print(f"  ⚠ Missing optional: {result['missing_optional']}")
        else:
            print(f"  ✗ Not found: {filename}")
            if table_key in REQUIRED_FILES:
                all_valid = False
                print(f"    (REQUIRED)")
            else:
                print(f"    (optional)")

        for err in result["errors"]:
            print(f"  ✗ Error: {err}")
            all_valid = False

        print()

    print("=" * 60)
    if all_valid:
        print("✓ All validations passed")
        sys.exit(0)
    else:
        print("✗ Validation failed - see errors above")
        sys.exit(1)


if __name__ == "__main__":
    main()
