"""
Validates per-letter career stats CSV output structure
"""

import csv
import sys
from pathlib import Path

from player_stats import FieldParseError, parse_float, parse_int
from scraper import CSV_HEADERS, OUTPUT_DIR

EXPECTED_HEADERS = CSV_HEADERS


def check_row(row: dict) -> list:
    """Problems found in one data row (empty list if valid)."""
    problems = []
    if not (row.get("Player") or "").strip():
        problems.append("empty Player")

    for header in EXPECTED_HEADERS[1:]:
        value = row.get(header) or ""
        if not value:
            continue
        parser = parse_int if header == "G" else parse_float
        try:
            parser(value)
        except FieldParseError:
            problems.append(f"{header}={value!r} is not numeric")
    return problems


def validate_csv(output_dir: Path = OUTPUT_DIR) -> bool:
    csv_files = sorted(output_dir.glob("*.csv"))

    if not csv_files:
        print(f"❌ No CSV files found in {output_dir}/")
        return False

    print(f"\n{'='*80}")
    print("🔍 VALIDATING CSV STRUCTURE")
    print(f"{'='*80}\n")

    all_valid = True

    for csv_file in csv_files:
        print(f"📄 Checking: {csv_file.name}")

        try:
            with open(csv_file, 'r', encoding='utf-8', newline='') as f:
                reader = csv.DictReader(f)
                headers = reader.fieldnames

                # Check headers
                if headers != EXPECTED_HEADERS:
                    print(f"  ❌ Header mismatch!")
                    missing = set(EXPECTED_HEADERS) - set(headers or [])
                    extra = set(headers or []) - set(EXPECTED_HEADERS)
                    if missing:
                        print(f"     Missing: {missing}")
                    if extra:
                        print(f"     Extra: {extra}")
                    all_valid = False
                    continue

                # Check rows
                row_count = 0
                bad_rows = 0
                for line_no, row in enumerate(reader, start=2):
                    row_count += 1
                    problems = check_row(row)
                    if problems:
                        bad_rows += 1
                        print(f"  ❌ Line {line_no}: {'; '.join(problems)}")

                print(f"  ✓ Headers correct ({len(headers)} columns)")
                print(f"  ✓ {row_count} data rows")
                if bad_rows:
                    all_valid = False

        except (OSError, UnicodeDecodeError, csv.Error) as e:
            print(f"  ❌ Error reading file: {e}")
            all_valid = False

    print(f"\n{'='*80}")
    if all_valid:
        print("✅ VALIDATION PASSED")
    else:
        print("❌ VALIDATION FAILED")
    print(f"{'='*80}\n")

    return all_valid


def cli():
    sys.exit(0 if validate_csv() else 1)


if __name__ == "__main__":
    cli()
