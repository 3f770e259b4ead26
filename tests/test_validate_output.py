from scraper import CSV_HEADERS
from validate_output import check_row, validate_csv


def _write(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_valid_output_passes(tmp_path):
    _write(tmp_path / "A.csv", [
        ",".join(CSV_HEADERS),
        "Alaa Abdelnaby,256,5.7,3.3,0.3,50.2,0.0,70.1,50.2,13.0,4.8",
        "Zaid Abdul-Aziz,,,,,,,,,,",
    ])
    assert validate_csv(tmp_path) is True


def test_missing_directory_contents_fails(tmp_path):
    assert validate_csv(tmp_path) is False


def test_header_mismatch_fails(tmp_path):
    _write(tmp_path / "B.csv", ["Player,PlayerResouceName,G", "Charles Bassey,/players/b/bassech01.html,150"])
    assert validate_csv(tmp_path) is False


def test_non_numeric_cell_fails(tmp_path):
    _write(tmp_path / "C.csv", [
        ",".join(CSV_HEADERS),
        "Some Player,null,5.7,,,,,,,,",
    ])
    assert validate_csv(tmp_path) is False


def test_check_row_reports_each_problem():
    row = dict.fromkeys(CSV_HEADERS, "")
    row.update({"Player": " ", "G": "12.5", "WS": "4.8"})

    assert check_row(row) == ["empty Player", "G='12.5' is not numeric"]
