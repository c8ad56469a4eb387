"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from schemaviz.cli import diagram, parse, relationships, sample

SQL = """
CREATE TABLE `t1` (`A` int NOT NULL, PRIMARY KEY (`A`)) COMMENT='T1';
CREATE TABLE `t2` (`A` int);
CREATE TABLE `t3` (`B` int NOT NULL, PRIMARY KEY (`B`));
CREATE TABLE `t4` (`B` int);
"""


@pytest.fixture(name="sql_file")
def sample_sql_file(tmp_path: Path) -> Path:
    """Write a small dump to a temporary file."""
    sql_file = tmp_path / "dump.sql"
    sql_file.write_text(SQL, encoding="utf-8")
    return sql_file


def test_parse_json(sql_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test JSON output of extracted tables."""
    parse(sql_file, "json")

    data = json.loads(capsys.readouterr().out)
    assert [table["id"] for table in data["tables"]] == ["t1", "t2", "t3", "t4"]
    assert data["tables"][0]["columns"][0] == {
        "name": "A",
        "type": "int",
        "comment": "",
        "is_primary_key": True,
        "is_nullable": False,
    }
    assert data["skipped"] == []


def test_parse_table(sql_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the rich table output."""
    parse(sql_file)
    captured = capsys.readouterr()
    assert "t1" in captured.out
    assert "Extracted 4 table(s)" in captured.err


def test_parse_without_tables(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a dump without tables exits with the reportable message."""
    sql_file = tmp_path / "empty.sql"
    sql_file.write_text("SET NAMES utf8mb4;", encoding="utf-8")

    with pytest.raises(SystemExit):
        parse(sql_file)
    assert "No tables found" in capsys.readouterr().err


def test_parse_missing_file(tmp_path: Path) -> None:
    """Test that a missing dump exits."""
    with pytest.raises(SystemExit):
        parse(tmp_path / "missing.sql")


def test_parse_invalid_extension(tmp_path: Path) -> None:
    """Test that unsupported file extensions are rejected."""
    dump = tmp_path / "dump.csv"
    dump.write_text(SQL, encoding="utf-8")
    with pytest.raises(SystemExit):
        parse(dump)


def test_relationships_json(sql_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test JSON output of inferred relationships."""
    relationships(sql_file, "json")

    assert json.loads(capsys.readouterr().out) == [
        {"id": "e-t2-A-t1", "source": "t2", "target": "t1", "column": "A"},
        {"id": "e-t4-B-t3", "source": "t4", "target": "t3", "column": "B"},
    ]


def test_relationships_custom_policy(
    sql_file: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that a policy file can exclude columns."""
    policy_file = tmp_path / "policy.toml"
    policy_file.write_text('excluded_columns = ["A"]\n', encoding="utf-8")

    relationships(sql_file, "json", policy=policy_file)

    assert json.loads(capsys.readouterr().out) == [
        {"id": "e-t4-B-t3", "source": "t4", "target": "t3", "column": "B"},
    ]


def test_relationships_json_keeps_unicode(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test that non-ASCII names are written unescaped, as in the other commands."""
    sql_file = tmp_path / "unicode.sql"
    sql_file.write_text(
        "CREATE TABLE `clé` (`NUMÉRO` int NOT NULL, PRIMARY KEY (`NUMÉRO`));\n"
        "CREATE TABLE `compte` (`NUMÉRO` int);\n",
        encoding="utf-8",
    )

    relationships(sql_file, "json")

    out = capsys.readouterr().out
    assert "e-compte-NUMÉRO-clé" in out
    assert "\\u" not in out


def test_diagram_selection(sql_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test diagram output with a selected table."""
    diagram(sql_file, "json", select="t1")

    document = json.loads(capsys.readouterr().out)
    assert document["name"] == "dump"
    assert document["selected"] == "t1"
    dimmed = {table["id"]: table["dimmed"] for table in document["tables"]}
    assert dimmed == {"t1": False, "t2": False, "t3": True, "t4": True}


def test_diagram_unknown_selection(sql_file: Path) -> None:
    """Test that selecting a missing table exits."""
    with pytest.raises(SystemExit):
        diagram(sql_file, select="nope")


def test_diagram_html(sql_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test HTML diagram output."""
    diagram(sql_file, "html", title="Dump")
    out = capsys.readouterr().out
    assert "<title>Dump</title>" in out
    assert "<h3>t4</h3>" in out


def test_sample(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that the bundled dump is written to stdout."""
    sample()
    assert "CREATE TABLE `cif_client`" in capsys.readouterr().out
