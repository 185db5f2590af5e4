"""
Tests for LahmanLoader - dataset seeding component.
"""

import sqlite3

import pandas as pd
import pytest

from core.data import LahmanLoader, build_create_statement, sql_literal


class TestReading:
    """CSV reading and column selection."""

    def test_schema_columns_only(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "x.db"))
        df = loader.read_csv(str(lahman_csv_dir / "People.csv"), "people")
        assert list(df.columns) == ["playerID", "nameFirst", "nameLast"]
        assert len(df) == 6

    def test_numeric_types(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "x.db"))
        df = loader.read_csv(str(lahman_csv_dir / "Pitching.csv"), "pitching")
        assert str(df["SO"].dtype) == "Int64"
        assert df["ERA"].dtype == "float64"
        assert pd.isna(df.loc[df["playerID"] == "obrieda01", "ERA"]).all()

    def test_non_finite_numbers_become_missing(self, tmp_path):
        path = tmp_path / "Pitching.csv"
        path.write_text(
            "playerID,yearID,stint,teamID,lgID,W,L,G,GS,SV,IPouts,H,ER,HR,BB,SO,ERA\n"
            "snellbl01,2023,1,SDN,NL,14,9,32,32,0,540,115,44,15,99,inf,inf\n"
            "colege01,2023,1,NYA,AL,15,4,33,33,0,627,157,61,20,48,222,-inf\n",
            encoding="utf-8"
        )
        loader = LahmanLoader(str(tmp_path / "x.db"))
        df = loader.read_csv(str(path), "pitching")
        assert df["ERA"].isna().all()
        assert pd.isna(df.loc[0, "SO"])
        assert df.loc[1, "SO"] == 222

    def test_missing_column(self, tmp_path):
        path = tmp_path / "People.csv"
        path.write_text("playerID,nameFirst\nx01,X\n", encoding="utf-8")
        loader = LahmanLoader(str(tmp_path / "x.db"))
        with pytest.raises(ValueError, match="nameLast"):
            loader.read_csv(str(path), "people")

    def test_missing_file(self, tmp_path):
        loader = LahmanLoader(str(tmp_path / "x.db"))
        with pytest.raises(FileNotFoundError):
            loader.read_directory(str(tmp_path))


class TestLoading:
    """Loading into SQLite."""

    def test_row_counts(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        results = loader.load(loader.read_directory(str(lahman_csv_dir)))

        assert results["people"].rows_loaded == 6
        # 2017 season is outside the default range
        assert results["teams"].rows_loaded == 4
        # 2016 season dropped, orphan playerID dropped
        assert results["pitching"].rows_loaded == 7
        assert results["pitching"].rows_dropped == 2
        assert loader.get_table_counts() == {"people": 6, "teams": 4, "pitching": 7}

    def test_orphan_pitching_rows_dropped(self, lahman_db):
        conn = sqlite3.connect(lahman_db)
        try:
            orphans = conn.execute(
                "SELECT COUNT(*) FROM pitching WHERE playerID NOT IN (SELECT playerID FROM people)"
            ).fetchone()[0]
        finally:
            conn.close()
        assert orphans == 0

    def test_orphan_warning_logged(self, lahman_csv_dir, tmp_path, caplog):
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        with caplog.at_level("WARNING"):
            loader.load(loader.read_directory(str(lahman_csv_dir)))
        assert "not in people" in caplog.text

    def test_values_round_trip(self, lahman_db):
        conn = sqlite3.connect(lahman_db)
        try:
            row = conn.execute(
                "SELECT SO, ERA, IPouts FROM pitching WHERE playerID = 'degroja01' AND yearID = 2018"
            ).fetchone()
            name = conn.execute(
                "SELECT nameLast FROM people WHERE playerID = 'obrieda01'"
            ).fetchone()[0]
        finally:
            conn.close()
        assert row == (269, 1.7, 651)
        assert name == "O'Brien"

    def test_custom_year_range(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"), min_year=2023, max_year=2023)
        results = loader.load(loader.read_directory(str(lahman_csv_dir)))
        assert results["teams"].rows_loaded == 1
        assert results["pitching"].rows_loaded == 4

    def test_no_year_bounds(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"), min_year=None, max_year=None)
        results = loader.load(loader.read_directory(str(lahman_csv_dir)))
        assert results["teams"].rows_loaded == 5
        assert results["pitching"].rows_loaded == 8

    def test_reload_replaces_tables(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        frames = loader.read_directory(str(lahman_csv_dir))
        loader.load(frames)
        loader.load(frames)
        assert loader.get_table_counts()["people"] == 6

    def test_duplicate_keys_dropped(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        frames = loader.read_directory(str(lahman_csv_dir))
        frames["people"] = pd.concat([frames["people"], frames["people"].head(1)])
        results = loader.load(frames)
        assert results["people"].rows_loaded == 6


class TestSeedScript:
    """seed.sql generation."""

    def test_sql_literal(self):
        assert sql_literal(None) == "NULL"
        assert sql_literal("") == "NULL"
        assert sql_literal(94) == "94"
        assert sql_literal(2.25) == "2.25"
        assert sql_literal("O'Brien") == "'O''Brien'"

    def test_create_statement(self):
        ddl = build_create_statement("pitching")
        assert ddl.startswith("CREATE TABLE pitching (")
        assert "PRIMARY KEY (playerID, yearID, teamID, stint)" in ddl
        assert "FOREIGN KEY (playerID) REFERENCES people(playerID)" in ddl
        assert "playerID TEXT PRIMARY KEY" in build_create_statement("people")

    def test_write_seed_sql(self, lahman_csv_dir, tmp_path):
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        frames = loader.read_directory(str(lahman_csv_dir))
        out = tmp_path / "seed.sql"

        inserts = loader.write_seed_sql(frames, str(out))
        text = out.read_text(encoding="utf-8")

        assert inserts == 6 + 4 + 7
        assert text.startswith("DROP TABLE IF EXISTS pitching;")
        assert "'O''Brien'" in text
        assert "VALUES ('obrieda01', 2024, 1, 'SEA', 'AL', 0, 0, 3, 0, 0, 9, 4, 2, 0, 1, 2, NULL);" in text

    def test_seed_sql_executes(self, lahman_csv_dir, tmp_path):
        """The script rebuilds the same dataset in a fresh database."""
        loader = LahmanLoader(str(tmp_path / "lahman.db"))
        out = tmp_path / "seed.sql"
        loader.write_seed_sql(loader.read_directory(str(lahman_csv_dir)), str(out))

        conn = sqlite3.connect(":memory:")
        try:
            conn.executescript(out.read_text(encoding="utf-8"))
            total = conn.execute("SELECT SUM(W) FROM teams WHERE teamID = 'NYA' AND yearID = 2024").fetchone()[0]
        finally:
            conn.close()
        assert total == 94
