"""
Tests for per-subject summary statistics.
"""

import math

import pandas as pd
import pytest

from core.summary_statistics import subject_id_from_path, summarise_individual
from vendors.axivity.timestamps import CwaTimestamp


def _at_hour(hour, minute=0):
    return CwaTimestamp(2018, 6, 15, hour, minute, 0)


class TestSubjectId:
    """Tests for subject_id_from_path."""

    def test_prefix_before_underscore(self):
        assert subject_id_from_path("/data/cwa/1234567_90001_0_0.cwa") == "1234567"

    def test_no_underscore(self):
        assert subject_id_from_path("subject.cwa") == "subject.cwa"


class TestSummariseIndividual:
    """Tests for summarise_individual."""

    def test_row_layout(self, tmp_path):
        path = tmp_path / "summary.csv"
        timestamps = [_at_hour(0), _at_hour(0, 30), _at_hour(1), _at_hour(1, 30)]

        row = summarise_individual("1234567", timestamps, [20, 22, 30, 34], path)

        assert row.shape == (1, 3 + 2 * 24)
        assert row.loc[0, "mean"] == pytest.approx(26.5)
        assert row.loc[0, "sd"] == pytest.approx(pd.Series([20, 22, 30, 34]).std())
        assert row.loc[0, "h0_mean"] == pytest.approx(21.0)
        assert row.loc[0, "h0_sd"] == pytest.approx(math.sqrt(2.0))
        assert row.loc[0, "h1_mean"] == pytest.approx(32.0)
        assert math.isnan(row.loc[0, "h2_mean"])

    def test_appends_rows(self, tmp_path):
        path = tmp_path / "summary.csv"
        timestamps = [_at_hour(5), _at_hour(6)]

        summarise_individual("a", timestamps, [1, 2], path)
        summarise_individual("b", timestamps, [3, 4], path)

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("a,1.5,")
        assert lines[1].startswith("b,3.5,")
        assert len(lines[0].split(",")) == 51
        assert "nan" in lines[0]

    def test_mismatched_lengths(self, tmp_path):
        with pytest.raises(ValueError):
            summarise_individual("a", [_at_hour(1)], [1, 2], tmp_path / "s.csv")
