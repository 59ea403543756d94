import numpy as np
import pandas as pd
import pytest

from index_data import (combine_indices, geomean, index_frames, index_units, order_indices,
                        replicate, select_abbreviations)
from rdat_standardize import standardize_rdat


def test_replicate():
    out = replicate([1, 2, 3], 4)
    assert out.shape == (4, 3)
    assert np.all(out[3] == [1, 2, 3])


def test_select_abbreviations(caplog):
    available = ["cHL", "rHB", "sCT"]
    assert select_abbreviations(available, "all") == available
    assert select_abbreviations(available, "none") == []
    assert select_abbreviations(available, ["sCT", "cLL"]) == ["sCT"]
    assert select_abbreviations(available, "rHB") == ["rHB"]

    with caplog.at_level("INFO"):
        assert select_abbreviations(available, ["cLL"], "indAbb", "BlackSeaBass") == available
    assert "BlackSeaBass: indAbb does not match" in caplog.text


def test_geomean():
    assert geomean([1, 4]) == pytest.approx(2.0)
    assert geomean([2, np.nan, 8]) == pytest.approx(4.0)
    assert np.isnan(geomean([np.nan]))


def test_combine_indices_restandardizes():
    years = pd.Index([2000, 2001, 2002], name="year")
    ind = pd.DataFrame({"a": [10.0, np.nan, 20.0], "b": [20.0, 15.0, 40.0]}, index=years)
    cv = pd.DataFrame({"a": [0.2, 0.2, 0.2], "b": [0.2, 0.2, np.nan]}, index=years)
    out = combine_indices(ind, cv)

    assert np.nanmean(out["Ind"]) == pytest.approx(1.0)
    assert out["Ind"].to_numpy() == pytest.approx([0.739, 0.784, 1.478], abs=1e-3)
    assert out["CV_Ind"].to_numpy() == pytest.approx([0.2, 0.2, 0.2])


def test_order_indices():
    abbs = ["cHL", "rHB", "sCT", "xYZ"]
    order = order_indices(abbs, ["sCT", "", "rHB", "cHL"])
    assert [abbs[i] for i in order] == ["sCT", "rHB", "cHL", "xYZ"]


def test_index_units():
    units = index_units(["sCT", "rHB", "cHL", "xYZ"], {"s": 0, "r": 0, "c": 1})
    assert units[:3].tolist() == [0, 0, 1]
    assert np.isnan(units[3])


def test_index_frames(rdat):
    std = standardize_rdat(rdat)
    ind, cv = index_frames(std.indices, ["sCT", "cHL"], range(2000, 2005))

    assert list(ind.columns) == ["sCT", "cHL"]
    assert np.isnan(ind.loc[2001, "sCT"])
    assert cv.loc[2004, "cHL"] == 0.3


def test_combine_indices_all_missing_year_stays_missing():
    years = pd.Index([2000, 2001, 2002], name="year")
    ind = pd.DataFrame({"a": [1.0, np.nan, 2.0], "b": [2.0, np.nan, 4.0]}, index=years)
    cv = pd.DataFrame({"a": [0.2, np.nan, 0.2], "b": [0.2, np.nan, 0.2]}, index=years)
    out = combine_indices(ind, cv)

    assert np.isnan(out["Ind"].loc[2001])
    assert np.isnan(out["CV_Ind"].loc[2001])
    assert np.nanmean(out["Ind"]) == pytest.approx(1.0)
