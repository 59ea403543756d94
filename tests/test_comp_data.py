import numpy as np
import pandas as pd
import pytest

from comp_data import comp_combine, comp_complete, length_bins, mean_length_above
from rdat_standardize import standardize_rdat


@pytest.fixture
def completed(rdat):
    std = standardize_rdat(rdat)
    return comp_complete(std.acomps, range(2000, 2005))


def test_comp_complete_common_grid(completed):
    assert sorted(completed) == ["cHL", "sCT"]
    for mat in completed.values():
        assert list(mat.index) == [2000, 2001, 2002, 2003, 2004]
        assert list(mat.columns) == [1, 2, 3, 4, 5]

    sCT = completed["sCT"]
    # unobserved years and ages are zero fish
    assert sCT.loc[2000].sum() == 0.0
    assert sCT.loc[2001, 1] == 0.0
    assert sCT.loc[2001, 2] == pytest.approx(2.0)


def test_comp_complete_missing_sample_size(completed):
    assert completed["cHL"].loc[2003].sum() == 0.0
    assert completed["cHL"].loc[2001].sum() == pytest.approx(20.0)


def test_comp_combine(completed):
    combined = comp_combine(completed)
    assert combined.loc[2001].sum() == pytest.approx(25.0)

    scaled = comp_combine(completed, scaleRows=True)
    assert scaled.loc[2001].sum() == pytest.approx(1.0)
    assert scaled.loc[2000].sum() == pytest.approx(1.0)


def test_comp_combine_scale_rows_keeps_empty_years_zero():
    years = pd.Index([2000, 2001], name="year")
    mats = {
        "a": pd.DataFrame([[1.0, 3.0], [0.0, 0.0]], index=years, columns=[1, 2]),
        "b": pd.DataFrame([[0.0, 4.0], [0.0, 0.0]], index=years, columns=[1, 2]),
    }
    scaled = comp_combine(mats, scaleRows=True)
    assert scaled.loc[2000].tolist() == pytest.approx([0.125, 0.875])
    assert scaled.loc[2001].tolist() == [0.0, 0.0]


def test_mean_length_above():
    lcomp = pd.DataFrame([[1.0, 1.0, 2.0], [0.0, 0.0, 0.0]], index=[2000, 2001], columns=[20.0, 25.0, 30.0])
    out = mean_length_above(lcomp, 25)
    assert out.loc[2000] == pytest.approx((25 + 60) / 3)
    assert np.isnan(out.loc[2001])


def test_length_bins():
    assert length_bins([20, 25, 30]).tolist() == [17.5, 22.5, 27.5, 32.5]
