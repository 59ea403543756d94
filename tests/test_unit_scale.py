import logging

import pytest

from rdat_standardize import RdatError
from unit_scale import (KLB_PER_MT, biomass_to_klb, check_wlb, convert_length, convert_mass,
                        infer_wla_scale, length_rescale_wla, length_scalar, mass_scalar)


def test_conversions():
    assert convert_length(250, "mm", "cm") == pytest.approx(25.0)
    assert convert_mass(1, "klb", "mt") == pytest.approx(0.45359237)
    with pytest.raises(RdatError, match="Unknown length unit"):
        convert_length(1, "furlong", "m")


def test_scalars_from_number_or_unit():
    assert length_scalar(0.1) == 0.1
    assert length_scalar("cm") == pytest.approx(0.1)
    assert length_scalar("m") == pytest.approx(0.001)
    assert mass_scalar(1) == 1.0
    assert mass_scalar("mt") == pytest.approx(0.45359237)
    with pytest.raises(RdatError):
        length_scalar(0)


def test_biomass_to_klb(caplog):
    assert biomass_to_klb("mt") == KLB_PER_MT
    with caplog.at_level(logging.WARNING):
        assert biomass_to_klb("lbs") == pytest.approx(0.001)
    assert "not equal to metric tons" in caplog.text
    with pytest.raises(RdatError):
        biomass_to_klb("stones")
    with pytest.raises(RdatError):
        biomass_to_klb(None)


@pytest.mark.parametrize("wla, expected", [(5e-5, 0.001), (1.5e-8, 1.0), (2e-12, 1000.0), (1e-2, 1.0)])
def test_infer_wla_scale(wla, expected):
    assert infer_wla_scale(wla, "BlackSeaBass") == expected


def test_check_wlb(caplog):
    assert check_wlb(3.0)
    with caplog.at_level(logging.WARNING):
        assert not check_wlb(4.5, "BlackSeaBass")
    assert "BlackSeaBass" in caplog.text


def test_length_rescale_wla():
    # W = wla * L^wlb is unchanged when lengths are rescaled
    wla = length_rescale_wla(1e-5, 0.1, 3.0)
    assert wla * 25.0 ** 3 == pytest.approx(1e-5 * 250.0 ** 3)
