import netCDF4 as nc
import numpy as np
import pytest

from export_records import write_record_nc
from mse_records import DataRecord, StockRecord, bound_pair
from rdat_to_data import rdat_to_Data
from rdat_to_stock import rdat_to_Stock


def test_bound_pair_sorted():
    assert bound_pair(-2.0, (0.9, 1.1)).tolist() == pytest.approx([-2.2, -1.8])


def test_write_data_record(rdat, tmp_path):
    data = rdat_to_Data(rdat, nsim=2)
    outfile = str(tmp_path / "BlackSeaBass_Data.nc")
    write_record_nc(data, outfile)

    with nc.Dataset(outfile) as ds:
        assert ds.record_type == "Data"
        assert ds.Name == "BlackSeaBass"
        assert ds.AddIndNames == "sCT,rHB,cHL"
        assert len(ds.dimensions["sim"]) == 2
        assert len(ds.dimensions["year"]) == 5
        assert ds.variables["AddInd"].shape == (2, 3, 5)
        assert ds.variables["Cat"].units == "catch units"
        assert np.allclose(ds.variables["Cat"][0, :], data.Cat[0])
        # combined index was not produced
        assert "Ind" not in ds.variables


def test_write_stock_record(rdat, tmp_path):
    stock = rdat_to_Stock(rdat)
    outfile = str(tmp_path / "BlackSeaBass_Stock.nc")
    write_record_nc(stock, outfile)

    with nc.Dataset(outfile) as ds:
        assert ds.record_type == "Stock"
        assert ds.Source.endswith("rdat file")
        assert np.allclose(ds.variables["D"][:], [0.48, 0.48])
        assert "M2" not in ds.variables


def test_inconsistent_dimensions(tmp_path):
    record = DataRecord(Year=np.arange(3), Cat=np.ones((1, 4)))
    with pytest.raises(ValueError, match="year"):
        write_record_nc(record, str(tmp_path / "bad.nc"))


def test_unknown_record(tmp_path):
    with pytest.raises(TypeError):
        write_record_nc({"Name": "x"}, str(tmp_path / "bad.nc"))


def test_default_records_are_empty():
    assert DataRecord().Cat.shape == (1, 0)
    assert StockRecord().Fdisc.size == 0
    assert set(StockRecord().to_dict()) >= {"R0", "h", "Source"}
