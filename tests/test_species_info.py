import logging

import pandas as pd
import pytest

from species_info import load_species_table, lookup_species, species_table


def test_lookup_known_species():
    assert lookup_species("BlackSeaBass") == ("Centropristis striata", "protogynous")
    assert lookup_species("RedSnapper") == ("Lutjanus campechanus", "gonochoristic")


def test_overrides_win():
    assert lookup_species("BlackSeaBass", herm="gonochoristic")[1] == "gonochoristic"
    assert lookup_species("BlackSeaBass", genusSpecies="Centropristis sp.")[0] == "Centropristis sp."


def test_unknown_species_defaults(caplog):
    with caplog.at_level(logging.WARNING):
        assert lookup_species("Wahoo") == ("", "gonochoristic")
    assert "Wahoo not found in species table" in caplog.text


def test_load_species_table(tmp_path):
    path = tmp_path / "species.csv"
    pd.DataFrame({"Name": ["Wahoo"], "Species": ["Acanthocybium solandri"], "herm": ["gonochoristic"]}).to_csv(path, index=False)

    table = load_species_table(str(path))
    assert lookup_species("Wahoo", table=table) == ("Acanthocybium solandri", "gonochoristic")


def test_load_species_table_missing_columns(tmp_path):
    path = tmp_path / "species.csv"
    pd.DataFrame({"Name": ["Wahoo"]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="herm"):
        load_species_table(str(path))


def test_species_table_is_indexed_by_name():
    table = species_table()
    assert table.index.name == "Name"
    assert set(table["herm"]) == {"gonochoristic", "protogynous"}
