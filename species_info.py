import logging
from typing import Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# default herm mode when a stock is not in the table
DEFAULT_HERM = "gonochoristic"

# BAM model names (as produced by stock_name) with scientific names and sexual pattern
SPECIES_DATA = {
    "Name": [
        "AtlanticMenhaden", "BlackSeaBass", "BluelineTilefish", "Cobia", "GagGrouper",
        "GrayTriggerfish", "GreaterAmberjack", "KingMackerel", "RedGrouper", "RedPorgy",
        "RedSnapper", "Scamp", "SnowyGrouper", "SpanishMackerel", "Tilefish",
        "VermilionSnapper",
    ],
    "Species": [
        "Brevoortia tyrannus", "Centropristis striata", "Caulolatilus microps",
        "Rachycentron canadum", "Mycteroperca microlepis", "Balistes capriscus",
        "Seriola dumerili", "Scomberomorus cavalla", "Epinephelus morio", "Pagrus pagrus",
        "Lutjanus campechanus", "Mycteroperca phenax", "Hyporthodus niveatus",
        "Scomberomorus maculatus", "Lopholatilus chamaeleonticeps", "Rhomboplites aurorubens",
    ],
    "herm": [
        "gonochoristic", "protogynous", "gonochoristic", "gonochoristic", "protogynous",
        "gonochoristic", "gonochoristic", "gonochoristic", "protogynous", "protogynous",
        "gonochoristic", "protogynous", "protogynous", "gonochoristic", "gonochoristic",
        "gonochoristic",
    ],
}


def species_table() -> pd.DataFrame:
    return pd.DataFrame(SPECIES_DATA).set_index("Name")


# Read a replacement table; needs Name, Species and herm columns
def load_species_table(path: str) -> pd.DataFrame:
    table = pd.read_csv(path)
    missing = {"Name", "Species", "herm"} - set(table.columns)
    if missing:
        raise ValueError(f"Species table {path} is missing columns: {', '.join(sorted(missing))}")
    return table.set_index("Name")


def lookup_species(
    name: str,  # stock name, e.g. "BlackSeaBass"
    genusSpecies: Optional[str] = None,  # explicit override
    herm: Optional[str] = None,  # explicit override
    table: Optional[pd.DataFrame] = None,  # lookup table, default species_table()
) -> Tuple[str, str]:
    if table is None:
        table = species_table()

    known = name in table.index
    if genusSpecies is None:
        genusSpecies = str(table.loc[name, "Species"]) if known else ""
    if herm is None:
        if known:
            herm = str(table.loc[name, "herm"])
        else:
            logger.warning(f"{name} not found in species table. Assuming {DEFAULT_HERM}")
            herm = DEFAULT_HERM
    return genusSpecies, herm
