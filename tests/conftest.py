import pandas as pd
import pytest

COLUMNS = ["type", "description", "begin", "end", "length", "accession", "entryName", "taxid", "order"]


def feature(type_, description, begin, end, length, accession="P00001", entry="P1", order=1):
    return {
        "type": type_,
        "description": description,
        "begin": begin,
        "end": end,
        "length": length,
        "accession": accession,
        "entryName": entry,
        "taxid": 9606,
        "order": order,
    }


@pytest.fixture
def kinase_df():
    """One 500-residue protein with a single kinase domain."""
    return pd.DataFrame([
        feature("CHAIN", "Protein kinase P1", 1, 500, 500),
        feature("DOMAIN", "Kinase", 50, 120, 500),
    ], columns=COLUMNS)


@pytest.fixture
def five_rel_df():
    """Five proteins of different lengths with a mix of feature types."""
    lengths = {1: 551, 2: 968, 3: 579, 4: 619, 5: 900}
    rows = []
    for order, length in lengths.items():
        acc, entry = f"Q0000{order}", f"REL{order}_HUMAN"
        rows.append(feature("CHAIN", f"Protein {order}", 1, length, length, acc, entry, order))
        rows.append(feature("DOMAIN", "RHD", 20, 200, length, acc, entry, order))
        rows.append(feature("REGION", "Disordered", 300, 350, length, acc, entry, order))
    rows.append(feature("MOTIF", "Nuclear localization signal", 400, 405, 968, "Q00002", "REL2_HUMAN", 2))
    rows.append(feature("REPEAT", "ANK 1", 600, 630, 968, "Q00002", "REL2_HUMAN", 2))
    rows.append(feature("REPEAT", "ANK 2", 634, 663, 968, "Q00002", "REL2_HUMAN", 2))
    rows.append(feature("MOD_RES", "Phosphoserine", 276, 276, 551, "Q00001", "REL1_HUMAN", 1))
    rows.append(feature("MOD_RES", "Phosphoserine; by PKA", 536, 536, 551, "Q00001", "REL1_HUMAN", 1))
    rows.append(feature("MOD_RES", "N6-acetyllysine", 310, 310, 551, "Q00001", "REL1_HUMAN", 1))
    return pd.DataFrame(rows, columns=COLUMNS)


@pytest.fixture
def receptor_df():
    """A single-pass receptor: extracellular, transmembrane, cytoplasmic."""
    return pd.DataFrame([
        feature("CHAIN", "Tumor necrosis factor receptor", 30, 455, 455, "P19438", "TNR1A_HUMAN"),
        feature("TOPO_DOM", "Extracellular", 30, 211, 455, "P19438", "TNR1A_HUMAN"),
        feature("TRANSMEM", "Helical", 212, 232, 455, "P19438", "TNR1A_HUMAN"),
        feature("TOPO_DOM", "Cytoplasmic", 233, 455, 455, "P19438", "TNR1A_HUMAN"),
    ], columns=COLUMNS)
