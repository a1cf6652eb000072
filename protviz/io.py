import fnmatch
from pathlib import Path

import altair as alt
import pandas as pd


def find_feature_files(input_dir: Path) -> list:
    """Discover protein feature tables in the input directory.

    Matches any file with ``features`` in its name (case-insensitive), e.g.
    ``five_rel_features.tsv`` or ``TNFRSF_Features.xlsx``.  Excel lock files
    (``~$...``) are skipped.

    Returns the matching paths sorted by name.
    """
    matches = sorted(
        p for p in input_dir.iterdir()
        if p.is_file()
        and not p.name.startswith("~$")
        and fnmatch.fnmatch(p.name.lower(), "*features*")
    )
    if not matches:
        raise FileNotFoundError(f"No '*features*' files found in {input_dir}")
    return matches


def load_features(path: Path) -> pd.DataFrame:
    """Read a feature table.  Format is inferred from the file extension.

    ``.xlsx``/``.xls`` are read as Excel (requires openpyxl), ``.csv`` as
    comma-separated, anything else as tab-separated.  The table is returned
    as read; validation happens in :func:`protviz.features.validate_features`.
    """
    suffix = Path(path).suffix.lower()
    if suffix in (".xlsx", ".xls"):
        return pd.read_excel(path)
    if suffix == ".csv":
        return pd.read_csv(path)
    return pd.read_csv(path, sep="\t")


def save_figure(chart: alt.Chart, path: Path):
    """Save an Altair chart. Format is inferred from the file extension.

    HTML is fully self-contained.
    PNG and SVG require vl-convert-python to be installed.
    """
    chart.save(str(path))
    print(f"  Saved: {path.name}")
