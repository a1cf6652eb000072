"""Validation and filtering of protein feature tables.

A feature table has one row per annotated feature with the columns
``['type', 'description', 'begin', 'end', 'length', 'accession',
'entryName', 'taxid', 'order']``.  Every protein contributes exactly one
``CHAIN`` row (its full-length backbone); ``order`` is the protein's track
index, counted upwards from 1.
"""

from __future__ import annotations

import re

import numpy as np
import pandas as pd

from .errors import (
    DuplicateTrackError,
    EmptyInputError,
    FeatureTableError,
    InvalidCoordinateError,
    UnknownTrackError,
)

REQUIRED_COLUMNS = [
    "type",
    "description",
    "begin",
    "end",
    "length",
    "accession",
    "entryName",
    "taxid",
    "order",
]

CHAIN = "CHAIN"
DOMAIN = "DOMAIN"
REGION = "REGION"
MOTIF = "MOTIF"
REPEAT = "REPEAT"
TOPO_DOM = "TOPO_DOM"
TRANSMEM = "TRANSMEM"
MOD_RES = "MOD_RES"
PHOSPHO = "PHOSPHO"

# Types that occupy a band on a track and must have valid coordinates.
DRAWN_TYPES = [CHAIN, DOMAIN, REGION, MOTIF, REPEAT, TOPO_DOM, TRANSMEM, MOD_RES, PHOSPHO]

_DIGITS = re.compile(r"\d")


def validate_features(df: pd.DataFrame) -> pd.DataFrame:
    """Check a raw feature table and return a cleaned copy.

    Coordinates and ``order`` of drawable rows are coerced to integers.  Rows
    of types the diagram never draws (e.g. ``HELIX``) are kept untouched.

    Raises:
        FeatureTableError: required columns are missing, or rows of one
            accession disagree on ``length``.
        EmptyInputError: no rows, or no CHAIN row.
        DuplicateTrackError: two CHAIN rows share an ``order``.
        UnknownTrackError: a feature's ``order`` has no CHAIN.
        InvalidCoordinateError: a drawable row has a ``begin``, ``end`` or
            ``order`` that is not a whole number >= 1, inverted coordinates, or
            an ``end`` past its chain's ``length``; or a CHAIN has no valid
            ``length``.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise FeatureTableError(f"Feature table is missing columns: {', '.join(missing)}")
    if df.empty:
        raise EmptyInputError("Feature table has no rows")

    df = df.copy()
    df["type"] = df["type"].astype(str).str.upper()

    chains = df.loc[df["type"] == CHAIN]
    if chains.empty:
        raise EmptyInputError("Feature table has no CHAIN row")

    drawn = df["type"].isin(DRAWN_TYPES)
    for col in ("begin", "end", "order"):
        values = pd.to_numeric(df.loc[drawn, col], errors="coerce").to_numpy(dtype=float)
        problem = "a missing or non-numeric"
        bad = ~np.isfinite(values)
        if not bad.any():
            problem = "a fractional or non-positive"
            bad = (values % 1 != 0) | (values < 1)
        if bad.any():
            row = df.loc[drawn].loc[bad].iloc[0]
            raise InvalidCoordinateError(
                f"{row['type']} '{row['description']}' has {problem} '{col}' ({row[col]})"
            )

    for col in ("begin", "end", "order"):
        values = pd.to_numeric(df[col], errors="coerce")
        # Undrawn rows (e.g. sequence conflicts) may lack coordinates.
        if values.notna().all():
            df[col] = values.astype(int)
        elif (values.dropna() % 1 == 0).all():
            df[col] = values.astype("Int64")
        else:
            df[col] = values

    chains = df.loc[df["type"] == CHAIN]
    duplicated = chains["order"].duplicated(keep=False)
    if duplicated.any():
        orders = sorted(chains.loc[duplicated, "order"].unique().tolist())
        raise DuplicateTrackError(f"More than one CHAIN on track(s): {orders}")

    lengths = pd.to_numeric(chains["length"], errors="coerce").to_numpy(dtype=float)
    bad = ~np.isfinite(lengths) | (lengths % 1 != 0) | (lengths < 1)
    if bad.any():
        row = chains.loc[bad].iloc[0]
        raise InvalidCoordinateError(
            f"CHAIN '{row['description']}' has an invalid length ({row['length']})"
        )

    per_accession = pd.to_numeric(df.loc[drawn, "length"], errors="coerce").groupby(
        df.loc[drawn, "accession"]
    ).nunique(dropna=False)
    if (per_accession > 1).any():
        accessions = per_accession.loc[per_accession > 1].index.tolist()
        raise FeatureTableError(f"Rows disagree on protein length for accession(s): {accessions}")

    chain_lengths = dict(zip(chains["order"], lengths.astype(int)))

    for _, row in df.loc[drawn].iterrows():
        begin, end, order = row["begin"], row["end"], row["order"]
        if order not in chain_lengths:
            raise UnknownTrackError(
                f"{row['type']} '{row['description']}' is on track {order}, which has no CHAIN"
            )
        if begin > end:
            raise InvalidCoordinateError(
                f"{row['type']} '{row['description']}' begins after it ends ({begin}-{end})"
            )
        if end > chain_lengths[order]:
            raise InvalidCoordinateError(
                f"{row['type']} '{row['description']}' ends at {end}, past the chain length {chain_lengths[order]}"
            )
    return df


def features_of_type(df: pd.DataFrame, *types: str) -> pd.DataFrame:
    """Return the rows whose ``type`` is one of *types* (may be empty)."""
    return df.loc[df["type"].isin(types)].copy()


def phospho_sites(df: pd.DataFrame) -> pd.DataFrame:
    """Extract phosphorylation sites from modified-residue annotations.

    A site is any ``MOD_RES`` row whose description mentions ``Phospho``
    (``Phosphoserine``, ``Phosphothreonine; by PKC`` ...).  Rows already
    tagged ``PHOSPHO`` pass through.  Each site is a single residue, so
    ``end`` is reset to ``begin``.
    """
    mod_res = df.loc[df["type"] == MOD_RES]
    mod_res = mod_res.loc[mod_res["description"].astype(str).str.contains("Phospho", regex=False)]
    sites = pd.concat([mod_res, df.loc[df["type"] == PHOSPHO]], ignore_index=True)
    if sites.empty:
        return pd.DataFrame(columns=df.columns)
    sites["type"] = PHOSPHO
    sites["end"] = sites["begin"]
    return sites


def strip_digits(text: str) -> str:
    """Remove every digit character, e.g. ``'ANK 1'`` -> ``'ANK '``."""
    return _DIGITS.sub("", text)
