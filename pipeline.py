"""Protein Feature Diagram Pipeline

Usage:
    python pipeline.py <input> <output_dir> [--format html|png|svg] [options]

<input> is either a single feature table or a directory; in a directory every
file with "features" in its name is drawn.

Each feature table (TSV, CSV or Excel) must contain the columns:
    type, description, begin, end, length, accession, entryName, taxid, order
with one CHAIN row per protein.  ``order`` sets the protein's track (1 = bottom).

Drawn feature types:
    CHAIN               grey backbone, labelled with entryName
    DOMAIN              colored by description, labelled
    REGION, MOTIF       colored by description
    REPEAT              dark grey, labelled without repeat numbers
    TOPO_DOM, TRANSMEM  receptor segments (--receptors)
    MOD_RES             phosphorylation sites ("Phospho..." descriptions)

Outputs (saved to output_dir):
    {stem}_protein_diagram    one figure per input table

PNG and SVG output require vl-convert-python (pip install vl-convert-python).
Excel input requires openpyxl (pip install openpyxl).
"""

import argparse
import sys
from pathlib import Path

from protviz import io
from protviz.compositor import LayerRequest
from protviz.errors import FeatureTableError
from protviz.figures import protein_diagram
from protviz.geometry import LayerConfig


def parse_args():
    parser = argparse.ArgumentParser(
        description="Draw stacked protein feature diagrams from feature tables."
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Feature table, or a directory containing *features* files",
    )
    parser.add_argument(
        "output_dir",
        type=Path,
        help="Directory to write output figures",
    )
    parser.add_argument(
        "--format",
        choices=["html", "png", "svg"],
        default="png",
        help="Output format for figures (default: png). "
             "PNG/SVG require vl-convert-python.",
    )
    parser.add_argument(
        "--receptors",
        action="store_true",
        default=False,
        help="Also draw receptor topology (TOPO_DOM and TRANSMEM) segments.",
    )
    parser.add_argument("--no-chain-labels", action="store_true", default=False,
                        help="Do not label chains with their entry name.")
    parser.add_argument("--no-domain-labels", action="store_true", default=False,
                        help="Do not label domains.")
    parser.add_argument("--label-regions", action="store_true", default=False,
                        help="Label regions with their description.")
    parser.add_argument("--label-motifs", action="store_true", default=False,
                        help="Label motifs with their description.")
    parser.add_argument("--no-repeat-labels", action="store_true", default=False,
                        help="Do not label repeats.")
    parser.add_argument("--label-receptors", action="store_true", default=False,
                        help="Label receptor segments (transmembrane segments read 'TM').")
    parser.add_argument("--no-phospho", action="store_true", default=False,
                        help="Do not draw phosphorylation sites.")
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        metavar="N",
        help="Width of the plotting area in pixels (default: 800).",
    )
    parser.add_argument(
        "--track-height",
        type=int,
        default=50,
        metavar="N",
        help="Height of each protein track in pixels (default: 50).",
    )
    return parser.parse_args()


def build_layers(args) -> list:
    """Translate command-line switches into an ordered list of layer requests."""
    layers = [
        LayerRequest("chains", LayerConfig(show_labels=not args.no_chain_labels)),
        LayerRequest("domains", LayerConfig(show_labels=not args.no_domain_labels)),
        LayerRequest("regions", LayerConfig(show_labels=args.label_regions)),
        LayerRequest("motifs", LayerConfig(show_labels=args.label_motifs)),
        LayerRequest("repeats", LayerConfig(show_labels=not args.no_repeat_labels)),
    ]
    if args.receptors:
        layers.append(LayerRequest("receptors", LayerConfig(show_labels=args.label_receptors)))
    if not args.no_phospho:
        layers.append(LayerRequest("phospho"))
    return layers


def main():
    args = parse_args()

    if args.input.is_dir():
        print(f"Scanning for feature tables in: {args.input}")
        paths = io.find_feature_files(args.input)
        print(f"  Found {len(paths)} table(s): {', '.join(p.name for p in paths)}")
    elif args.input.is_file():
        paths = [args.input]
    else:
        sys.exit(f"Error: input not found: {args.input}")

    args.output_dir.mkdir(parents=True, exist_ok=True)
    fmt = args.format
    layers = build_layers(args)

    for path in paths:
        print(f"\n[{path.stem}] Loading features...")
        df = io.load_features(path)
        n_proteins = int((df["type"].astype(str).str.upper() == "CHAIN").sum()) if "type" in df.columns else 0
        print(f"  {len(df)} features across {n_proteins} protein(s)")

        try:
            chart = protein_diagram.make_plot(
                df,
                layers=layers,
                width=args.width,
                track_height=args.track_height,
            )
        except FeatureTableError as exc:
            sys.exit(f"Error: {path.name}: {exc}")

        io.save_figure(chart, args.output_dir / f"{path.stem}_protein_diagram.{fmt}")

    print(f"\nDone. Figures saved to: {args.output_dir}")


if __name__ == "__main__":
    main()
