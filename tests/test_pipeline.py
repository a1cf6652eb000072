import argparse
import sys

import pytest

import pipeline


def _args(**overrides):
    defaults = dict(
        no_chain_labels=False,
        no_domain_labels=False,
        label_regions=False,
        label_motifs=False,
        no_repeat_labels=False,
        receptors=False,
        label_receptors=False,
        no_phospho=False,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


def test_default_layers():
    layers = pipeline.build_layers(_args())
    assert [r.builder for r in layers] == ["chains", "domains", "regions", "motifs", "repeats", "phospho"]
    assert layers[0].config.show_labels is True
    assert layers[2].config.show_labels is False


def test_receptor_and_label_switches():
    layers = pipeline.build_layers(
        _args(receptors=True, label_receptors=True, no_phospho=True, no_chain_labels=True)
    )
    assert [r.builder for r in layers][-1] == "receptors"
    assert layers[-1].config.show_labels is True
    assert layers[0].config.show_labels is False


def test_main_writes_one_figure_per_table(tmp_path, kinase_df, receptor_df, monkeypatch):
    in_dir, out_dir = tmp_path / "in", tmp_path / "out"
    in_dir.mkdir()
    kinase_df.to_csv(in_dir / "kinase_features.tsv", sep="\t", index=False)
    receptor_df.to_csv(in_dir / "tnfr_features.csv", index=False)

    monkeypatch.setattr(
        sys, "argv", ["pipeline.py", str(in_dir), str(out_dir), "--format", "html", "--receptors"]
    )
    pipeline.main()

    assert sorted(p.name for p in out_dir.iterdir()) == [
        "kinase_features_protein_diagram.html",
        "tnfr_features_protein_diagram.html",
    ]


def test_main_reports_invalid_table(tmp_path, kinase_df, monkeypatch):
    kinase_df.loc[1, ["begin", "end"]] = [120, 50]
    path = tmp_path / "bad_features.tsv"
    kinase_df.to_csv(path, sep="\t", index=False)

    monkeypatch.setattr(sys, "argv", ["pipeline.py", str(path), str(tmp_path / "out"), "--format", "html"])
    with pytest.raises(SystemExit, match="begins after it ends"):
        pipeline.main()
