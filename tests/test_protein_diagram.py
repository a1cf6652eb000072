import altair as alt
import pytest

from protviz.compositor import LayerRequest, compose
from protviz.errors import EmptyInputError, UnknownTrackError
from protviz.figures import protein_diagram
from protviz.figures.base import PALETTE, category_colors
from protviz.frame import compute_frame
from protviz.geometry import LayerConfig


def _layers(spec: dict) -> list:
    return spec["layer"]


def test_make_plot_returns_layered_chart(five_rel_df):
    chart = protein_diagram.make_plot(five_rel_df)
    assert isinstance(chart, alt.LayerChart)
    spec = chart.to_dict()
    # frame + chains(rect, label) + domains(rect, box, label) + regions + motifs
    # + repeats(rect, label) + phospho
    assert len(_layers(spec)) == 11


def test_frame_layer_owns_axis_and_fixes_domain(kinase_df):
    spec = protein_diagram.make_plot(kinase_df).to_dict()
    frame = _layers(spec)[0]
    x = frame["encoding"]["x"]
    assert x["title"] == "Amino acid number"
    assert x["scale"]["domain"] == [pytest.approx(-100), pytest.approx(550)]
    assert frame["encoding"]["y"]["scale"]["domain"] == [0.5, 1.5]
    for layer in _layers(spec)[1:]:
        assert layer["encoding"]["x"]["axis"] is None


def test_categorical_layers_share_palette(five_rel_df):
    scene = compose(
        compute_frame(five_rel_df),
        [LayerRequest("domains"), LayerRequest("regions")],
        five_rel_df,
    )
    spec = protein_diagram.render(scene).to_dict()
    scales = [
        layer["encoding"]["color"]["scale"]
        for layer in _layers(spec)
        if "color" in layer.get("encoding", {})
    ]
    assert len(scales) == 2
    assert scales[0] == scales[1]
    assert scales[0]["domain"] == ["Disordered", "RHD"]
    assert scales[0]["range"] == PALETTE[:2]


def test_empty_layers_are_skipped(kinase_df):
    spec = protein_diagram.make_plot(kinase_df, layers=["chains", "receptors", "phospho"]).to_dict()
    assert len(_layers(spec)) == 3


def test_chain_labels_are_right_aligned(kinase_df):
    spec = protein_diagram.make_plot(kinase_df, layers=["chains"]).to_dict()
    text = [layer for layer in _layers(spec) if layer["mark"]["type"] == "text"]
    assert len(text) == 1
    assert text[0]["mark"]["align"] == "right"


def test_layer_requests_and_names_can_mix(receptor_df):
    layers = ["chains", LayerRequest("receptors", LayerConfig(show_labels=True))]
    spec = protein_diagram.make_plot(receptor_df, layers=layers, title="TNFR1").to_dict()
    assert spec["title"]["text"] == "TNFR1"
    # frame, chain rect, chain label, receptor rects, receptor boxes, receptor labels
    assert len(_layers(spec)) == 6


def test_domain_labels_sit_on_white_boxes(kinase_df):
    spec = protein_diagram.make_plot(kinase_df, layers=["chains", "domains"]).to_dict()
    boxes = [layer for layer in _layers(spec) if layer["mark"].get("fill") == "white"]
    assert len(boxes) == 1
    (box,) = spec["datasets"][boxes[0]["data"]["name"]]
    assert box["xmin"] < 85 < box["xmax"]
    assert box["ymin"] < 1 < box["ymax"]
    text = [layer for layer in _layers(spec) if layer["mark"]["type"] == "text"]
    assert _layers(spec).index(boxes[0]) < _layers(spec).index(text[-1])


def test_repeat_and_chain_labels_are_unboxed(five_rel_df):
    spec = protein_diagram.make_plot(five_rel_df, layers=["chains", "repeats"]).to_dict()
    assert not [layer for layer in _layers(spec) if layer["mark"].get("fill") == "white"]


def test_height_scales_with_tracks(five_rel_df):
    spec = protein_diagram.make_plot(five_rel_df, track_height=40).to_dict()
    assert spec["height"] == 200


def test_invalid_tables_raise_before_rendering(kinase_df):
    with pytest.raises(EmptyInputError):
        protein_diagram.make_plot(kinase_df.loc[kinase_df["type"] != "CHAIN"])
    kinase_df.loc[1, "order"] = 2
    with pytest.raises(UnknownTrackError):
        protein_diagram.make_plot(kinase_df)


def test_category_colors_are_deterministic():
    first = category_colors(["Kinase", "SH2", "SH3", "Kinase"])
    second = category_colors(["SH3", "SH2", "Kinase"])
    assert first == second == {"Kinase": PALETTE[0], "SH2": PALETTE[1], "SH3": PALETTE[2]}


def test_category_colors_cycle_palette():
    keys = [f"Domain {i}" for i in range(len(PALETTE) + 1)]
    colors = category_colors(keys)
    assert colors["Domain 0"] == colors[f"Domain {len(PALETTE)}"] == PALETTE[0]
