"""Tests for SVG document export and the cutshape-svg CLI."""

import xml.etree.ElementTree as ET

import pytest

from cutshape.cli import main as cli_main
from cutshape.core.pipeline import ShapeController
from cutshape.svg.exporter import SVG_NS, XHTML_NS, export_svg, image_aspect, image_offset, render_svg
from cutshape.utils.errors import CutShapeIOError

NS = {"svg": SVG_NS}


def _render(attrs, size=(201, 101), loaded=False):
    ctl = ShapeController(attrs)
    ctl.set_box_size(*size)
    if loaded:
        ctl.mark_image_loaded()
    return ctl, ET.fromstring(render_svg(ctl.result, ctl.attributes))


class TestDocument:
    def test_root_and_path(self, scenario_path):
        _, root = _render({"corner-size": "60"})
        assert root.tag == f"{{{SVG_NS}}}svg"
        assert root.get("viewBox") == "0 0 200 100"
        assert root.get("width") == "201"
        assert root.get("preserveAspectRatio") == "none"

        path = root.find("svg:path", NS)
        assert path.get("d") == scenario_path
        assert path.get("stroke-width") == "1"
        assert path.get("fill") is None
        assert root.find("svg:defs", NS) is None

    def test_blur_clip(self):
        ctl, root = _render({"id": "hero", "filter": "blur"})
        div = root.find(f"svg:foreignObject/{{{XHTML_NS}}}div", NS)
        assert "clip-path:url(#hero-clip)" in div.get("style")
        assert "blur(" in div.get("style")

        clip = root.find("svg:defs/svg:clipPath", NS)
        assert clip.get("id") == "hero-clip"
        assert clip.find("svg:path", NS).get("d") == ctl.path_data

    def test_image_pattern(self):
        _, root = _render(
            {"id": "hero", "image": "bg.png", "image-position": "tl", "overlay": "0.4"}, loaded=True
        )
        assert root.find("svg:path", NS).get("fill") == "url(#hero-pattern)"

        pattern = root.find("svg:pattern", NS)
        assert pattern.get("id") == "hero-pattern"
        image = pattern.find("svg:image", NS)
        assert image.get("href") == "bg.png"
        assert image.get("preserveAspectRatio") == "xMidYMin slice"
        assert pattern.find("svg:rect", NS).get("opacity") == "0.4"

    def test_pattern_before_load_has_no_fill(self):
        _, root = _render({"image": "bg.png"})
        assert root.find("svg:path", NS).get("fill") is None
        assert root.find("svg:pattern", NS) is not None
        assert root.find("svg:pattern/svg:rect", NS) is None

    @pytest.mark.parametrize(
        "pos,expected",
        [
            ("tl", "xMidYMin slice"),
            ("tr", "xMaxYMin slice"),
            ("bl", "xMinYMax slice"),
            ("BR", "xMaxYMax slice"),
            (None, "xMidYMid slice"),
            ("center", "xMidYMid slice"),
        ],
    )
    def test_image_aspect(self, pos, expected):
        assert image_aspect(pos) == expected

    @pytest.mark.parametrize(
        "pos,expected",
        [
            ("tl", (-10, 0)),
            ("tr", (-20, 0)),
            ("bl", (0, -50)),
            ("br", (-20, -50)),
            (None, (-10, -25)),
        ],
    )
    def test_image_offset(self, pos, expected):
        # Imagen 220x150 cubriendo una caja 200x100.
        assert image_offset(pos, 200, 100, 220, 150) == expected


class TestExport:
    def test_forces_svg_suffix(self, tmp_path):
        ctl = ShapeController()
        ctl.set_box_size(300, 200)
        p = export_svg(ctl.result, ctl.attributes, tmp_path / "out" / "shape.png")
        assert p == tmp_path / "out" / "shape.svg"
        assert p.read_text(encoding="utf-8").startswith("<svg")

    def test_io_error(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x", encoding="utf-8")
        ctl = ShapeController()
        ctl.set_box_size(300, 200)
        with pytest.raises(CutShapeIOError):
            export_svg(ctl.result, ctl.attributes, blocker / "shape.svg")


class TestCli:
    def test_path_only(self, capsys, scenario_path):
        rc = cli_main(
            ["--width", "200", "--height", "100", "--corner-size", "60", "--stroke-width", "0", "--path-only"]
        )
        assert rc == 0
        assert capsys.readouterr().out.strip() == scenario_path

    def test_custom_property(self, capsys):
        rc = cli_main(
            ["--width", "400", "--height", "300", "--corner-size", "var(--cut)", "--var=--cut=72px", "--path-only"]
        )
        assert rc == 0
        assert capsys.readouterr().out.startswith("M 20 0 ")

    def test_degenerate_box(self, capsys):
        assert cli_main(["--width", "0", "--height", "100"]) == 2
        assert "error" in capsys.readouterr().err

    def test_document_to_stdout(self, capsys):
        assert cli_main(["--width", "300", "--height", "200", "--bbox"]) == 0
        out, err = capsys.readouterr()
        assert ET.fromstring(out).tag == f"{{{SVG_NS}}}svg"
        assert err.startswith("bbox:")

    def test_out_file(self, tmp_path):
        out = tmp_path / "panel"
        assert cli_main(["--width", "300", "--height", "200", "--variant", "button", "-o", str(out)]) == 0
        assert (tmp_path / "panel.svg").is_file()
