"""Tests for the JSON document schema (metadata line payload)."""

from __future__ import annotations

import json
from dataclasses import replace

import pytest

from path_codec.exceptions import ConfigError, DiscontinuousPath, DocumentError
from path_codec.formats.base import PathFileData
from path_codec.formats.document import (
    document_as_dict,
    dump_path_file_data,
    load_path_file_data,
)
from path_codec.formats.lemlib_v0_4 import LemLibFormatV0_4
from path_codec.geometry.spline import Path, Spline
from path_codec.geometry.vertex import Control, EndPointControl
from path_codec.units.converter import UnitOfLength


@pytest.fixture()
def document() -> PathFileData:
    fmt = LemLibFormatV0_4()
    gc, sc = fmt.config.gc, fmt.config.sc
    path = Path(
        Spline(EndPointControl(0, 0, 90), Control(0, 10), Control(10, 10), EndPointControl(10, 0, 180)),
        Spline(EndPointControl(10, 0, 180), EndPointControl(20, -5, 270)),
        gc=gc,
        sc=sc,
        name="Auton",
    )
    return fmt.new_document([path])


class TestDump:
    def test_single_line(self, document: PathFileData) -> None:
        assert "\n" not in dump_path_file_data(document)

    def test_camel_case_keys(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        assert data["appVersion"] == document.app_version
        assert data["gc"]["knotDensity"] == 2
        assert data["gc"]["uol"] == 25.4
        speed_limit = data["sc"]["speedLimit"]
        assert speed_limit["from"] == 20
        assert speed_limit["maxLimit"] == {"value": 127, "label": "127"}
        assert "transitionRange" in data["sc"]

    def test_heading_only_on_end_points(self, document: PathFileData) -> None:
        controls = document_as_dict(document)["paths"][0]["splines"][0]["controls"]
        assert controls[0]["heading"] == 90
        assert "heading" not in controls[1]
        assert "heading" not in controls[2]
        assert controls[3]["heading"] == 180


class TestLoad:
    def test_round_trip(self, document: PathFileData) -> None:
        again = load_path_file_data(dump_path_file_data(document))
        assert again.format == document.format
        assert again.gc == document.gc
        assert again.sc == document.sc
        (path,) = again.paths
        (orig,) = document.paths
        assert (path.uid, path.name) == (orig.uid, "Auton")
        assert path.splines == orig.splines
        assert [s.uid for s in path.splines] == [s.uid for s in orig.splines]

    def test_headings_restored(self, document: PathFileData) -> None:
        path = load_path_file_data(dump_path_file_data(document)).paths[0]
        assert path.splines[0].first.heading == 90
        assert path.splines[1].last.heading == 270

    def test_paths_share_document_config(self, document: PathFileData) -> None:
        again = load_path_file_data(dump_path_file_data(document))
        assert again.paths[0].gc is again.gc
        assert again.paths[0].sc is again.sc

    def test_unit_of_length(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["gc"]["uol"] = 10.0
        assert load_path_file_data(json.dumps(data)).gc.uol is UnitOfLength.CENTIMETER

    def test_invalid_json(self) -> None:
        with pytest.raises(DocumentError, match="Invalid path file data"):
            load_path_file_data("{not json")

    def test_three_controls(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["paths"][0]["splines"][0]["controls"].pop()
        with pytest.raises(DocumentError, match="2 or 4 controls"):
            load_path_file_data(json.dumps(data))

    def test_unknown_key(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["gc"]["colour"] = "red"
        with pytest.raises(DocumentError):
            load_path_file_data(json.dumps(data))

    def test_range_out_of_order(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["sc"]["speedLimit"]["from"] = 110
        with pytest.raises(DocumentError):
            load_path_file_data(json.dumps(data))

    def test_discontinuous_path(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["paths"][0]["splines"][1]["controls"][0]["x"] = 11
        with pytest.raises(DiscontinuousPath):
            load_path_file_data(json.dumps(data))

    def test_output_extras_preserved(self, document: PathFileData) -> None:
        data = document_as_dict(document)
        data["oc"] = {"filename": "auton.txt"}
        assert load_path_file_data(json.dumps(data)).oc.extras == {"filename": "auton.txt"}

    def test_config_error_is_not_document_error(self) -> None:
        assert not issubclass(ConfigError, DocumentError)


class TestPathSettings:
    def test_shared_settings_not_repeated(self, document: PathFileData) -> None:
        path_data = document_as_dict(document)["paths"][0]
        assert "gc" not in path_data
        assert "sc" not in path_data

    def test_own_settings_round_trip(self, document: PathFileData) -> None:
        path = document.paths[0]
        path.gc = replace(path.gc, uol=UnitOfLength.CENTIMETER, knot_density=5)
        path.sc = path.sc.with_max_speed(64)

        path_data = document_as_dict(document)["paths"][0]
        assert path_data["gc"]["uol"] == 10
        assert path_data["sc"]["speedLimit"]["to"] == 64

        again = load_path_file_data(dump_path_file_data(document))
        restored = again.paths[0]
        assert restored.gc == path.gc
        assert restored.sc == path.sc
        assert again.gc.uol is UnitOfLength.INCH
        assert again.sc.speed_limit.to == 100

    def test_invalid_path_range(self, document: PathFileData) -> None:
        path = document.paths[0]
        path.sc = path.sc.with_max_speed(64)
        data = document_as_dict(document)
        data["paths"][0]["sc"]["speedLimit"]["to"] = 10
        with pytest.raises(DocumentError):
            load_path_file_data(json.dumps(data))
