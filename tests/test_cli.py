"""Tests for the command-line scene runner."""

import json
import logging

import pytest

from camframe.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def _write_scene(tmp_path, data):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(data))
    return path


ONE_CUBE = {"volumes": [{"center": [0, 0, 0], "extents": [1, 1, 1]}]}

FAR_PAIR = {
    "camera": {"position": [0, 0, 0], "far_clip": 5.0},
    "volumes": [
        {"center": [0, 0, 0], "extents": [1, 1, 1]},
        {"center": [0, 0, 20], "extents": [1, 1, 1]},
    ],
}


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["scene.json"])
        assert args.fps == 60.0
        assert not args.orthographic
        assert not args.json
        assert args.config is None


class TestMain:
    def test_visible_scene_exits_zero(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, ONE_CUBE))])
        out = capsys.readouterr().out
        assert code == 0
        assert "Number of failed test : 0" in out
        assert "Visible objects 1/1" in out

    def test_failing_scene_exits_one(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, FAR_PAIR))])
        out = capsys.readouterr().out
        assert code == 1
        assert "Visible objects 1/2" in out
        assert "Object at position (0.0, 0.0, 20.0) not visible." in out

    def test_toggle_keeps_perspective_failure(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, FAR_PAIR)), "--toggle"])
        out = capsys.readouterr().out
        # orthographic pass is clean but the perspective pass failed
        assert code == 1
        assert "Number of failed test : 1" in out
        assert "Visible objects 2/2" in out

    def test_orthographic_flag(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, FAR_PAIR)), "--orthographic"])
        assert code == 0

    def test_json_output(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, ONE_CUBE)), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["summary"] == "1/1"
        assert data["volumes"][0]["verdict"] == "visible"

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.json")]) == 2

    def test_invalid_scene(self, tmp_path):
        path = _write_scene(tmp_path, {"volumes": [{"center": [0, 0], "extents": [1, 1, 1]}]})
        assert main([str(path)]) == 2

    def test_empty_scene(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, {"volumes": []}))])
        assert code == 0
        assert capsys.readouterr().out == ""

    def test_log_file(self, tmp_path, capsys):
        log_file = tmp_path / "logs" / "run.log"
        main([str(_write_scene(tmp_path, ONE_CUBE)), "--log-file", str(log_file)])
        for h in logging.getLogger().handlers:
            h.flush()
        assert "Visibility check passed" in log_file.read_text()

    def test_toggle_json_reports_earlier_failure(self, tmp_path, capsys):
        scene = {
            "camera": {"position": [0, 0, 0], "far_clip": 12.0},
            "volumes": [
                {"center": [0, 0, 0], "extents": [1, 1, 1]},
                {"center": [0, 0, 30], "extents": [1, 1, 1]},
            ],
        }
        code = main([str(_write_scene(tmp_path, scene)), "--toggle", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["summary"] == "2/2"
        assert data["fail_count"] == 1
        assert code == 1

    def test_toggle_all_visible_in_both(self, tmp_path, capsys):
        code = main([str(_write_scene(tmp_path, ONE_CUBE)), "--toggle"])
        assert code == 0
        assert "Number of failed test : 0" in capsys.readouterr().out

    def test_config_overlay_file(self, tmp_path, capsys):
        config = tmp_path / "camframe.json"
        config.write_text(json.dumps({"camera": {"far_clip": 5.0}}))
        scene = {
            "camera": {"position": [0, 0, 0]},
            "volumes": FAR_PAIR["volumes"],
        }
        code = main([str(_write_scene(tmp_path, scene)), "--config", str(config)])
        assert code == 1
        assert "Visible objects 1/2" in capsys.readouterr().out

    def test_scene_camera_beats_config_file(self, tmp_path, capsys):
        config = tmp_path / "camframe.json"
        config.write_text(json.dumps({"camera": {"far_clip": 5.0}}))
        scene = {
            "camera": {"position": [0, 0, 0], "far_clip": 1000.0},
            "volumes": FAR_PAIR["volumes"],
        }
        code = main([str(_write_scene(tmp_path, scene)), "--config", str(config)])
        assert code == 0
