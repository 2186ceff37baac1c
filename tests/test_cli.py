from __future__ import annotations

import json
import logging

from cargo_packer.cli import main
from cargo_packer.config import Settings, get_settings


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_cli_writes_export(tmp_path, capsys) -> None:
    source = _write(tmp_path / "shipment.json", {
        "container": {"length": 100, "width": 100, "height": 100},
        "boxes": [{"id": "A", "length": 20, "width": 20, "height": 20, "quantity": 3}],
    })
    target = tmp_path / "out" / "plan.json"

    code = main(["--input", str(source), "--output", str(target), "--algorithm", "layer"])

    assert code == 0
    plan = json.loads(target.read_text(encoding="utf-8"))
    assert plan["algorithm"] == "layer"
    assert [b["box_id"] for b in plan["packedBoxes"]] == ["A_0001", "A_0002", "A_0003"]
    assert plan["unplacedBoxes"] == []
    assert "Placed: 3" in capsys.readouterr().out


def test_cli_flags_override_file_options(tmp_path) -> None:
    source = _write(tmp_path / "shipment.json", {
        "container": {"length": 10, "width": 10, "height": 30},
        "boxes": [{"length": 30, "width": 10, "height": 10}],
        "options": {"algorithm": "best-fit"},
    })
    target = tmp_path / "plan.json"

    assert main(["--input", str(source), "--output", str(target), "--no-rotation"]) == 0

    plan = json.loads(target.read_text(encoding="utf-8"))
    assert plan["algorithm"] == "best-fit"
    # 30 long box only fits the 10 long, 30 high container when turned upright
    assert plan["packedBoxes"] == []
    assert plan["unplacedBoxes"][0]["reason"] == "no_fit"


def test_cli_reports_unreadable_input(tmp_path) -> None:
    source = _write(tmp_path / "shipment.json", {"boxes": []})

    assert main(["--input", str(source), "--output", str(tmp_path / "plan.json")]) == 2
    assert main(["--input", str(tmp_path / "missing.json"), "--output", str(tmp_path / "plan.json")]) == 2


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CARGO_PACKER_LOG_LEVEL", "warning")
    monkeypatch.setenv("CARGO_PACKER_DEFAULT_ALGORITHM", "best-fit")
    monkeypatch.delenv("CARGO_PACKER_DEBUG", raising=False)

    settings = get_settings()

    assert settings.default_algorithm == "best-fit"
    assert settings.effective_level == logging.WARNING


def test_debug_flag_forces_debug_level() -> None:
    assert Settings(log_level="ERROR", debug=True).effective_level == logging.DEBUG
    assert Settings(log_level="nonsense").effective_level == logging.INFO


def test_unknown_default_algorithm_falls_back(monkeypatch, caplog) -> None:
    monkeypatch.setenv("CARGO_PACKER_DEFAULT_ALGORITHM", "quantum")

    with caplog.at_level(logging.WARNING, logger="cargo_packer.config"):
        settings = get_settings()

    assert settings.default_algorithm == "constrained"
    assert "quantum" in caplog.text
