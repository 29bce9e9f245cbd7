"""Smoke tests for the UI and CLI modules (no display required)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from creepsim.ui.pygame_client import PygameRenderer


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from creepsim.__main__ import main

    assert callable(main)


def test_headless_run(
    tmp_path: Path,
    make_room_dict,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """``--headless`` steps the world and prints the final snapshot."""
    import creepsim.__main__ as cli

    monkeypatch.setattr(cli, "_configure_logging", lambda level: None)
    room_file = tmp_path / "roomExport.json"
    room_file.write_text(json.dumps(make_room_dict()))
    cli.main([str(room_file), "--headless", "20"])

    snap = json.loads(capsys.readouterr().out)
    assert snap["tick"] == 20
    assert snap["creeps"] == [{"id": "creep1", "x": 25, "y": 25, "targetId": "a"}]


@pytest.mark.parametrize("speed", ["0", "-5"])
def test_non_positive_speed_rejected(
    tmp_path: Path,
    make_room_dict,
    speed: str,
) -> None:
    """``--speed`` must be positive; argparse exits with a usage error."""
    from creepsim.__main__ import main

    room_file = tmp_path / "roomExport.json"
    room_file.write_text(json.dumps(make_room_dict()))
    with pytest.raises(SystemExit) as excinfo:
        main([str(room_file), "--speed", speed, "--headless", "1"])
    assert excinfo.value.code == 2
