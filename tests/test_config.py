import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from config import AppConfig, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "missing.json") == AppConfig()


def test_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    cfg = AppConfig(model="gemini-2.5-pro", dev_mode=True, tutorial=False, log_level="DEBUG")
    save_config(cfg, path)
    assert load_config(path) == cfg


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text('{"dev_mode": true, "font_size": 14}', encoding="utf-8")
    with caplog.at_level("WARNING"):
        cfg = load_config(path)
    assert cfg.dev_mode is True
    assert "font_size" in caplog.text
