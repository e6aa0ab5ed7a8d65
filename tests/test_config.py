import pytest
import yaml

from casevis.core.config import CaseVisConfig, TextConfig, ViewerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CASEVIS_MODEL_PATH", "CASEVIS_CASE_FILE", "CASEVIS_MAPPINGS_FILE",
                 "CASEVIS_MESSAGE_TIMEOUT", "CASEVIS_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = CaseVisConfig()
    assert config.viewer.model_path == "assets/body_model.glb"
    assert config.viewer.emissive_intensity == 0.4
    assert config.viewer.message_timeout == 5.0
    assert config.text.notes_height == 400
    assert config.case_file is None
    assert config.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CASEVIS_MODEL_PATH", "/models/body.glb")
    monkeypatch.setenv("CASEVIS_CASE_FILE", "case.yaml")
    monkeypatch.setenv("CASEVIS_MESSAGE_TIMEOUT", "2.5")
    monkeypatch.setenv("CASEVIS_DEBUG", "yes")

    config = CaseVisConfig()
    assert config.viewer.model_path == "/models/body.glb"
    assert config.case_file == "case.yaml"
    assert config.viewer.message_timeout == 2.5
    assert config.debug is True
    assert config.log_level == "DEBUG"


def test_bad_timeout_env(monkeypatch):
    monkeypatch.setenv("CASEVIS_MESSAGE_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="CASEVIS_MESSAGE_TIMEOUT"):
        CaseVisConfig()


def test_save_and_load_round_trip(tmp_path):
    config = CaseVisConfig(viewer=ViewerConfig(model_path="m.glb", height=500), text=TextConfig(mark_color="orange"))
    config.mappings_file = "table.yaml"
    path = tmp_path / "casevis.yaml"
    config.save_to_file(str(path))

    loaded = CaseVisConfig.load_from_file(str(path))
    assert loaded.viewer.model_path == "m.glb"
    assert loaded.viewer.height == 500
    assert loaded.text.mark_color == "orange"
    assert loaded.mappings_file == "table.yaml"


def test_load_invalid_file(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("viewer:\n  no_such_option: 1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Failed to load config"):
        CaseVisConfig.load_from_file(str(path))


def test_saved_text_section_holds_only_read_options(tmp_path):
    path = tmp_path / "casevis.yaml"
    CaseVisConfig().save_to_file(str(path))
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert set(data["text"]) == {"notes_height", "mark_color"}
