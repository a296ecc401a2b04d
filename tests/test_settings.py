import textwrap

import pytest
from pydantic import ValidationError

from change_tracker import DataTracker, TrackerSettings
from change_tracker.io import LoaderError, load_settings


def _write(path, content: str) -> str:
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return str(path)


def test_defaults_match_reference_capacity():
    settings = TrackerSettings()
    assert settings.channel_capacity == 1
    assert settings.overflow == "drop_oldest"


def test_invalid_capacity_rejected():
    with pytest.raises(ValidationError):
        TrackerSettings(channel_capacity=0)


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(str(tmp_path / "absent.yaml")) == TrackerSettings()
    assert load_settings(None) == TrackerSettings()


def test_load_settings_from_yaml(tmp_path):
    path = _write(
        tmp_path / "tracker.yaml",
        """
        tracker:
          channel_capacity: 4
          overflow: error
        """,
    )

    settings = load_settings(path)

    assert settings.channel_capacity == 4
    assert settings.overflow == "error"


def test_empty_file_gives_defaults(tmp_path):
    path = _write(tmp_path / "tracker.yaml", "")
    assert load_settings(path) == TrackerSettings()


def test_invalid_policy_reports_field(tmp_path):
    path = _write(
        tmp_path / "tracker.yaml",
        """
        tracker:
          overflow: block
        """,
    )

    with pytest.raises(LoaderError) as excinfo:
        load_settings(path)

    assert "Invalid tracker settings" in str(excinfo.value)
    assert "overflow" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, ValidationError)


def test_unknown_key_rejected(tmp_path):
    path = _write(
        tmp_path / "tracker.yaml",
        """
        tracker:
          capacity: 2
        """,
    )

    with pytest.raises(LoaderError) as excinfo:
        load_settings(path)

    assert "capacity" in str(excinfo.value)


def test_malformed_yaml(tmp_path):
    path = _write(tmp_path / "tracker.yaml", "tracker: [unclosed\n")

    with pytest.raises(LoaderError) as excinfo:
        load_settings(path)

    assert "Malformed YAML" in str(excinfo.value)


def test_non_mapping_document(tmp_path):
    path = _write(tmp_path / "tracker.yaml", "- 1\n- 2\n")

    with pytest.raises(LoaderError):
        load_settings(path)


def test_tracker_uses_settings_for_new_subscriptions():
    tracker = DataTracker(0, settings=TrackerSettings(channel_capacity=2, overflow="drop_newest"))
    rx = tracker.subscribe()

    for new_value in (1, 2, 3):
        with tracker.modify() as m:
            m.value = new_value

    assert rx.pending == 2
    assert rx.try_recv() == (0, 1)
    assert rx.try_recv() == (1, 2)
