"""Tests for loading, validating and saving settings.json."""

import json

import settings_manager


def write_settings(app_data_dir, data):
    (app_data_dir / settings_manager.SETTINGS_FILENAME).write_text(json.dumps(data), encoding="utf-8")


def test_first_launch_returns_defaults():
    settings, first_launch = settings_manager.load_settings()

    assert first_launch is True
    assert settings == settings_manager.get_default_settings()


def test_user_values_override_defaults(app_data_dir):
    write_settings(app_data_dir, {"profile_id": "1A2B3C4D", "min_free_space_mb": 10})

    settings, first_launch = settings_manager.load_settings()

    assert first_launch is False
    assert settings["profile_id"] == "1A2B3C4D"
    assert settings["min_free_space_mb"] == 10
    assert settings["save_file_pattern"] == "SGTA*"


def test_invalid_values_fall_back_to_defaults(app_data_dir):
    write_settings(app_data_dir, {
        "profile_id": "",
        "current_save_subdir": 5,
        "save_file_pattern": "",
        "dated_slot_format": None,
        "min_free_space_mb": True,
        "check_free_space_enabled": "yes",
        "show_notifications": 1,
    })

    settings, _ = settings_manager.load_settings()
    defaults = settings_manager.get_default_settings()

    for key in ("profile_id", "current_save_subdir", "save_file_pattern", "dated_slot_format",
                "min_free_space_mb", "check_free_space_enabled", "show_notifications"):
        assert settings[key] == defaults[key], key


def test_absolute_current_save_subdir_is_rejected(app_data_dir, tmp_path):
    write_settings(app_data_dir, {"current_save_subdir": str(tmp_path)})

    settings, _ = settings_manager.load_settings()

    assert settings["current_save_subdir"] == ""


def test_parent_current_save_subdir_is_rejected(app_data_dir):
    write_settings(app_data_dir, {"current_save_subdir": "../Slots"})

    settings, _ = settings_manager.load_settings()

    assert settings["current_save_subdir"] == ""


def test_corrupt_file_is_treated_as_first_launch(app_data_dir):
    (app_data_dir / settings_manager.SETTINGS_FILENAME).write_text("{not json", encoding="utf-8")

    settings, first_launch = settings_manager.load_settings()

    assert first_launch is True
    assert settings == settings_manager.get_default_settings()


def test_non_object_root_is_treated_as_first_launch(app_data_dir):
    write_settings(app_data_dir, ["a", "list"])

    _, first_launch = settings_manager.load_settings()

    assert first_launch is True


def test_save_then_load(app_data_dir):
    settings = settings_manager.get_default_settings()
    settings["profile_id"] = "FFFF0000"
    settings["show_notifications"] = True

    assert settings_manager.save_settings(settings) is True
    loaded, first_launch = settings_manager.load_settings()

    assert first_launch is False
    assert loaded == settings
