# settings_manager.py
import json
import os
import logging
import config # Import for default values
import utils


SETTINGS_FILENAME = "settings.json"


def get_settings_path() -> str:
    return os.path.join(config.get_app_data_folder(), SETTINGS_FILENAME)


def get_default_settings() -> dict:
    return {
        "documents_dir": None, # None = platform Documents folder
        "profile_id": None, # None = most recently modified profile
        "current_save_subdir": config.CURRENT_SAVE_SUBDIR,
        "save_file_pattern": config.SAVE_FILE_PATTERN,
        "dated_slot_prefix": config.DATED_SLOT_PREFIX,
        "dated_slot_format": config.DATED_SLOT_FORMAT,
        "check_free_space_enabled": True,
        "min_free_space_mb": config.MIN_FREE_SPACE_MB,
        "show_notifications": False,
        "log_to_file": True,
    }


def _validate_settings(settings: dict, defaults: dict) -> dict:
    """Replaces invalid values with defaults, logging a warning for each one."""
    # Optional strings
    for key in ("documents_dir", "profile_id"):
        value = settings.get(key)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            logging.warning(f"Invalid {key} value ('{value}'), using default {defaults[key]}.")
            settings[key] = defaults[key]

    if not isinstance(settings.get("current_save_subdir"), str):
        logging.warning(f"Invalid current_save_subdir value ('{settings.get('current_save_subdir')}'), using default '{defaults['current_save_subdir']}'.")
        settings["current_save_subdir"] = defaults["current_save_subdir"]
    elif utils.escapes_folder(settings["current_save_subdir"]):
        logging.warning(f"current_save_subdir must stay inside the profile folder ('{settings['current_save_subdir']}'), using default.")
        settings["current_save_subdir"] = defaults["current_save_subdir"]

    for key in ("save_file_pattern", "dated_slot_format"):
        value = settings.get(key)
        if not isinstance(value, str) or not value.strip():
            logging.warning(f"Invalid {key} value ('{value}'), using default '{defaults[key]}'.")
            settings[key] = defaults[key]

    if not isinstance(settings.get("dated_slot_prefix"), str):
        logging.warning(f"Invalid dated_slot_prefix value ('{settings.get('dated_slot_prefix')}'), using default '{defaults['dated_slot_prefix']}'.")
        settings["dated_slot_prefix"] = defaults["dated_slot_prefix"]

    min_free = settings.get("min_free_space_mb")
    # bool is an int subclass, reject it explicitly
    if isinstance(min_free, bool) or not isinstance(min_free, int) or min_free < 0:
        logging.warning(f"Invalid min_free_space_mb value ('{min_free}'), using default {defaults['min_free_space_mb']}.")
        settings["min_free_space_mb"] = defaults["min_free_space_mb"]

    for key in ("check_free_space_enabled", "show_notifications", "log_to_file"):
        if not isinstance(settings.get(key), bool):
            logging.warning(f"Invalid value for {key} ('{settings.get(key)}'), using default {defaults[key]}.")
            settings[key] = defaults[key]

    return settings


def load_settings():
    """Load settings from the settings file.

    Returns a tuple (settings, first_launch). Missing keys are filled in from
    the defaults; a missing or unreadable file counts as a first launch.
    """
    settings_file_path = get_settings_path()
    defaults = get_default_settings()

    if not os.path.exists(settings_file_path):
        logging.debug(f"Settings file '{settings_file_path}' not found, using defaults.")
        return defaults.copy(), True

    try:
        with open(settings_file_path, 'r', encoding='utf-8') as f:
            user_settings = json.load(f)
        if not isinstance(user_settings, dict):
            raise TypeError(f"settings root must be an object, not {type(user_settings).__name__}")
        logging.debug(f"Settings loaded successfully from '{settings_file_path}'.")
        # User settings override defaults
        settings = defaults.copy()
        settings.update(user_settings)
        return _validate_settings(settings, defaults), False
    except (json.JSONDecodeError, TypeError):
        logging.error(f"Failed to read or validate '{settings_file_path}'...", exc_info=True)
        return defaults.copy(), True
    except OSError:
        logging.error(f"Unable to read settings from '{settings_file_path}'.", exc_info=True)
        return defaults.copy(), True


def save_settings(settings_dict):
    """Save the settings dictionary. Returns bool (success)."""
    settings_file_path = get_settings_path()
    try:
        with open(settings_file_path, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
        logging.info(f"Settings saved to '{settings_file_path}'.")
        return True
    except (OSError, TypeError) as e:
        logging.error(f"Error saving settings to '{settings_file_path}': {e}")
        return False
