# config.py
import os
import logging
import platform


# --- Application name (used for the app data folder) ---
APP_NAME = "GTAVSaveLoad"
APP_VERSION = "0.3.0"

# --- Function to find/create the app data folder ---
def get_app_data_folder():
    """Returns the app data folder path (%LOCALAPPDATA% on Windows)
       and creates it if missing. Handles basic fallbacks."""
    system = platform.system()
    base_path = None
    app_folder = None

    try:
        if system == "Windows":
            base_path = os.getenv('LOCALAPPDATA')
        elif system == "Darwin": # macOS
            base_path = os.path.expanduser('~/Library/Application Support')
        else:
            # XDG Base Directory Specification
            base_path = os.getenv('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))

        if not base_path:
            logging.error("Unable to determine the standard user data folder. Using the current folder as fallback.")
            app_folder = os.path.abspath(APP_NAME)
        else:
            app_folder = os.path.join(base_path, APP_NAME)

        if not os.path.exists(app_folder):
            try:
                os.makedirs(app_folder, exist_ok=True)
                logging.info(f"Created application data folder: {app_folder}")
            except OSError as e:
                # load/save will report the error when they touch the folder
                logging.error(f"Unable to create data folder {app_folder}: {e}.")

    except Exception as e:
        logging.error(f"Unexpected error in get_app_data_folder: {e}. Falling back to CWD.", exc_info=True)
        app_folder = os.path.abspath(APP_NAME)

    return app_folder


def get_documents_folder():
    """Returns the user's Documents folder, where Rockstar Games keeps its data."""
    if platform.system() == "Windows":
        user_profile = os.getenv('USERPROFILE')
        if user_profile:
            return os.path.join(user_profile, "Documents")
        logging.warning("USERPROFILE is not set, falling back to the home directory.")
    return os.path.join(os.path.expanduser('~'), "Documents")


# --- GTA V folder layout (relative to Documents) ---
GAME_RELATIVE_PATH = ("Rockstar Games", "GTA V")
PROFILES_DIR_NAME = "Profiles"
SLOTS_DIR_NAME = "Slots"
SAVE_FILES_DIR_NAME = "Save Files"

# Folders inside a profile that are never save files
RESERVED_DIR_NAMES = {SLOTS_DIR_NAME, SAVE_FILES_DIR_NAME}

# Prefix of the temporary folders used while a copy is staged
STAGING_PREFIX = ".gtav-saveload-staging-"

# --- Default settings ---
SAVE_FILE_PATTERN = "SGTA*"
CURRENT_SAVE_SUBDIR = ""
DATED_SLOT_PREFIX = "dated-"
DATED_SLOT_FORMAT = "%Y-%m-%d_%H%M%S"
MIN_FREE_SPACE_MB = 50

LOG_FILENAME = "gtav_saveload.log"
NOTIFICATION_DURATION_MS = 6000

# --- Exit codes ---
EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_USAGE_ERROR = 2 # Same code argparse uses
EXIT_NOT_FOUND = 3
