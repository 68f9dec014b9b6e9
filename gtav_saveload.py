# gtav_saveload.py
# -*- coding: utf-8 -*-
"""
GTA V SaveLoad helper: copies save files between the current GTA V profile
and named backup slots.

    gtav-saveload --save before-heist
    gtav-saveload --save-dated
    gtav-saveload --load before-heist
    gtav-saveload --load-save-file chop
"""
import argparse
import logging
import os
import sys

from colorama import Fore, Style, just_fix_windows_console

import config
import settings_manager
import slot_logic
import utils
from profile_locator import resolve_profile_layout


# --- Colored output helpers ---

def print_header(text):
    """Prints a section header in bright magenta."""
    print(f"\n{Style.BRIGHT}{Fore.MAGENTA}--- {text} ---{Style.RESET_ALL}")

def print_option(key, text):
    print(f"  {Style.BRIGHT}{Fore.CYAN}{key}{Style.RESET_ALL}. {text}")

def print_info(text):
    print(text)

def print_success(text):
    """Prints a success message in green."""
    print(f"{Fore.GREEN}{text}{Style.RESET_ALL}")

def print_warning(text):
    print(f"{Fore.YELLOW}WARNING: {text}{Style.RESET_ALL}")

def print_error(text):
    """Prints an error message in bright red."""
    print(f"{Style.BRIGHT}{Fore.RED}ERROR: {text}{Style.RESET_ALL}")


# --- Argument parsing ---

def _non_negative_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if number < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must be 0 or greater")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog="gtav-saveload",
        description="Manages GTA V save files: saves them to named slots and loads them back.",
    )
    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--save", metavar="SLOT",
                         help="Saves the current save files in the given slot.")
    actions.add_argument("--save-dated", action="store_true",
                         help="Saves the current save files in a slot named after the current date and time.")
    actions.add_argument("--load", metavar="SLOT",
                         help="Loads the save files of the given slot.")
    actions.add_argument("--load-save-file", metavar="PATTERN",
                         help="Loads the first folder of 'Save Files' whose name contains PATTERN (case-insensitive).")
    actions.add_argument("--load-nth-newest-slot", metavar="N", type=_non_negative_int,
                         help="Loads the Nth newest slot (0 is the newest).")
    actions.add_argument("--delete-nth-newest-slot", metavar="N", type=_non_negative_int,
                         help="Deletes the Nth newest slot (0 is the newest).")
    actions.add_argument("--clear-profile", action="store_true",
                         help="Removes the current save files.")
    actions.add_argument("--list-slots", action="store_true",
                         help="Lists the slots of the profile, most recent first.")

    parser.add_argument("--profile", metavar="ID",
                        help="Profile folder to use (default: the most recently modified one).")
    parser.add_argument("--documents-dir", metavar="PATH",
                        help="Documents folder containing 'Rockstar Games' (default: the user's Documents).")
    parser.add_argument("--notify", action="store_true",
                        help="Shows a popup with the result.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enables debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.APP_VERSION}")
    return parser


# --- Logging ---

def setup_logging(verbose=False, log_file=None):
    log_level = logging.DEBUG if verbose else logging.INFO
    log_formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s', '%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logging.warning(f"Unable to open log file '{log_file}': {e}")
        else:
            file_handler.setFormatter(log_formatter)
            root_logger.addHandler(file_handler)


# --- Actions ---

def run_action(args, layout, settings):
    """Runs the requested action. Returns the message to show on success."""
    min_free_space_mb = settings["min_free_space_mb"] if settings["check_free_space_enabled"] else None

    if args.save is not None:
        written = slot_logic.perform_save(layout, args.save, min_free_space_mb=min_free_space_mb)
        return f"Saved {len(written)} file(s) to slot '{args.save}'."

    if args.save_dated:
        slot_name, written = slot_logic.perform_save_dated(
            layout,
            prefix=settings["dated_slot_prefix"],
            date_format=settings["dated_slot_format"],
            min_free_space_mb=min_free_space_mb,
        )
        return f"Saved {len(written)} file(s) to slot '{slot_name}'."

    if args.load is not None:
        written = slot_logic.perform_load(layout, args.load)
        return f"Loaded {len(written)} file(s) from slot '{args.load}'."

    if args.load_save_file is not None:
        name, written = slot_logic.perform_load_save_file(layout, args.load_save_file)
        return f"Loaded {len(written)} file(s) from save file folder '{name}'."

    if args.load_nth_newest_slot is not None:
        slot_name, written = slot_logic.perform_load_nth_newest_slot(layout, args.load_nth_newest_slot)
        return f"Loaded {len(written)} file(s) from slot '{slot_name}'."

    if args.delete_nth_newest_slot is not None:
        slot_name = slot_logic.delete_nth_newest_slot(layout, args.delete_nth_newest_slot)
        return f"Deleted slot '{slot_name}'."

    if args.clear_profile:
        deleted = slot_logic.clear_current_save(layout)
        return f"Removed {len(deleted)} save file(s) from '{utils.shorten_save_path(layout.current_save_dir)}'."

    if args.list_slots:
        slots = slot_logic.list_available_slots(layout)
        print_header(f"Slots in {utils.shorten_save_path(layout.slots_dir)}")
        for i, (slot_name, _, modified) in enumerate(slots):
            print_option(i, f"{slot_name} ({modified.strftime('%Y-%m-%d %H:%M:%S')})")
        return f"Found {len(slots)} slot(s)."

    # argparse makes one action mandatory
    raise AssertionError("no action selected")


def _notify(success, message):
    # Imported here: Qt is only loaded when a popup is requested
    try:
        import notifications
        notifications.show_notification(success, message)
    except Exception as e:
        logging.error(f"Unable to show notification: {e}", exc_info=True)


def main(argv=None):
    just_fix_windows_console()
    parser = build_parser()
    args = parser.parse_args(argv)

    settings, first_launch = settings_manager.load_settings()
    log_file = os.path.join(config.get_app_data_folder(), config.LOG_FILENAME) if settings["log_to_file"] else None
    setup_logging(args.verbose, log_file)
    logging.debug(f"Received arguments: {argv if argv is not None else sys.argv[1:]}")

    settings_path = settings_manager.get_settings_path()
    if first_launch and not os.path.exists(settings_path):
        # Leave a settings file the user can edit
        if settings_manager.save_settings(settings):
            print_info(f"Created settings file: {utils.shorten_save_path(settings_path)}")
        else:
            print_warning(f"Unable to create settings file: {settings_path}")

    exit_code = config.EXIT_OK
    try:
        layout = resolve_profile_layout(settings, profile_id=args.profile, documents_dir=args.documents_dir)
        logging.info(f"Using profile '{layout.profile_id}' ({utils.shorten_save_path(layout.profile_dir)})")
        message = run_action(args, layout, settings)
        print_success(message)
    except slot_logic.NotFoundError as e:
        message = str(e)
        logging.debug("Not found", exc_info=True)
        print_error(message)
        exit_code = config.EXIT_NOT_FOUND
    except (slot_logic.InvalidSlotNameError, slot_logic.InvalidPatternError) as e:
        message = str(e)
        parser.print_usage()
        print_error(message)
        exit_code = config.EXIT_USAGE_ERROR
    except OSError as e:
        message = f"File operation failed: {e}"
        logging.debug("Filesystem error", exc_info=True)
        print_error(message)
        exit_code = config.EXIT_IO_ERROR
    except Exception as e:
        message = f"Unexpected error: {e}"
        logging.critical(message, exc_info=True)
        print_error(message)
        exit_code = config.EXIT_IO_ERROR

    if args.notify or settings["show_notifications"]:
        _notify(exit_code == config.EXIT_OK, message)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
