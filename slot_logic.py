# slot_logic.py
# -*- coding: utf-8 -*-
"""
Save/load of GTA V save files between the current save folder of a profile
and the backup slots under <Profile>/Slots.

Every operation takes a `ProfileLayout` (see profile_locator) describing the
active profile. Failures are raised, never returned:
    - NotFoundError subclasses when a slot, library folder or profile is missing
    - InvalidSlotNameError / InvalidPatternError for unusable user input
    - OSError for anything the filesystem refuses
"""
from datetime import datetime
import errno
import fnmatch
import logging
import os
import shutil
import tempfile

from thefuzz import fuzz, process

import config
import utils


class NotFoundError(LookupError):
    """A slot, save-file folder or profile referenced by the user does not exist."""


class SlotNotFoundError(NotFoundError):
    pass


class ProfileNotFoundError(NotFoundError):
    pass


class SaveFileMatchNotFoundError(NotFoundError):
    def __init__(self, message, pattern, suggestions=None):
        super().__init__(message)
        self.pattern = pattern
        self.suggestions = list(suggestions or [])


class InvalidSlotNameError(ValueError):
    pass


class InvalidPatternError(ValueError):
    pass


# --- Save file listing ---

def is_save_file_name(name, pattern=config.SAVE_FILE_PATTERN):
    """True if `name` is a save file entry. Reserved folders and staging folders never are."""
    if name in config.RESERVED_DIR_NAMES or name.startswith(config.STAGING_PREFIX):
        return False
    return fnmatch.fnmatch(name, pattern)


def list_save_files(path, pattern=config.SAVE_FILE_PATTERN):
    """Returns sorted (name, full_path) tuples of the save file entries directly inside `path`."""
    save_files = []
    for entry in os.scandir(path):
        if is_save_file_name(entry.name, pattern):
            save_files.append((entry.name, entry.path))
    save_files.sort()
    return save_files


def _copy_entry(source, dest):
    """Copies a file (with metadata) or a whole folder tree to `dest`."""
    if os.path.isdir(source) and not os.path.islink(source):
        shutil.copytree(source, dest, dirs_exist_ok=True)
    else:
        shutil.copy2(source, dest)


def _remove_entry(path):
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def validate_slot_name(slot_name):
    problem = utils.get_name_problem(slot_name)
    if problem:
        raise InvalidSlotNameError(f"Invalid slot name: {problem}.")


def ensure_slots_dir(layout):
    """Ensure that the Slots directory exists and return it."""
    os.makedirs(layout.slots_dir, exist_ok=True)
    return layout.slots_dir


def _check_free_space(path, min_free_space_mb):
    free_bytes = shutil.disk_usage(path).free
    min_bytes = min_free_space_mb * 1024 * 1024
    if free_bytes < min_bytes:
        free_mb = free_bytes / (1024 * 1024)
        raise OSError(errno.ENOSPC,
                      f"Insufficient disk space! Free: {free_mb:.1f} MB, Required: {min_free_space_mb} MB",
                      path)
    logging.debug(f"Disk space check passed for '{path}'.")


# --- Save ---

def perform_save(layout, slot_name, min_free_space_mb=None):
    """
    Copies the save files of the current save folder into Slots/<slot_name>.

    The slot is written to a staging folder first and swapped in at the end,
    so an existing slot with the same name is replaced entirely and is never
    left half written.

    Args:
        layout: ProfileLayout of the active profile.
        slot_name: Folder name of the slot.
        min_free_space_mb: If set, refuse to save when the Slots volume has
            less free space than this.

    Returns:
        List of the paths written inside the slot.
    """
    validate_slot_name(slot_name)
    save_files = list_save_files(layout.current_save_dir, layout.save_file_pattern)
    if not save_files:
        logging.warning(f"No save files matching '{layout.save_file_pattern}' in '{layout.current_save_dir}'. The slot will be empty.")

    slots_dir = ensure_slots_dir(layout)
    if min_free_space_mb:
        _check_free_space(slots_dir, min_free_space_mb)

    slot_dir = os.path.join(slots_dir, slot_name)
    staging_dir = tempfile.mkdtemp(prefix=config.STAGING_PREFIX, dir=slots_dir)
    old_dir = staging_dir + ".old"
    written = []
    try:
        for name, source in save_files:
            dest = os.path.join(slot_dir, name)
            _copy_entry(source, os.path.join(staging_dir, name))
            logging.info(f"{source} -> {dest}")
            written.append(dest)

        if os.path.lexists(slot_dir):
            logging.info(f"Replacing existing slot '{slot_name}'.")
            os.replace(slot_dir, old_dir)
            try:
                os.replace(staging_dir, slot_dir)
            except OSError:
                os.replace(old_dir, slot_dir)
                raise
            _remove_entry(old_dir)
        else:
            os.replace(staging_dir, slot_dir)
    finally:
        if os.path.isdir(staging_dir):
            shutil.rmtree(staging_dir, ignore_errors=True)

    logging.info(f"Saved {len(written)} save file(s) to slot '{slot_name}'.")
    return written


def make_dated_slot_name(prefix=config.DATED_SLOT_PREFIX, date_format=config.DATED_SLOT_FORMAT, now=None):
    """e.g. 'dated-2024-05-17_213045'. Characters invalid in folder names are replaced."""
    now = now or datetime.now()
    return utils.sanitize_filename(f"{prefix}{now.strftime(date_format)}")


def perform_save_dated(layout, prefix=config.DATED_SLOT_PREFIX, date_format=config.DATED_SLOT_FORMAT,
                       now=None, min_free_space_mb=None):
    """
    Saves into a slot named after the current local time.

    Two saves within the same second share a name; the second one overwrites
    the first like any other save to an existing slot.

    Returns:
        Tuple (slot_name, written_paths).
    """
    slot_name = make_dated_slot_name(prefix, date_format, now)
    written = perform_save(layout, slot_name, min_free_space_mb=min_free_space_mb)
    return slot_name, written


# --- Load ---

def _load_from(layout, source_dir):
    """
    Copies the save files of `source_dir` into the current save folder.

    Files are first copied into a staging folder inside the current save
    folder, then moved over the live ones. Entries missing from the source
    are left untouched. A source file whose name is a live folder (or the
    other way round) is refused before anything is replaced.
    """
    save_files = list_save_files(source_dir, layout.save_file_pattern)
    if not save_files:
        logging.warning(f"No save files matching '{layout.save_file_pattern}' in '{source_dir}'. Nothing to load.")
        return []

    for name, source in save_files:
        dest = os.path.join(layout.current_save_dir, name)
        if not os.path.lexists(dest):
            continue
        source_is_dir = os.path.isdir(source) and not os.path.islink(source)
        dest_is_dir = os.path.isdir(dest) and not os.path.islink(dest)
        if source_is_dir != dest_is_dir:
            kind = "folder" if source_is_dir else "file"
            raise OSError(errno.EISDIR if dest_is_dir else errno.ENOTDIR,
                          f"Cannot load {kind} '{name}' over an existing {'folder' if dest_is_dir else 'file'}",
                          dest)

    os.makedirs(layout.current_save_dir, exist_ok=True)
    staging_dir = tempfile.mkdtemp(prefix=config.STAGING_PREFIX, dir=layout.current_save_dir)
    written = []
    try:
        for name, source in save_files:
            _copy_entry(source, os.path.join(staging_dir, name))

        for name, source in save_files:
            staged = os.path.join(staging_dir, name)
            dest = os.path.join(layout.current_save_dir, name)
            if os.path.isdir(staged) and not os.path.islink(staged):
                shutil.copytree(staged, dest, dirs_exist_ok=True)
            else:
                os.replace(staged, dest)
            logging.info(f"{source} -> {dest}")
            written.append(dest)
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)

    return written


def perform_load(layout, slot_name):
    """
    Copies the save files of Slots/<slot_name> into the current save folder.

    Raises:
        SlotNotFoundError: the slot does not exist (nothing is changed).
    """
    validate_slot_name(slot_name)
    slot_dir = os.path.join(layout.slots_dir, slot_name)
    if not os.path.isdir(slot_dir):
        raise SlotNotFoundError(f"Slot '{slot_name}' not found in '{layout.slots_dir}'")

    written = _load_from(layout, slot_dir)
    logging.info(f"Loaded {len(written)} save file(s) from slot '{slot_name}'.")
    return written


def suggest_save_file_names(pattern, names, limit=3, score_cutoff=60):
    """Closest folder names to `pattern`, best first, for 'did you mean' hints."""
    if not names:
        return []
    results = process.extractBests(pattern, names, scorer=fuzz.token_set_ratio,
                                   score_cutoff=score_cutoff, limit=limit)
    return [name for name, _score in results]


def find_save_file_match(layout, pattern):
    """
    Finds the first folder of the Save Files library whose name contains
    `pattern`, ignoring case.

    Folders are scanned in case-insensitive name order, so the pick does not
    depend on how the filesystem happens to list them.

    Returns:
        Tuple (folder_name, full_path).

    Raises:
        InvalidPatternError: the pattern is empty.
        SaveFileMatchNotFoundError: no folder matches, or the library is missing.
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise InvalidPatternError("Save file pattern is empty.")

    library_dir = layout.save_files_dir
    if not os.path.isdir(library_dir):
        raise SaveFileMatchNotFoundError(f"Save Files folder not found: '{library_dir}'", pattern)

    names = [entry.name for entry in os.scandir(library_dir) if entry.is_dir()]
    names.sort(key=lambda n: (n.casefold(), n))

    needle = pattern.casefold()
    for name in names:
        if needle in name.casefold():
            logging.debug(f"Save file folder '{name}' matches '{pattern}'.")
            return name, os.path.join(library_dir, name)

    suggestions = suggest_save_file_names(pattern, names)
    message = f"No folder in '{library_dir}' contains '{pattern}'"
    if suggestions:
        message += f". Did you mean: {', '.join(suggestions)}?"
    raise SaveFileMatchNotFoundError(message, pattern, suggestions)


def perform_load_save_file(layout, pattern):
    """
    Loads the save files of the first Save Files folder matching `pattern`.

    Returns:
        Tuple (matched_folder_name, written_paths).
    """
    name, source_dir = find_save_file_match(layout, pattern)
    written = _load_from(layout, source_dir)
    logging.info(f"Loaded {len(written)} save file(s) from '{name}'.")
    return name, written


# --- Slot listing and housekeeping ---

def list_available_slots(layout):
    """Returns a list of (slot_name, full_path, modified_datetime), most recent first."""
    slots = []
    if not os.path.isdir(layout.slots_dir):
        return slots

    for entry in os.scandir(layout.slots_dir):
        if not entry.is_dir() or entry.name.startswith(config.STAGING_PREFIX):
            continue
        slots.append((entry.name, entry.path, datetime.fromtimestamp(entry.stat().st_mtime)))

    slots.sort(key=lambda s: s[0])
    slots.sort(key=lambda s: s[2], reverse=True)
    return slots


def find_nth_newest_slot(layout, nth):
    """Returns (slot_name, full_path) of the nth newest slot, 0 being the newest."""
    slots = list_available_slots(layout)
    if nth < 0 or nth >= len(slots):
        raise SlotNotFoundError(f"No slot at position {nth}: found {len(slots)} slot(s) in '{layout.slots_dir}'")
    slot_name, slot_path, _ = slots[nth]
    return slot_name, slot_path


def perform_load_nth_newest_slot(layout, nth):
    # Load from the listed path: folders created by hand may not pass validate_slot_name
    slot_name, slot_path = find_nth_newest_slot(layout, nth)
    written = _load_from(layout, slot_path)
    logging.info(f"Loaded {len(written)} save file(s) from slot '{slot_name}'.")
    return slot_name, written


def delete_nth_newest_slot(layout, nth):
    """Permanently deletes the nth newest slot. Returns its name."""
    slot_name, slot_path = find_nth_newest_slot(layout, nth)
    logging.warning(f"Attempting permanent deletion of slot: {slot_path}")
    shutil.rmtree(slot_path)
    logging.info(f"Slot '{slot_name}' deleted.")
    return slot_name


def clear_current_save(layout):
    """Deletes the save files of the current save folder. Returns the deleted paths."""
    deleted = []
    for _, save_file in list_save_files(layout.current_save_dir, layout.save_file_pattern):
        logging.info(f"delete: {save_file}")
        _remove_entry(save_file)
        deleted.append(save_file)
    return deleted
