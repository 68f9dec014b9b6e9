# profile_locator.py
# -*- coding: utf-8 -*-
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

import config
import utils
from slot_logic import ProfileNotFoundError


@dataclass(frozen=True)
class ProfileLayout:
    """Resolved paths of the active profile, passed to every slot operation."""
    profile_id: str
    profile_dir: str
    current_save_dir: str
    slots_dir: str
    save_files_dir: str
    save_file_pattern: str = config.SAVE_FILE_PATTERN

    @classmethod
    def from_profile_dir(cls, profile_dir, current_save_subdir="", save_file_pattern=config.SAVE_FILE_PATTERN):
        profile_dir = os.path.normpath(profile_dir)
        current_save_dir = profile_dir
        if current_save_subdir and utils.escapes_folder(current_save_subdir):
            raise ValueError(f"Current save folder '{current_save_subdir}' must stay inside the profile folder")
        if current_save_subdir:
            current_save_dir = os.path.normpath(os.path.join(profile_dir, current_save_subdir))
        return cls(
            profile_id=os.path.basename(profile_dir),
            profile_dir=profile_dir,
            current_save_dir=current_save_dir,
            slots_dir=os.path.join(profile_dir, config.SLOTS_DIR_NAME),
            save_files_dir=os.path.join(profile_dir, config.SAVE_FILES_DIR_NAME),
            save_file_pattern=save_file_pattern,
        )


def get_game_dir(documents_dir):
    """<Documents>/Rockstar Games/GTA V"""
    return os.path.join(documents_dir, *config.GAME_RELATIVE_PATH)


def list_profiles(profiles_dir) -> List[Tuple[str, str, datetime]]:
    """Returns (profile_id, full_path, modified) for each profile folder, most recent first."""
    profiles = []
    for entry in os.scandir(profiles_dir):
        if not entry.is_dir():
            continue
        mtime = entry.stat().st_mtime
        profiles.append((entry.name, entry.path, datetime.fromtimestamp(mtime)))
    # Newest first, name breaks ties so the pick is stable
    profiles.sort(key=lambda p: p[0])
    profiles.sort(key=lambda p: p[2], reverse=True)
    return profiles


def resolve_profile_layout(settings, profile_id: Optional[str] = None, documents_dir: Optional[str] = None) -> ProfileLayout:
    """
    Resolves the active profile.

    Priority for the profile: the explicit `profile_id` argument, then the
    "profile_id" setting, then the most recently modified profile folder.
    Priority for the Documents folder: `documents_dir`, then the
    "documents_dir" setting, then the platform default.

    Raises:
        ProfileNotFoundError: the Profiles folder is missing, empty, or has no
            folder named after the requested profile.
    """
    documents_dir = documents_dir or settings.get("documents_dir") or config.get_documents_folder()
    profile_id = profile_id or settings.get("profile_id")

    profiles_dir = os.path.join(get_game_dir(documents_dir), config.PROFILES_DIR_NAME)
    if not os.path.isdir(profiles_dir):
        raise ProfileNotFoundError(f"Missing profile directory: '{profiles_dir}'")

    if profile_id:
        # A profile id is one folder name directly under Profiles
        problem = utils.get_name_problem(profile_id)
        if problem:
            raise ProfileNotFoundError(f"Invalid profile id: {problem}.")
        profile_dir = os.path.join(profiles_dir, profile_id)
        if not os.path.isdir(profile_dir):
            raise ProfileNotFoundError(f"Profile '{profile_id}' not found in '{profiles_dir}'")
        logging.debug(f"Using configured profile '{profile_id}'.")
    else:
        profiles = list_profiles(profiles_dir)
        if not profiles:
            raise ProfileNotFoundError(f"No profiles found in '{profiles_dir}'")
        profile_id, profile_dir, _ = profiles[0]
        if len(profiles) > 1:
            logging.info(f"Found {len(profiles)} profiles, using the most recently modified: '{profile_id}'")

    return ProfileLayout.from_profile_dir(
        profile_dir,
        current_save_subdir=settings.get("current_save_subdir", config.CURRENT_SAVE_SUBDIR),
        save_file_pattern=settings.get("save_file_pattern", config.SAVE_FILE_PATTERN),
    )
