# utils.py
import os
import re

# \ / : * ? " < > | and control characters are invalid in Windows file names
_ILLEGAL_NAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1F]')

# Device names Windows refuses as file or folder names
_RESERVED_WINDOWS_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def sanitize_filename(filename):
    """
    Sanitizes a string to be safe for use as a filename or directory name.
    Removes or replaces characters that are typically invalid on most filesystems.
    """
    if not isinstance(filename, str):
        filename = str(filename)

    sanitized = _ILLEGAL_NAME_CHARS.sub('_', filename)

    # Leading/trailing whitespace and dots cause issues on Windows
    sanitized = sanitized.strip(' .')
    sanitized = re.sub(r'_+', '_', sanitized)

    if not sanitized:
        return "sanitized_empty_name"

    return sanitized


def get_name_problem(name):
    """
    Returns a description of why `name` cannot be used as a single folder
    name, or None if it is fine.

    Names are rejected rather than sanitized: a slot saved under a silently
    changed name could never be loaded back with the name the user typed.
    """
    if not isinstance(name, str) or not name.strip():
        return "name is empty"
    if name in (".", ".."):
        return f"'{name}' is not a folder name"
    if _ILLEGAL_NAME_CHARS.search(name):
        return f"'{name}' contains path separators or characters not allowed in folder names"
    if name != name.strip(' .'):
        return f"'{name}' starts or ends with a space or a dot"
    if name.split('.')[0].upper() in _RESERVED_WINDOWS_NAMES:
        return f"'{name}' is a reserved Windows device name"
    return None


def shorten_save_path(path):
    """
    Shortens a path for display by replacing the home directory with '~'.

    Examples:
        "C:\\Users\\Franklin\\Documents\\Rockstar Games\\GTA V\\Profiles\\1A2B3C4D"
        -> "~\\Documents\\Rockstar Games\\GTA V\\Profiles\\1A2B3C4D"

        "/home/franklin/Documents/Rockstar Games/GTA V/Profiles/1A2B3C4D/Slots/heist"
        -> "~/Documents/Rockstar Games/GTA V/Profiles/1A2B3C4D/Slots/heist"

    Returns the original path when it is not inside the home directory.
    """
    if not path or not isinstance(path, str):
        return path

    norm_path = os.path.normpath(path)
    home_dir = os.path.normpath(os.path.expanduser('~'))

    # Windows paths compare case-insensitively
    if os.path.normcase(norm_path) == os.path.normcase(home_dir):
        return '~'
    if os.path.normcase(norm_path).startswith(os.path.normcase(home_dir) + os.sep):
        return '~' + norm_path[len(home_dir):]
    return path


def escapes_folder(relative_path):
    """True if `relative_path` is absolute or points outside the folder it is joined to."""
    if os.path.isabs(relative_path) or os.path.splitdrive(relative_path)[0]:
        return True
    norm_path = os.path.normpath(relative_path)
    return norm_path == os.pardir or norm_path.startswith(os.pardir + os.sep)
