"""Resolve process owners through the system account directory."""

import logging
from pathlib import Path

from procmon.textdecode import is_number, read_lines, split, split_in_two

logger = logging.getLogger(__name__)

STATUS_FILENAME = "status"
UID_KEY = "Uid"


def real_user_id(status_path: str | Path) -> str:
    """
    Return the real user id from a process status file.

    The ``Uid:`` line holds real, effective, saved and filesystem ids
    separated by tabs; the first one is the real id. Returns an empty string
    when the file or the line is missing.
    """
    for line in read_lines(status_path):
        key, value = split_in_two(line, ":")
        if key != UID_KEY:
            continue
        ids = value.split()
        return ids[0] if ids and is_number(ids[0]) else ""
    return ""


class UserDirectoryResolver:
    """Stateless lookup of user names in a passwd-format file."""

    def __init__(self, passwd_path: str | Path = "/etc/passwd") -> None:
        self._passwd_path = Path(passwd_path)

    def user_name(self, uid: str) -> str:
        """Return the account name whose uid field equals ``uid``, or ``""``."""
        if not is_number(uid):
            return ""
        for line in read_lines(self._passwd_path):
            fields = split(line, ":")
            if len(fields) > 2 and fields[2] == uid:
                return fields[0]
        logger.debug("No account for uid %s in %s", uid, self._passwd_path)
        return ""

    def owner_of(self, process_dir: str | Path) -> str:
        """Resolve the owner name of the process rooted at ``process_dir``."""
        uid = real_user_id(Path(process_dir) / STATUS_FILENAME)
        if not uid:
            return ""
        return self.user_name(uid)
