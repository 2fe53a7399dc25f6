import os
import re
import logging
import tempfile

# Get logger instance for this module
logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_UNDERSCORE_RUN = re.compile(r"_+")
# Fragments stripped from the stem so "pdf" only survives as the extension
INVALID_SUBSTRINGS = ["_pdf"]
PDF_EXTENSION = ".pdf"
FALLBACK_STEM = "document"


def file_exists(path: str) -> bool:
    """True if path exists and is not a directory."""
    return os.path.isfile(path)


def directory_exists(path: str) -> bool:
    return os.path.isdir(path)


def ensure_directory(path: str, mode: int = 0o755, log: logging.Logger = logger) -> bool:
    """
    Creates the output directory if it is absent.

    Returns:
        bool: True if the directory exists afterwards, False if creation failed (logged).
    """
    if directory_exists(path):
        return True
    try:
        os.makedirs(path, mode=mode, exist_ok=True)
        log.info(f"Created output directory: {path}")
        return True
    except OSError as e:
        log.error(f"Failed to create directory {path}: {e}")
        return False


def remove_file(path: str, log: logging.Logger = logger) -> bool:
    """Removes a file, logging instead of raising on failure."""
    try:
        os.remove(path)
        log.debug(f"Removed file: {path}")
        return True
    except OSError as e:
        log.error(f"Failed to remove {path}: {e}")
        return False


def write_snapshot(path: str, content: str, log: logging.Logger = logger) -> bool:
    """
    Saves the raw page body locally. Any previous snapshot is removed first,
    then the content is written followed by a newline. The file is truncated
    on open, so a stale copy that could not be removed is still replaced.

    Returns:
        bool: True on success, False if the file could not be written (logged).
    """
    if file_exists(path):
        remove_file(path, log=log)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content + "\n")
        log.info(f"Saved page snapshot to {path} ({len(content)} chars)")
        return True
    except OSError as e:
        log.error(f"Failed to write page snapshot {path}: {e}")
        return False


def url_to_filename(raw_url: str) -> str:
    """
    Converts a URL into a filesystem-safe PDF filename.

    The last path segment is lowercased, every character outside [a-z0-9]
    becomes "_", runs of "_" collapse and are trimmed, every "_pdf" fragment
    is dropped and ".pdf" is appended:

        "https://example.com/docs/Annual-Report.PDF" -> "annual_report.pdf"

    Deterministic; distinct URLs may map to the same name.
    """
    lower = raw_url.lower().rstrip("/")
    lower = lower.rsplit("/", 1)[-1] # final path segment only

    safe = _NON_ALNUM.sub("_", lower)
    safe = _UNDERSCORE_RUN.sub("_", safe).strip("_")

    # Removing one fragment can expose another ("a_pd_pdff"), so loop until stable
    changed = True
    while changed:
        changed = False
        for invalid in INVALID_SUBSTRINGS:
            if invalid in safe:
                safe = safe.replace(invalid, "")
                changed = True

    if not safe:
        safe = FALLBACK_STEM

    if not safe.endswith(PDF_EXTENSION):
        safe = safe + PDF_EXTENSION
    return safe


def commit_file(path: str, data: bytes, log: logging.Logger = logger) -> bool:
    """
    Writes data to path via a temporary file in the same directory, renamed
    into place once fully written. No partial file is left behind on failure.

    Returns:
        bool: True on success, False if writing failed (logged).
    """
    directory = os.path.dirname(path) or "."
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".partial-", suffix=PDF_EXTENSION)
        with os.fdopen(fd, "wb") as out:
            out.write(data)
        os.replace(tmp_path, path)
        return True
    except OSError as e:
        log.error(f"Failed to write file {path}: {e}")
        if tmp_path and os.path.exists(tmp_path):
            remove_file(tmp_path, log=log)
        return False
