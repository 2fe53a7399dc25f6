import os
import enum
import logging
import time
import requests
from requests.exceptions import RequestException

from .fetcher import HEADERS
from . import storage

# Get logger instance for this module
logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("application/pdf", "binary/octet-stream")
DEFAULT_DOWNLOAD_TIMEOUT = 15 * 60 # seconds
CHUNK_SIZE = 8192


class DownloadStatus(enum.Enum):
    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


def is_pdf_content_type(content_type: str | None) -> bool:
    """True if the Content-Type header names one of the accepted PDF types."""
    if not content_type:
        return False
    lowered = content_type.lower()
    return any(accepted in lowered for accepted in ACCEPTED_CONTENT_TYPES)


def _read_body(response, final_url: str, deadline: float, log: logging.Logger) -> bytes | None:
    """Buffers the streamed body, giving up once the monotonic deadline has passed."""
    buffer = bytearray()
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            buffer.extend(chunk)
            if time.monotonic() > deadline:
                log.error(f"Download of {final_url} exceeded its time limit after {len(buffer)} bytes")
                return None
    except RequestException as e:
        log.error(f"Failed to read PDF data from {final_url}: {e}")
        return None
    return bytes(buffer)


def download_pdf(final_url: str, output_dir: str, timeout: int = DEFAULT_DOWNLOAD_TIMEOUT,
                 log: logging.Logger = logger) -> DownloadStatus:
    """
    Downloads one PDF into output_dir unless a file of the same derived name is already there.

    The whole body is buffered and checked (status 200, PDF content type,
    non-zero length) before anything is written to disk. timeout bounds the
    entire download, from sending the request to the last byte of the body,
    not just individual socket reads.

    Args:
        final_url (str): Normalized absolute URL of the PDF.
        output_dir (str): Directory the file is saved into.
        timeout (int): Time limit for the whole download, in seconds.
        log (logging.Logger): Destination for diagnostics.

    Returns:
        DownloadStatus: DOWNLOADED, SKIPPED (file already present, no request made) or FAILED.
    """
    filename = storage.url_to_filename(final_url)
    file_path = os.path.join(output_dir, filename)

    if storage.file_exists(file_path):
        log.info(f"File already exists, skipping: {file_path}")
        return DownloadStatus.SKIPPED

    deadline = time.monotonic() + timeout
    try:
        response = requests.get(final_url, headers=HEADERS, stream=True, timeout=timeout)
    except RequestException as e:
        log.error(f"Failed to download {final_url}: {e}")
        return DownloadStatus.FAILED

    try:
        if response.status_code != 200:
            log.error(f"Download failed for {final_url}: HTTP {response.status_code}")
            return DownloadStatus.FAILED

        content_type = response.headers.get("Content-Type", "")
        if not is_pdf_content_type(content_type):
            log.warning(
                f"Invalid content type for {final_url}: {content_type} "
                f"(expected one of {', '.join(ACCEPTED_CONTENT_TYPES)})"
            )
            return DownloadStatus.FAILED

        data = _read_body(response, final_url, deadline, log)
    finally:
        response.close()

    if data is None:
        return DownloadStatus.FAILED

    if not data:
        log.warning(f"Downloaded 0 bytes for {final_url}; not creating file")
        return DownloadStatus.FAILED

    if not storage.commit_file(file_path, data, log=log):
        return DownloadStatus.FAILED

    log.info(f"Successfully downloaded {len(data)} bytes: {final_url} -> {file_path}")
    return DownloadStatus.DOWNLOADED
