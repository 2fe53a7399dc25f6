import sys
import logging
from dataclasses import dataclass

from .config import load_config, Config
from .logger import setup_logger
from . import fetcher
from . import parser
from . import storage
from . import downloader
from .downloader import DownloadStatus

# Get logger instance for this module
logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counters for a single scraping run."""
    page_fetched: bool = False
    found: int = 0 # unique links after dedupe
    invalid: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0


def process_url(raw_url: str, cfg: Config, summary: RunSummary, log: logging.Logger = logger) -> None:
    """
    Normalizes one extracted link and attempts its download, recording the outcome in summary.
    """
    final_url = parser.normalize_url(raw_url, cfg.base_origin, cfg.url_join_mode)
    if final_url is None:
        # Not an error: malformed links are simply not applicable
        log.debug(f"Skipping invalid URL: {raw_url}")
        summary.invalid += 1
        return

    status = downloader.download_pdf(final_url, cfg.output_dir, timeout=cfg.download_timeout, log=log)
    if status is DownloadStatus.DOWNLOADED:
        summary.downloaded += 1
    elif status is DownloadStatus.SKIPPED:
        summary.skipped += 1
    else:
        summary.failed += 1


def run(cfg: Config, log: logging.Logger = logger) -> RunSummary:
    """
    Core logic: fetches the configured page, saves a snapshot, extracts PDF
    links and downloads each unique one in order.

    Every failure is logged and the run carries on; nothing here raises for
    network or filesystem problems.

    Args:
        cfg (Config): The application configuration.
        log (logging.Logger): Destination for diagnostics, passed to every step.

    Returns:
        RunSummary: What happened to each discovered link.
    """
    log.info(f"run: Starting scrape of {cfg.page_url}")
    summary = RunSummary()

    storage.ensure_directory(cfg.output_dir, log=log)

    if storage.file_exists(cfg.snapshot_file):
        storage.remove_file(cfg.snapshot_file, log=log)

    page_content = fetcher.fetch_html(cfg.page_url, timeout=cfg.request_timeout, log=log)
    if page_content is None:
        log.error(f"Page fetch failed for {cfg.page_url}; continuing with empty content.")
        page_content = ""
    else:
        summary.page_fetched = True

    # A failed snapshot write does not stop processing of the in-memory page
    storage.write_snapshot(cfg.snapshot_file, page_content, log=log)

    links = parser.extract_pdf_links(page_content, strategy=cfg.link_strategy, log=log)
    links = parser.remove_duplicates(links)
    summary.found = len(links)

    for raw_url in links:
        try:
            process_url(raw_url, cfg, summary, log=log)
        except Exception as e:
            # Unexpected errors only abandon this one URL
            log.exception(f"run: Unexpected error while processing {raw_url}: {e}")
            summary.failed += 1

    log.info(
        f"run: Finished. found={summary.found} downloaded={summary.downloaded} "
        f"skipped={summary.skipped} failed={summary.failed} invalid={summary.invalid}"
    )
    return summary


def main() -> int:
    """Process entry point. Returns 0 after a run, 1 if configuration could not be loaded."""
    try:
        cfg = load_config()
    except ValueError as e:
        setup_logger().error(f"Configuration error: {e}")
        return 1

    app_logger = setup_logger(level_str=cfg.log_level)
    app_logger.info("Script execution started.")
    run(cfg, log=app_logger)
    app_logger.info("Script execution finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
