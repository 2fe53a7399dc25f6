import os
import logging
from dataclasses import dataclass
from urllib.parse import urlparse
from dotenv import load_dotenv

# Defaults reproduce the page the scraper was first written for
DEFAULT_PAGE_URL = "https://www.uschem.com/en/products/body-fillers/index.html"
DEFAULT_BASE_ORIGIN = "https://www.uschem.com"
DEFAULT_OUTPUT_DIR = "PDFs/"
DEFAULT_SNAPSHOT_FILE = "littletrees.html"

LINK_STRATEGIES = ("pattern", "html")
URL_JOIN_MODES = ("concat", "standard")
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass(frozen=True) # frozen=True makes instances immutable
class Config:
    """Application configuration."""
    # --- Target ---
    page_url: str = DEFAULT_PAGE_URL # ページURL
    base_origin: str = DEFAULT_BASE_ORIGIN # 相対リンクに付与するオリジン

    # --- Storage Settings ---
    output_dir: str = DEFAULT_OUTPUT_DIR
    snapshot_file: str = DEFAULT_SNAPSHOT_FILE

    # --- Request Settings ---
    request_timeout: int = 30 # page fetch
    download_timeout: int = 15 * 60 # per PDF

    # --- Parsing Settings ---
    link_strategy: str = "pattern"
    url_join_mode: str = "concat"

    # --- Optional Settings ---
    log_level: str = "INFO"


def _is_absolute_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be an integer, got '{raw}'.")
    if value <= 0:
        raise ValueError(f"Environment variable '{name}' must be positive, got {value}.")
    return value


def _choice(name: str, raw: str, allowed: tuple) -> str:
    value = raw.strip().lower()
    if value not in allowed:
        raise ValueError(f"Environment variable '{name}' must be one of {', '.join(allowed)}; got '{raw}'.")
    return value


def load_config() -> Config:
    """
    Loads configuration from environment variables (and a local .env file),
    returning a Config object. Every setting is optional; unset variables
    fall back to the defaults above.

    Raises:
        ValueError: If a URL is not absolute, a timeout is not a positive
                    integer, or an enumerated option has an unknown value.
    """
    load_dotenv() # Load .env for local runs

    # --- Target ---
    page_url = os.getenv("PAGE_URL", DEFAULT_PAGE_URL).strip()
    if not _is_absolute_url(page_url):
        raise ValueError(f"Environment variable 'PAGE_URL' is not an absolute URL: '{page_url}'.")
    base_origin = os.getenv("BASE_ORIGIN", DEFAULT_BASE_ORIGIN).strip()
    if not _is_absolute_url(base_origin):
        raise ValueError(f"Environment variable 'BASE_ORIGIN' is not an absolute URL: '{base_origin}'.")
    logging.info(f"Loaded PAGE_URL: {page_url} (origin {base_origin})")

    # --- Storage File Names ---
    output_dir = os.getenv("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR
    snapshot_file = os.getenv("SNAPSHOT_FILE") or DEFAULT_SNAPSHOT_FILE

    # --- Log Level ---
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level_str not in VALID_LOG_LEVELS:
        logging.warning(
            f"Invalid log level '{log_level_str}' specified. Using 'INFO'."
        )
        log_level_str = "INFO"

    # --- Request Settings ---
    request_timeout = _positive_int("REQUEST_TIMEOUT", os.getenv("REQUEST_TIMEOUT", "30"))
    download_timeout = _positive_int("DOWNLOAD_TIMEOUT", os.getenv("DOWNLOAD_TIMEOUT", str(15 * 60)))

    # --- Parsing Settings ---
    link_strategy = _choice("LINK_STRATEGY", os.getenv("LINK_STRATEGY", "pattern"), LINK_STRATEGIES)
    url_join_mode = _choice("URL_JOIN_MODE", os.getenv("URL_JOIN_MODE", "concat"), URL_JOIN_MODES)

    return Config(
        page_url=page_url,
        base_origin=base_origin,
        output_dir=output_dir,
        snapshot_file=snapshot_file,
        request_timeout=request_timeout,
        download_timeout=download_timeout,
        link_strategy=link_strategy,
        url_join_mode=url_join_mode,
        log_level=log_level_str,
    )

# --- Example Usage ---
if __name__ == "__main__":
    try:
        config_instance = load_config()
        print("Configuration loaded successfully:")
        print(f"  Page URL: {config_instance.page_url}")
        print(f"  Base Origin: {config_instance.base_origin}")
        print(f"  Output Dir: {config_instance.output_dir}")
        print(f"  Snapshot File: {config_instance.snapshot_file}")
        print(f"  Request Timeout: {config_instance.request_timeout}")
        print(f"  Download Timeout: {config_instance.download_timeout}")
        print(f"  Link Strategy: {config_instance.link_strategy}")
        print(f"  URL Join Mode: {config_instance.url_join_mode}")
        print(f"  Log Level: {config_instance.log_level}")

    except ValueError as e:
        print(f"Error loading configuration: {e}")
