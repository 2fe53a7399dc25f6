import pytest
from unittest.mock import MagicMock
from pdfscraper.config import Config

# Define constants used in the fixtures
TEST_PAGE_URL = "https://example.com/products/index.html"
TEST_BASE_ORIGIN = "https://example.com"
TEST_SNAPSHOT_FILE = "snapshot.html"

@pytest.fixture
def mock_app_config(tmp_path) -> Config:
    """Provides a Config object pointing at a per-test temporary directory."""
    return Config(
        page_url=TEST_PAGE_URL,
        base_origin=TEST_BASE_ORIGIN,
        output_dir=str(tmp_path / "PDFs"),
        snapshot_file=str(tmp_path / TEST_SNAPSHOT_FILE),
        request_timeout=10,
        download_timeout=60,
        link_strategy="pattern",
        url_join_mode="concat",
        log_level="DEBUG",
    )

@pytest.fixture
def mock_log() -> MagicMock:
    """A stand-in logger so tests can assert on emitted diagnostics."""
    return MagicMock()

def make_response(status_code=200, content=b"%PDF-1.4 test", content_type="application/pdf", text=""):
    """Builds a MagicMock shaped like a requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.iter_content.side_effect = lambda chunk_size=1, **kwargs: iter([content] if content else [])
    response.text = text
    response.apparent_encoding = "utf-8"
    response.headers = {"Content-Type": content_type} if content_type is not None else {}
    return response
