import itertools
import pytest
from requests.exceptions import ConnectionError, Timeout, ChunkedEncodingError

from pdfscraper.downloader import download_pdf, is_pdf_content_type, DownloadStatus
from pdfscraper.fetcher import HEADERS
from conftest import make_response

PDF_URL = "https://example.com/docs/file.PDF"
PDF_BYTES = b"%PDF-1.4\n%test document\n"

# --- Fixtures ---

@pytest.fixture
def mock_requests_get(mocker):
    """Fixture to mock requests.get."""
    return mocker.patch('requests.get')

@pytest.fixture
def output_dir(tmp_path):
    target = tmp_path / "PDFs"
    target.mkdir()
    return target

# --- is_pdf_content_type ---

@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("application/pdf", True),
        ("application/pdf; charset=binary", True),
        ("binary/octet-stream", True),
        ("Application/PDF", True),
        ("application/octet-stream", False),
        ("text/html; charset=utf-8", False),
        ("", False),
        (None, False),
    ],
)
def test_is_pdf_content_type(content_type, expected):
    assert is_pdf_content_type(content_type) is expected

# --- download_pdf ---

def test_download_pdf_success(mock_requests_get, output_dir, mock_log):
    """Test a valid PDF response is written under its derived filename."""
    mock_requests_get.return_value = make_response(content=PDF_BYTES)

    status = download_pdf(PDF_URL, str(output_dir), timeout=60, log=mock_log)

    assert status is DownloadStatus.DOWNLOADED
    assert (output_dir / "file.pdf").read_bytes() == PDF_BYTES
    mock_requests_get.assert_called_once_with(PDF_URL, headers=HEADERS, stream=True, timeout=60)

def test_download_pdf_accepts_octet_stream(mock_requests_get, output_dir, mock_log):
    mock_requests_get.return_value = make_response(content=PDF_BYTES, content_type="binary/octet-stream")

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.DOWNLOADED
    assert (output_dir / "file.pdf").exists()

def test_download_pdf_default_timeout_is_fifteen_minutes(mock_requests_get, output_dir, mock_log):
    mock_requests_get.return_value = make_response(content=PDF_BYTES)

    download_pdf(PDF_URL, str(output_dir), log=mock_log)

    assert mock_requests_get.call_args.kwargs["timeout"] == 900

def test_download_pdf_existing_file_skips_request(mock_requests_get, output_dir, mock_log):
    """Test an existing file means no network request at all."""
    (output_dir / "file.pdf").write_bytes(b"already here")

    status = download_pdf(PDF_URL, str(output_dir), log=mock_log)

    assert status is DownloadStatus.SKIPPED
    assert mock_requests_get.call_count == 0
    assert (output_dir / "file.pdf").read_bytes() == b"already here"
    assert "already exists" in mock_log.info.call_args[0][0]

@pytest.mark.parametrize("status_code", [200, 404, 500])
def test_download_pdf_html_content_type_writes_nothing(mock_requests_get, output_dir, mock_log, status_code):
    """Test a text/html response never creates a file, whatever the status."""
    mock_requests_get.return_value = make_response(
        status_code=status_code, content=b"<html>not a pdf</html>", content_type="text/html"
    )

    status = download_pdf(PDF_URL, str(output_dir), log=mock_log)

    assert status is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []

def test_download_pdf_missing_content_type(mock_requests_get, output_dir, mock_log):
    mock_requests_get.return_value = make_response(content=PDF_BYTES, content_type=None)

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    mock_log.warning.assert_called_once()

def test_download_pdf_zero_bytes_writes_nothing(mock_requests_get, output_dir, mock_log):
    """Test a 200 PDF response with an empty body does not create a file."""
    mock_requests_get.return_value = make_response(content=b"")

    status = download_pdf(PDF_URL, str(output_dir), log=mock_log)

    assert status is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    assert "0 bytes" in mock_log.warning.call_args[0][0]

@pytest.mark.parametrize("status_code", [201, 301, 403, 404, 503])
def test_download_pdf_non_200_status(mock_requests_get, output_dir, mock_log, status_code):
    mock_requests_get.return_value = make_response(status_code=status_code, content=PDF_BYTES)

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    mock_log.error.assert_called_once()

@pytest.mark.parametrize("error", [ConnectionError("refused"), Timeout("too slow")])
def test_download_pdf_network_error(mock_requests_get, output_dir, mock_log, error):
    mock_requests_get.side_effect = error

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    mock_log.error.assert_called_once()

def test_download_pdf_slow_body_exceeds_time_limit(mock_requests_get, output_dir, mock_log, mocker):
    """Test a body trickling in past the deadline fails the download and writes nothing."""
    slow_response = make_response(content=PDF_BYTES)
    slow_response.iter_content.side_effect = lambda chunk_size=1, **kwargs: (bytes([b]) for b in PDF_BYTES)
    mock_requests_get.return_value = slow_response
    # Each clock read advances half a second: deadline at 1.0, exceeded on the third byte
    mocker.patch('pdfscraper.downloader.time.monotonic', side_effect=itertools.count(0.0, 0.5))

    status = download_pdf(PDF_URL, str(output_dir), timeout=1, log=mock_log)

    assert status is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    assert "exceeded its time limit" in mock_log.error.call_args[0][0]
    slow_response.close.assert_called_once()

def test_download_pdf_fast_body_within_time_limit(mock_requests_get, output_dir, mock_log, mocker):
    mock_requests_get.return_value = make_response(content=PDF_BYTES)
    mocker.patch('pdfscraper.downloader.time.monotonic', side_effect=itertools.count(0.0, 0.5))

    assert download_pdf(PDF_URL, str(output_dir), timeout=1, log=mock_log) is DownloadStatus.DOWNLOADED
    assert (output_dir / "file.pdf").read_bytes() == PDF_BYTES

def test_download_pdf_body_read_error(mock_requests_get, output_dir, mock_log):
    """Test a connection dropped mid-body is reported as a failure without a file."""
    response = make_response(content=PDF_BYTES)
    def broken_stream(chunk_size=1, **kwargs):
        yield PDF_BYTES[:4]
        raise ChunkedEncodingError("connection broken")
    response.iter_content.side_effect = broken_stream
    mock_requests_get.return_value = response

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.FAILED
    assert list(output_dir.iterdir()) == []
    assert "Failed to read PDF data" in mock_log.error.call_args[0][0]
    response.close.assert_called_once()

@pytest.mark.parametrize(
    "status_code, content_type",
    [(200, "application/pdf"), (404, "application/pdf"), (200, "text/html")],
)
def test_download_pdf_always_closes_response(mock_requests_get, output_dir, mock_log, status_code, content_type):
    response = make_response(status_code=status_code, content=PDF_BYTES, content_type=content_type)
    mock_requests_get.return_value = response

    download_pdf(PDF_URL, str(output_dir), log=mock_log)

    response.close.assert_called_once()

def test_download_pdf_write_failure(mock_requests_get, output_dir, mock_log, mocker):
    mock_requests_get.return_value = make_response(content=PDF_BYTES)
    mocker.patch('pdfscraper.downloader.storage.commit_file', return_value=False)

    assert download_pdf(PDF_URL, str(output_dir), log=mock_log) is DownloadStatus.FAILED

def test_download_pdf_same_name_second_url_skipped(mock_requests_get, output_dir, mock_log):
    """Test two URLs deriving the same filename: the second one is skipped."""
    mock_requests_get.return_value = make_response(content=PDF_BYTES)

    first = download_pdf("https://example.com/a/file.pdf", str(output_dir), log=mock_log)
    second = download_pdf("https://example.com/b/FILE.pdf", str(output_dir), log=mock_log)

    assert first is DownloadStatus.DOWNLOADED
    assert second is DownloadStatus.SKIPPED
    assert mock_requests_get.call_count == 1
