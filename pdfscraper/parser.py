import re
import logging
from urllib.parse import urljoin, urlparse
from bs4 import BeautifulSoup, SoupStrainer, Tag
from typing import List, Optional

# Get logger instance for this module
logger = logging.getLogger(__name__)

# Double-quoted href whose value ends in the literal ".pdf" (case-sensitive)
PDF_HREF_PATTERN = re.compile(r'href="([^"]+\.pdf)"')


def _extract_with_pattern(html_content: str) -> List[str]:
    return PDF_HREF_PATTERN.findall(html_content)


def _extract_with_soup(html_content: str) -> List[str]:
    # <a> タグのみを解析対象とする (効率化)
    soup = BeautifulSoup(html_content, 'html.parser', parse_only=SoupStrainer("a"))
    links: List[str] = []
    for a_tag in soup.find_all('a', href=True):
        if not isinstance(a_tag, Tag):
            continue
        href = a_tag.get('href')
        if isinstance(href, list): # multi-valued attribute (rare)
            href = href[0] if href else None
        if isinstance(href, str) and href.endswith(".pdf") and href != ".pdf":
            links.append(href)
    return links


def extract_pdf_links(html_content: str | None, strategy: str = "pattern", log: logging.Logger = logger) -> List[str]:
    """
    HTMLコンテンツからPDFファイルへのリンク (href値そのもの) を出現順に抽出する。

    The default "pattern" strategy scans the raw text for href="....pdf"
    without parsing the document. The "html" strategy walks <a href> tags
    with BeautifulSoup and applies the same ".pdf" suffix rule.

    Args:
        html_content (str | None): 解析対象のHTMLコンテンツ。
        strategy (str): "pattern" or "html".
        log (logging.Logger): 診断メッセージの出力先。

    Returns:
        List[str]: Raw href values in order of appearance. Duplicates and
                   relative paths are kept as-is.
    """
    if not html_content:
        log.warning("Empty page content; no PDF links to extract.")
        return []

    if strategy == "pattern":
        links = _extract_with_pattern(html_content)
    elif strategy == "html":
        links = _extract_with_soup(html_content)
    else:
        raise ValueError(f"Unknown link extraction strategy: '{strategy}'")

    log.info(f"Extracted {len(links)} PDF link(s) using '{strategy}' strategy.")
    return links


def remove_duplicates(urls: List[str]) -> List[str]:
    """Drops exact repeats, keeping the first occurrence of each URL in order."""
    return list(dict.fromkeys(urls))


def has_domain(raw_url: str) -> bool:
    """Returns True if the URL parses and carries a host component."""
    try:
        return urlparse(raw_url).netloc != ""
    except ValueError:
        return False


def is_url_valid(uri: str) -> bool:
    """Returns True if the string parses as an absolute URI (scheme and host)."""
    try:
        parsed = urlparse(uri)
        parsed.port # raises ValueError for a malformed port
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def normalize_url(raw_url: str, base_origin: str, join_mode: str = "concat") -> Optional[str]:
    """
    Makes a raw href absolute and validates it.

    Links without a host get the base origin prefixed. In "concat" mode the
    origin and the link are joined as plain strings, so only root-relative
    links ("/docs/a.pdf") resolve correctly; "a.pdf" turns into
    "https://example.coma.pdf". In "standard" mode the link is resolved
    against the origin with urljoin.

    Returns:
        Optional[str]: The absolute URL, or None if it does not validate.
    """
    candidate = raw_url
    if not has_domain(candidate):
        if join_mode == "concat":
            candidate = base_origin + candidate
        elif join_mode == "standard":
            try:
                candidate = urljoin(base_origin.rstrip("/") + "/", candidate)
            except ValueError:
                return None
        else:
            raise ValueError(f"Unknown URL join mode: '{join_mode}'")

    if not is_url_valid(candidate):
        return None
    return candidate
