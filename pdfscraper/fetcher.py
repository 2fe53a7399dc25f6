import requests
import logging
from requests.exceptions import RequestException

# Get logger instance for this module
logger = logging.getLogger(__name__)

# 標準的なブラウザを模倣するUser-Agent
HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
}

def fetch_html(url: str, timeout: int = 30, log: logging.Logger = logger) -> str | None:
    """
    指定されたURLからHTMLコンテンツを取得する。リトライは行わない。

    Args:
        url (str): 取得対象のURL。
        timeout (int): リクエストのタイムアウト秒数。
        log (logging.Logger): 診断メッセージの出力先。

    Returns:
        str | None: 取得したHTMLコンテンツ。取得失敗時はNone。
    """
    log.info(f"Scraping {url} (timeout={timeout})")
    try:
        response = requests.get(url, headers=HEADERS, timeout=timeout)
        response.raise_for_status()  # ステータスコードが200番台以外なら例外を発生させる
        log.info(f"HTML fetched (status code: {response.status_code})")
        response.encoding = response.apparent_encoding # コンテンツからエンコーディングを推測
        return response.text
    except RequestException as e:
        log.error(f"HTML fetch failed for {url}: {e}")
        return None
