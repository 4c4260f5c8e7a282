# almanac/almanac_api.py
"""
向外部農民曆網站取得指定日期的原始 HTML。
主要職責：
1. 發送請求：以日期組成網址，帶上瀏覽器 User-Agent 與逾時設定發出 HTTP GET 請求。
2. 錯誤處理：連線逾時、網路錯誤、非 2xx 狀態碼都會記錄日誌並拋出 `FetchError`，不會默默回傳預設值，由呼叫者決定要重試或改用快取。
3. 回傳資料：成功時回傳網頁文字，交給 `almanac_parser` 解析。
"""
import logging
import requests
from typing import Optional

from config import ALMANAC_SOURCE_URL_TEMPLATE, HTTP_USER_AGENT, REQUEST_TIMEOUT_SECONDS
from utils.errors import FetchError

logger = logging.getLogger(__name__)


def build_almanac_url(date_str: str) -> str:
    return ALMANAC_SOURCE_URL_TEMPLATE.format(date=date_str)


def fetch_almanac_html(date_str: str, session: Optional[requests.Session] = None) -> str:
    """
    Args:
        date_str (str): 已驗證過的 YYYY-MM-DD 日期字串。
        session (requests.Session): 可選；未提供時直接使用 `requests.get`。

    Returns:
        str: 原始 HTML。

    Raises:
        FetchError: 任何傳輸層面的失敗。
    """
    url = build_almanac_url(date_str)
    headers = {"User-Agent": HTTP_USER_AGENT}
    http = session or requests

    try:
        logger.info(f"正在從農民曆網站 ({url}) 取得 {date_str} 的資料...")
        response = http.get(url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status() # 非 2xx 狀態碼會拋出 HTTPError

        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            # 網站沒有宣告編碼時，requests 會退回 ISO-8859-1，中文會變成亂碼
            response.encoding = response.apparent_encoding or "utf-8"

        html = response.text
        logger.debug(f"農民曆網站回應長度: {len(html)} 字元")
        return html

    except requests.exceptions.Timeout as e:
        logger.error(f"取得 {date_str} 農民曆時連線逾時。")
        raise FetchError(f"連線逾時: {url}", url=url) from e
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        logger.error(f"取得 {date_str} 農民曆時發生 HTTP 錯誤: {status_code}", exc_info=True)
        raise FetchError(f"HTTP {status_code}", url=url, status_code=status_code) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"取得 {date_str} 農民曆時發生網路錯誤: {e}", exc_info=True)
        raise FetchError(f"網路錯誤: {e}", url=url) from e
