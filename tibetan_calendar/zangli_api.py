# tibetan_calendar/zangli_api.py
"""
取得藏曆年曆網頁，作為佛菩薩聖日的補充資料來源。
這是盡力而為的查詢：`lookup_tibetan_day` 只在取得並解析成功時回傳結果，
失敗時記錄警告並回傳 None，不影響簡化計算的藏曆紀錄。
"""
import logging
import requests
from datetime import date
from typing import Dict, Optional

from config import TIBETAN_SOURCE_URL_TEMPLATE, HTTP_USER_AGENT, REQUEST_TIMEOUT_SECONDS
from utils.errors import FetchError
from .zangli_parser import parse_zangli_day

logger = logging.getLogger(__name__)


def fetch_tibetan_calendar_html(year: int, session: Optional[requests.Session] = None) -> str:
    """
    Raises:
        FetchError: 連線失敗、逾時或非 2xx 狀態碼。
    """
    url = TIBETAN_SOURCE_URL_TEMPLATE.format(year=year)
    http = session or requests

    try:
        logger.info(f"正在從藏曆網站 ({url}) 取得 {year} 年曆...")
        response = http.get(url, headers={"User-Agent": HTTP_USER_AGENT}, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding or "utf-8"
        return response.text
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        raise FetchError(f"HTTP {status_code}", url=url, status_code=status_code) from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"網路錯誤: {e}", url=url) from e


def lookup_tibetan_day(target_date: date, session: Optional[requests.Session] = None) -> Optional[Dict]:
    try:
        markup = fetch_tibetan_calendar_html(target_date.year, session=session)
    except FetchError as e:
        logger.warning(f"無法取得藏曆年曆，改用簡化計算結果: {e}")
        return None

    try:
        return parse_zangli_day(markup, target_date.year, target_date.month, target_date.day)
    except Exception as e:
        logger.warning(f"解析藏曆年曆時發生錯誤，改用簡化計算結果: {e}", exc_info=True)
        return None
