# advisory/daily_almanac_aggregator.py
"""
「每日宜忌」功能的數據聚合器。
將農民曆網頁、節氣計算、藏曆換算與 AI 解說整合成一份當日建議。
主要職責：
1. 協調資料來源：依序取得農民曆原始 HTML、解析、補上節氣、換算藏曆，再要求 AI 解說。
2. 錯誤分級：取得農民曆失敗 (`FetchError`) 直接往上拋；藏曆補充查詢失敗只記錄警告；
   AI 解說失敗改用預設文字，並在紀錄中標示 `commentaryStatus`。
3. 快取：以 `<前綴><日期>` 為鍵，只快取 AI 解說完整的結果。
"""
import logging
from typing import Dict, Optional

from config import CACHE_KEY_PREFIX, ENABLE_TIBETAN_LOOKUP

from almanac.almanac_api import fetch_almanac_html
from almanac.almanac_parser import parse_almanac_html

from tibetan_calendar.tibetan_calculator import convert_to_tibetan_date
from tibetan_calendar.zangli_api import lookup_tibetan_day
from tibetan_calendar.zangli_parser import enrich_tibetan_record

from commentary.commentary_service import generate_daily_commentary
from solar_terms.solar_terms_calculator import get_solar_term_on_date
from utils.date_utils import validate_date_string
from utils.errors import CommentaryError, CommentaryRateLimitError
from .advisory_composer import compose_daily_advisory

logger = logging.getLogger(__name__)


def build_cache_key(date_str: str) -> str:
    return f"{CACHE_KEY_PREFIX}{date_str}"


# --- 農民曆紀錄 ---
def get_almanac_record(date_str: str, session=None) -> Dict:
    """
    驗證日期、取得並解析農民曆網頁。

    Raises:
        InvalidDateError: 日期格式錯誤。
        FetchError: 無法取得網頁。
    """
    target_date = validate_date_string(date_str)
    raw_markup = fetch_almanac_html(target_date.isoformat(), session=session)
    return parse_almanac_html(raw_markup, target_date)


# --- 藏曆紀錄 ---
def get_tibetan_record(date_str: str, session=None, enable_lookup: Optional[bool] = None) -> Dict:
    """
    簡化計算的藏曆紀錄；開啟外部查詢時再以藏曆年曆網頁補充聖日與天象。
    外部查詢失敗時沿用簡化計算的結果。
    """
    target_date = validate_date_string(date_str)
    record = convert_to_tibetan_date(target_date)

    if enable_lookup is None:
        enable_lookup = ENABLE_TIBETAN_LOOKUP
    if enable_lookup:
        lookup = lookup_tibetan_day(target_date, session=session)
        record = enrich_tibetan_record(record, lookup)
    return record


# --- 當日建議 ---
def get_daily_almanac(
    date_str: str,
    cache,
    client=None,
    session=None,
    force_refresh: bool = False,
) -> Dict:
    """
    Args:
        date_str (str): YYYY-MM-DD。
        cache (CacheStore): 由呼叫者提供的快取。
        client: 可選的 OpenAI 相容客戶端；未提供時使用設定檔中的金鑰建立。
        session (requests.Session): 可選，用於對外的 HTTP 請求。
        force_refresh (bool): True 時略過快取讀取，重新產生並覆寫。

    Returns:
        Dict: `compose_daily_advisory` 的輸出。

    Raises:
        InvalidDateError: 日期格式錯誤。
        FetchError: 無法取得農民曆網頁。
    """
    target_date = validate_date_string(date_str)
    date_key = target_date.isoformat()
    cache_key = build_cache_key(date_key)

    if not force_refresh:
        cached = cache.get(cache_key)
        if cached:
            logger.info(f"使用快取的當日建議: {cache_key}")
            return cached

    # 1. 農民曆（必要資料，錯誤直接往上拋）
    almanac = get_almanac_record(date_key, session=session)

    # 2. 網頁沒有標示節氣時，用節氣計算補上
    solar_term = None
    if not almanac.get("solarTerm"):
        try:
            solar_term = get_solar_term_on_date(target_date)
        except Exception as e:
            logger.warning(f"計算 {date_key} 的節氣時發生錯誤: {e}", exc_info=True)

    # 3. 藏曆
    tibetan = get_tibetan_record(date_key, session=session)

    # 4. AI 解說（非必要資料，失敗時改用預設文字）
    commentary = None
    commentary_status = "ok"
    retry_after = None
    try:
        commentary = generate_daily_commentary(almanac, tibetan, client=client)
    except CommentaryRateLimitError as e:
        logger.warning(f"AI 解說達到流量上限，{e.retry_after} 秒內請勿重試。")
        commentary_status = "rate_limited"
        retry_after = e.retry_after
    except CommentaryError as e:
        logger.error(f"取得 {date_key} 的 AI 解說失敗，改用預設文字: {e}")
        commentary_status = "unavailable"

    advisory = compose_daily_advisory(
        almanac,
        tibetan,
        commentary=commentary,
        solar_term=solar_term,
        commentary_status=commentary_status,
        retry_after=retry_after,
    )

    if commentary_status == "ok":
        cache.set(cache_key, advisory)
        logger.info(f"已快取當日建議: {cache_key}")
    return advisory
