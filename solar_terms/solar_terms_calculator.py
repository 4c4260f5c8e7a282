# solar_terms/solar_terms_calculator.py
"""
計算和查詢二十四節氣。
整合 `lunarcalendar` 函式庫，在農民曆網頁沒有標示節氣時，用來補上當天的節氣名稱。
主要職責：
1. `format_date_with_weekday`：將日期物件格式化為帶有星期幾的字串。
2. `get_solar_terms_for_year`：獲取指定年份的所有節氣及精確日期（繁體名稱）。
3. `get_solar_term_on_date`：檢查指定日期是否為某個節氣的開始日。
"""
import logging
import lunarcalendar # 直接將年份傳入節氣物件，就會算出該年份的節氣日期
from datetime import date

logger = logging.getLogger(__name__)

# lunarcalendar 只提供簡體名稱，這裡只列出繁簡不同的節氣
_TRADITIONAL_TERM_NAMES = {
    "惊蛰" : "驚蟄",
    "谷雨" : "穀雨",
    "小满" : "小滿",
    "芒种" : "芒種",
    "处暑" : "處暑",
}

# --- 將日期轉換成包含星期幾的格式 ---
def format_date_with_weekday(d: date) -> str:
    """
    Returns:
        str: 例如 "2025年08月14日 (四)"。
    """
    weekdays = ["一", "二", "三", "四", "五", "六", "日"]
    return f"{d.year}年{d.month:02d}月{d.day:02d}日 ({weekdays[d.weekday()]})"

# --- 使用 lunarcalendar 獲取指定年份的所有 24 個節氣 ---
def get_solar_terms_for_year(year: int) -> list[dict]:
    """
    Returns:
        list[dict]: 依日期排序，每個字典包含節氣名稱 (繁體) 和日期。
    """
    solar_terms = []

    for term_object in lunarcalendar.zh_solarterms:
        term_name = "Unknown"
        # 個別節氣出錯時記錄並跳過，不影響其他節氣
        try:
            term_name = term_object.get_lang('zh_hans')
            term_date = term_object(year)
            solar_terms.append({
                "name": _TRADITIONAL_TERM_NAMES.get(term_name, term_name),
                "date": term_date
            })
        except Exception as e:
            logger.error(f"無法取得 {year} 年 {term_name} 節氣資訊: {e}")

    solar_terms.sort(key=lambda x: x['date'])
    return solar_terms

# --- 檢查指定日期是否是某個節氣的開始日 ---
def get_solar_term_on_date(check_date: date) -> str | None:
    """
    Returns:
        str | None: 節氣名稱；不是節氣日時回傳 None。
    """
    for term in get_solar_terms_for_year(check_date.year):
        if term["date"] == check_date:
            logger.debug(f"日期 {check_date} 是節氣 【{term['name']}】 的開始日。")
            return term["name"]
    return None
