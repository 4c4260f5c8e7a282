# utils/date_utils.py
"""
日期字串的驗證與格式化。
所有對外的入口（HTTP 路由、聚合器）都先經過 `validate_date_string`，確保後續模組拿到的是有效的 `date` 物件。
"""
import re
from datetime import date, datetime

from .errors import InvalidDateError

# 只接受字面上的 YYYY-MM-DD：四位數年、兩位數月、兩位數日
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INVALID_DATE_MESSAGE = "日期格式錯誤，請使用 YYYY-MM-DD"

# date.weekday()：0 = 星期一, 6 = 星期日
WEEKDAY_NAMES = ["星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日"]


def is_valid_date_string(date_str) -> bool:
    return isinstance(date_str, str) and DATE_PATTERN.match(date_str) is not None


def validate_date_string(date_str) -> date:
    """
    驗證並轉換日期字串。

    Args:
        date_str (str): 例如 "2025-03-01"；"2025-3-1" 會被拒絕。

    Returns:
        date: 對應的日期物件。

    Raises:
        InvalidDateError: 格式不符，或格式正確但日期不存在（例如 "2025-13-40"）。
    """
    if not is_valid_date_string(date_str):
        raise InvalidDateError(INVALID_DATE_MESSAGE)
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateError(INVALID_DATE_MESSAGE) from e


def get_weekday_name(d: date) -> str:
    return WEEKDAY_NAMES[d.weekday()]
