# tibetan_calendar/tibetan_calculator.py
"""
將公曆日期換算為近似的藏曆日期。
這是以固定偏移量與查表完成的簡化換算，沒有閏月、閏日表，不是真正的藏曆推算；
為了讓輸出穩定、可測試，算式與對照表必須保持不變。
主要職責：
1. `convert_to_tibetan_date`：年名、月名、日名、星宿、瑜伽、佛菩薩聖日與功德倍數。
2. `get_tibetan_day_name`：藏曆日數字轉為「初一」「廿三」這類名稱。
3. `get_haircut_advice`、`get_wind_horse_advice`：依藏曆日提供傳統活動建議。
"""
import re
import logging
from datetime import date
from typing import Dict, List, Optional

from utils.date_utils import validate_date_string, get_weekday_name
from .tibetan_constants import (
    TIBETAN_YEARS, TIBETAN_DAY_OFFSET, TIBETAN_YEAR_DAYS, TIBETAN_MONTH_DAYS,
    TIBETAN_MONTH_NAMES, DIGIT_NAMES, BUDDHA_DAYS, CONSTELLATIONS, YOGAS,
    PRACTICE_DAYS, HOUSEHOLD_DAYS, CAUTION_DAYS, RESTRAINT_DAYS,
    PRACTICE_ACTIVITIES, HOUSEHOLD_ACTIVITIES, ORDINARY_ACTIVITIES,
    CAUTION_AVOIDANCES, RESTRAINT_AVOIDANCES,
    HAIRCUT_ADVICE, DEFAULT_HAIRCUT_ADVICE,
    WIND_HORSE_PRACTICE_ADVICE, WIND_HORSE_HOUSEHOLD_ADVICE,
    WIND_HORSE_CAUTION_ADVICE, WIND_HORSE_ORDINARY_ADVICE
)

logger = logging.getLogger(__name__)

_MERIT_PATTERN = re.compile(r"作何善[惡恶]成(.+?倍)")


def get_tibetan_year_name(year: int) -> str:
    return TIBETAN_YEARS.get(year, f"{year}年")


def get_tibetan_day_name(day_number: int) -> str:
    """
    藏曆日數字 (1-30) 轉為傳統名稱：
    10 -> 初十、20 -> 二十、30 -> 三十；其餘依十位數加上「初」「十」「廿」。
    """
    if day_number == 10:
        return "初十"
    if day_number == 20:
        return "二十"
    if day_number == 30:
        return "三十"
    if day_number < 10:
        return "初" + DIGIT_NAMES[day_number]
    if day_number < 20:
        return "十" + DIGIT_NAMES[day_number - 10]
    if day_number < 30:
        return "廿" + DIGIT_NAMES[day_number - 20]
    return "三十"


def get_observance(day_number: int) -> Optional[str]:
    return BUDDHA_DAYS.get(day_number)


def extract_merit_multiplier(observance: Optional[str]) -> Optional[str]:
    """從「作何善惡成百萬倍」取出「百萬倍」；沒有這段文字時回傳 None。"""
    if not observance:
        return None
    match = _MERIT_PATTERN.search(observance)
    return match.group(1) if match else None


def get_tibetan_auspicious(day_number: int) -> List[str]:
    if day_number in PRACTICE_DAYS:
        return list(PRACTICE_ACTIVITIES)
    if day_number in HOUSEHOLD_DAYS:
        return list(HOUSEHOLD_ACTIVITIES)
    return list(ORDINARY_ACTIVITIES)


def get_tibetan_inauspicious(day_number: int) -> List[str]:
    if day_number in CAUTION_DAYS:
        return list(CAUTION_AVOIDANCES)
    if day_number in RESTRAINT_DAYS:
        return list(RESTRAINT_AVOIDANCES)
    return []


def get_haircut_advice(day_number: int) -> str:
    return HAIRCUT_ADVICE.get(day_number, DEFAULT_HAIRCUT_ADVICE)


def get_wind_horse_advice(day_number: int) -> str:
    if day_number in PRACTICE_DAYS:
        return WIND_HORSE_PRACTICE_ADVICE
    if day_number in HOUSEHOLD_DAYS:
        return WIND_HORSE_HOUSEHOLD_ADVICE
    if day_number in CAUTION_DAYS:
        return WIND_HORSE_CAUTION_ADVICE
    return WIND_HORSE_ORDINARY_ADVICE


# --- 公曆 -> 藏曆（簡化計算） ---
def convert_to_tibetan_date(target_date) -> Dict:
    """
    Args:
        target_date (date | str): 公曆日期；字串必須是 YYYY-MM-DD。

    Returns:
        Dict: 藏曆紀錄。相同輸入永遠得到相同輸出。
    """
    if not isinstance(target_date, date):
        target_date = validate_date_string(target_date)

    year_name = get_tibetan_year_name(target_date.year)

    # 1 月 1 日為第 0 天
    day_of_year = (target_date - date(target_date.year, 1, 1)).days
    tibetan_day_of_year = (day_of_year + TIBETAN_DAY_OFFSET) % TIBETAN_YEAR_DAYS

    month_index = min(max(tibetan_day_of_year // TIBETAN_MONTH_DAYS, 0), len(TIBETAN_MONTH_NAMES) - 1)
    day_number = (tibetan_day_of_year % TIBETAN_MONTH_DAYS) + 1

    month_name = TIBETAN_MONTH_NAMES[month_index]
    day_name = get_tibetan_day_name(day_number)
    observance = get_observance(day_number)

    record = {
        "date"             : target_date.isoformat(),
        "tibetanYearName"  : year_name,
        "tibetanMonthName" : month_name,
        "tibetanDayName"   : day_name,
        "tibetanDayNumber" : day_number,
        "tibetanLabel"     : f"{year_name} {month_name}{day_name}",
        "weekday"          : get_weekday_name(target_date),
        "constellation"    : CONSTELLATIONS[(day_number - 1) % len(CONSTELLATIONS)],
        "yogaName"         : YOGAS[(day_number - 1) % len(YOGAS)],
        "observance"       : observance,
        "meritMultiplier"  : extract_merit_multiplier(observance),
        "specialEvent"     : None,
        "auspicious"       : get_tibetan_auspicious(day_number),
        "inauspicious"     : get_tibetan_inauspicious(day_number),
    }
    logger.debug(f"藏曆換算: {record['date']} -> {record['tibetanLabel']}")
    return record
