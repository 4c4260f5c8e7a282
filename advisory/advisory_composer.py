# advisory/advisory_composer.py
"""
將農民曆紀錄、藏曆紀錄與 AI 解說組合成前端顯示用的單一紀錄。
這裡只做欄位改名與補預設值，不做任何擷取或計算；
輸出中的每個欄位都有值，沒有資料的選填文字一律顯示「無」。
"""
import logging
from datetime import date
from typing import Dict, Optional

from solar_terms.solar_terms_calculator import format_date_with_weekday
from tibetan_calendar.tibetan_calculator import get_haircut_advice, get_wind_horse_advice
from utils.date_utils import get_weekday_name

logger = logging.getLogger(__name__)

NONE_LABEL = "無"
FALLBACK_ADVICE = "請參考農民曆宜忌列表"
FALLBACK_ANALYSIS = "AI 解說暫時無法取得，請參考藏曆宜忌。"
FALLBACK_DHARMA_ADVICE = "請依個人日常功課修持。"

COMMENTARY_STATUSES = ("ok", "unavailable", "rate_limited")


def _label(value) -> str:
    if value is None:
        return NONE_LABEL
    text = str(value).strip()
    return text or NONE_LABEL


def _compose_hour(entry: Dict) -> Dict:
    return {
        "hour"        : _label(entry.get("hour")),
        "timeRange"   : _label(entry.get("timeRange")),
        "favorable"   : list(entry.get("favorable") or []),
        "unfavorable" : list(entry.get("unfavorable") or []),
        "clash"       : _label(entry.get("clash")),
        "direction"   : _label(entry.get("direction")),
    }


def _compose_tibetan(tibetan: Dict, commentary: Dict) -> Dict:
    day_number = tibetan.get("tibetanDayNumber") or 0
    return {
        "yearName"       : _label(tibetan.get("tibetanYearName")),
        "monthName"      : _label(tibetan.get("tibetanMonthName")),
        "dayName"        : _label(tibetan.get("tibetanDayName")),
        "label"          : _label(tibetan.get("tibetanLabel")),
        "weekday"        : _label(tibetan.get("weekday")),
        "constellation"  : _label(tibetan.get("constellation")),
        "yoga"           : _label(tibetan.get("yogaName")),
        "buddhaDay"      : _label(tibetan.get("observance")),
        "meritMultiplier": _label(tibetan.get("meritMultiplier")),
        "specialEvent"   : _label(tibetan.get("specialEvent")),
        "auspicious"     : list(tibetan.get("auspicious") or []),
        "inauspicious"   : list(tibetan.get("inauspicious") or []),
        "analysis"       : commentary.get("analysis") or FALLBACK_ANALYSIS,
        "dharmaAdvice"   : commentary.get("dharmaAdvice") or FALLBACK_DHARMA_ADVICE,
        "traditionalActivities": {
            "haircut"   : get_haircut_advice(day_number),
            "windHorse" : get_wind_horse_advice(day_number),
            "other"     : [],
        },
    }


# --- 組合當日建議 ---
def compose_daily_advisory(
    almanac: Dict,
    tibetan: Dict,
    commentary: Optional[Dict] = None,
    solar_term: Optional[str] = None,
    commentary_status: str = "ok",
    retry_after: Optional[int] = None,
) -> Dict:
    """
    Args:
        almanac (Dict): `parse_almanac_html` 的輸出。
        tibetan (Dict): `convert_to_tibetan_date` 的輸出（可能已經過補充）。
        commentary (Optional[Dict]): AI 解說；缺少的欄位以預設文字補上。
        solar_term (Optional[str]): 網頁沒有節氣時，由節氣計算補上的名稱。
        commentary_status (str): "ok"、"unavailable" 或 "rate_limited"。
        retry_after (Optional[int]): 頻率限制時建議的等待秒數。

    Returns:
        Dict: 顯示用紀錄，不含任何 None。
    """
    if commentary_status not in COMMENTARY_STATUSES:
        raise ValueError(f"未知的解說狀態: {commentary_status}")

    commentary = commentary or {}
    solar_date = date.fromisoformat(almanac["date"])
    stem_branch = almanac.get("stemBranch") or {}
    spirits = almanac.get("directionalSpirits") or {}

    stem_branch_parts = [stem_branch.get(k, "") for k in ("year", "month", "day")]

    advisory = {
        "solarDate"        : solar_date.isoformat(),
        "solarDateLabel"   : format_date_with_weekday(solar_date),
        "weekday"          : get_weekday_name(solar_date),
        "lunarDate"        : _label(almanac.get("lunarMonthDay")),
        "solarTerm"        : _label(almanac.get("solarTerm") or solar_term),
        "stemBranch"       : {
            "year"  : _label(stem_branch_parts[0]),
            "month" : _label(stem_branch_parts[1]),
            "day"   : _label(stem_branch_parts[2]),
        },
        "stemBranchLabel"  : " ".join(_label(p) for p in stem_branch_parts),
        "zodiac"           : _label(almanac.get("zodiacAnimal")),
        "auspicious"       : list(almanac.get("favorableActivities") or []),
        "inauspicious"     : list(almanac.get("unfavorableActivities") or []),
        "clashZodiac"      : _label(almanac.get("clashAnimal")),
        "clashDirection"   : _label(almanac.get("clashDirection")),
        "spiritDirections" : {
            "joy"     : _label(spirits.get("joy")),
            "wealth"  : _label(spirits.get("wealth")),
            "fortune" : _label(spirits.get("fortune")),
        },
        "fetalSpirit"      : _label(almanac.get("fetalSpiritLocation")),
        "pengZuTaboo"      : _label(almanac.get("hundredTaboos")),
        "luckySpirits"     : list(almanac.get("auspiciousSpirits") or []),
        "unluckySpirits"   : list(almanac.get("inauspiciousSpirits") or []),
        "luckyHours"       : list(almanac.get("favorableHours") or []),
        "hourlyLuck"       : [_compose_hour(entry) for entry in almanac.get("hourlyAdvisory") or []],
        "tibetan"          : _compose_tibetan(tibetan, commentary),
        "dailyAdvice"      : commentary.get("dailyAdvice") or FALLBACK_ADVICE,
        "commentaryStatus" : commentary_status,
    }

    if commentary_status != "ok":
        logger.info(f"{solar_date.isoformat()} 的 AI 解說狀態為 {commentary_status}，使用預設文字。")

    if commentary_status == "rate_limited" and retry_after is not None:
        advisory["retryAfter"] = int(retry_after)

    return advisory
