# tibetan_calendar/zangli_parser.py
"""
解析藏曆年曆網頁（一年一頁），找出指定公曆日期那一列的藏曆資訊。
網頁內容是簡體字，解析後會轉為繁體字。
找不到月份區塊或日期列時回傳 None，讓呼叫者沿用簡化計算的結果。
"""
import re
import logging
from typing import Dict, Optional

from utils.text_processing import markup_to_text, to_traditional

logger = logging.getLogger(__name__)

TIBETAN_DAY_LABEL = "(?:初[一二三四五六七八九十]|十[一二三四五六七八九]?|廿[一二三四五六七八九]?|三十|[一二三四五六七八九十廿]+)"

# 佛菩薩節日（簡體原文）
BUDDHA_DAY_PATTERNS = [
    re.compile(p) for p in (
        r"阿弥陀佛节日",
        r"药师佛节日",
        r"释迦牟尼佛\s*成道日涅槃日",
        r"释迦牟尼佛\s*初转法轮日",
        r"释迦牟尼佛\s*天降日",
        r"释迦牟尼佛\s*入胎日",
        r"释迦牟尼佛诞辰",
        r"释迦牟尼佛节日",
        r"观音菩萨节日",
        r"地藏王菩萨节日",
        r"莲师荟供日",
        r"空行母荟供日",
        r"禅定胜王佛节日",
        r"神变节",
    )
]

_MERIT_PATTERN = re.compile(r"作何善[恶惡]成(.+?倍)")
_ECLIPSE_PATTERN = re.compile(r"(?:日环食|日全食|月全食|月偏食)[^|]*")
_DAY_LABEL_PATTERN = re.compile(f"^(闰|閏)?({TIBETAN_DAY_LABEL})")
_UPOSATHA_DAYS = ("初八", "十五", "廿三", "三十")


def _find_month_section(text: str, year: int, month: int) -> Optional[str]:
    header = f"{year}年{month}月"
    start = text.find(header)
    if start < 0:
        return None

    end = len(text)
    if month < 12:
        next_start = text.find(f"{year}年{month + 1}月", start + len(header))
        if next_start > start:
            end = next_start
    return text[start + len(header):end]


def _collect_observances(content: str) -> list[str]:
    found = []
    for pattern in BUDDHA_DAY_PATTERNS:
        match = pattern.search(content)
        if match:
            name = re.sub(r"\s+", "", match.group(0)).replace("成道日涅槃日", "成道日、涅槃日")
            found.append(to_traditional(name))
    return found


def parse_zangli_day(markup: str, year: int, month: int, day: int) -> Optional[Dict]:
    """
    Args:
        markup (str): 藏曆年曆網頁原始 HTML。
        year, month, day (int): 公曆日期。

    Returns:
        Optional[Dict]: {"tibetanDay", "observance", "meritMultiplier", "specialEvent"}；找不到時回傳 None。
    """
    text = markup_to_text(markup)
    section = _find_month_section(text, year, month)
    if section is None:
        logger.warning(f"藏曆頁面中找不到 {year}年{month}月 的區塊。")
        return None

    # 例如「| 3 十五 阿弥陀佛节日 作何善恶成百万倍 |」
    day_pattern = re.compile(
        f"(?<!\\d){day}\\s+((?:闰|閏)?{TIBETAN_DAY_LABEL}[^|]*?)(?=\\||\\s\\d{{1,2}}\\s|$)"
    )
    match = day_pattern.search(section)
    if not match:
        logger.warning(f"藏曆頁面中找不到 {year}-{month:02d}-{day:02d} 的資料列。")
        return None

    content = match.group(1).strip()

    tibetan_day = ""
    day_label_match = _DAY_LABEL_PATTERN.match(content)
    if day_label_match:
        tibetan_day = to_traditional((day_label_match.group(1) or "") + day_label_match.group(2))

    observances = _collect_observances(content)

    # 月圓日與布薩日
    if "十五" in tibetan_day:
        observances.append("月圓日")
    if any(label in tibetan_day for label in _UPOSATHA_DAYS):
        observances.append("布薩日")

    merit_match = _MERIT_PATTERN.search(content)
    eclipse_match = _ECLIPSE_PATTERN.search(content)

    return {
        "tibetanDay"      : tibetan_day,
        "observance"      : "、".join(observances) or None,
        "meritMultiplier" : to_traditional(merit_match.group(1)) if merit_match else None,
        "specialEvent"    : to_traditional(eclipse_match.group(0).strip()) if eclipse_match else None,
    }


def enrich_tibetan_record(record: Dict, lookup: Optional[Dict]) -> Dict:
    """以外部查詢結果補充藏曆紀錄，回傳新的字典；原紀錄不變。"""
    enriched = dict(record)
    if not lookup:
        return enriched

    if lookup.get("observance"):
        enriched["observance"] = lookup["observance"]
        enriched["meritMultiplier"] = lookup.get("meritMultiplier") or record.get("meritMultiplier")
    elif lookup.get("meritMultiplier"):
        enriched["meritMultiplier"] = lookup["meritMultiplier"]

    if lookup.get("specialEvent"):
        enriched["specialEvent"] = lookup["specialEvent"]
    return enriched
