# almanac/hourly_luck.py
"""
把當日的吉時列表展開成十二時辰的宜忌表。
吉凶只有兩種，完全由該時辰是否在吉時列表中決定；宜忌項目是固定的列表，不是逐時辰計算的結果。
"""
from typing import Dict, Iterable, List, Optional, Tuple

from .almanac_constants import (
    HOUR_BRANCHES, HOUR_TIME_RANGES,
    LUCKY_HOUR_ACTIVITIES, UNLUCKY_HOUR_ACTIVITIES
)


def derive_hourly_luck(
    favorable_hours: Iterable[str],
    hour_clashes: Optional[Dict[str, Tuple[str, str]]] = None
) -> List[Dict]:
    """
    Args:
        favorable_hours: 吉時的地支，例如 ["子", "丑", "卯"]。
        hour_clashes: 從網頁擷取到的各時辰沖煞，格式為 {"子": ("馬", "南")}；沒有就留空字串。

    Returns:
        List[Dict]: 固定 12 筆，順序為子丑寅卯辰巳午未申酉戌亥。
    """
    lucky = set(favorable_hours or ())
    hour_clashes = hour_clashes or {}

    hourly = []
    for hour in HOUR_BRANCHES:
        is_lucky = hour in lucky
        clash, direction = hour_clashes.get(hour, ("", ""))
        hourly.append({
            "hour"        : hour,
            "timeRange"   : HOUR_TIME_RANGES[hour],
            "favorable"   : list(LUCKY_HOUR_ACTIVITIES) if is_lucky else [],
            "unfavorable" : [] if is_lucky else list(UNLUCKY_HOUR_ACTIVITIES),
            "clash"       : clash,
            "direction"   : direction,
        })
    return hourly
