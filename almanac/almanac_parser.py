# almanac/almanac_parser.py
"""
解析農民曆網站回傳的原始 HTML，整理成結構化的農民曆紀錄。
網站的標記格式不穩定，所以每個欄位都有一組「由嚴格到寬鬆」的擷取規則：
1. 先比對 `<dt>標籤</dt><dd>內容</dd>` 這種定義列表結構。
2. 再把整頁轉成純文字，用正則表達式比對「宜：祭祀、祈福」這類寫法。
第一個取得非空結果的規則勝出；全部失敗時使用該欄位的預設值。
任何一個欄位出錯都不會影響其他欄位，`parse_almanac_html` 永遠回傳完整的紀錄。
"""
import re
import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from utils.text_processing import split_items, markup_to_text, collapse_whitespace
from .hourly_luck import derive_hourly_luck
from .almanac_constants import (
    HEAVENLY_STEMS, EARTHLY_BRANCHES, ZODIAC_ANIMALS, HOUR_BRANCHES, SOLAR_TERM_NAMES,
    DEFAULT_LUNAR_MONTH_DAY, DEFAULT_STEM_BRANCH, DEFAULT_ZODIAC_ANIMAL,
    DEFAULT_FAVORABLE_ACTIVITIES, DEFAULT_UNFAVORABLE_ACTIVITIES,
    DEFAULT_CLASH_ANIMAL, DEFAULT_CLASH_DIRECTION, DEFAULT_DIRECTIONAL_SPIRITS,
    DEFAULT_FETAL_SPIRIT_LOCATION, DEFAULT_FAVORABLE_HOURS, DEFAULT_HUNDRED_TABOOS
)

logger = logging.getLogger(__name__)

# --- 正則表達式的共用片段 ---
STEM = f"[{HEAVENLY_STEMS}]"
BRANCH = f"[{EARTHLY_BRANCHES}]"
ANIMAL = f"[{ZODIAC_ANIMALS}]"
CJK = "一-龥"
LIST_CHARS = CJK + "、，·・ "
SOLAR_TERMS = "|".join(SOLAR_TERM_NAMES)
DIRECTION = "正?[東南西北]{1,2}"

LUNAR_MONTH = "閏?(?:正|十[一二]|[一二三四五六七八九十]|冬|臘)月"
LUNAR_DAY = "(?:初[一二三四五六七八九十]|十[一二三四五六七八九]|二十|廿[一二三四五六七八九]|三十|卅)"

_PARENTHESIZED = re.compile(r"[\(（][^)）]*[\)）]")
_ANIMAL_PATTERN = re.compile(ANIMAL)
_DIRECTION_PATTERN = re.compile(f"({DIRECTION})方?")
_SOLAR_TERM_PATTERN = re.compile(f"({SOLAR_TERMS})")

# 逐時辰沖煞，例如「子時 23:00-01:00 沖馬 煞南」
_HOUR_CLASH_PATTERN = re.compile(f"({BRANCH})時[^沖]{{0,30}}?沖\\s*({ANIMAL})\\s*煞\\s*([東南西北]{{1,2}})")


# --- 同一份標記的兩種視圖：原始 HTML 與純文字 ---
class AlmanacMarkup:
    def __init__(self, raw_markup):
        if isinstance(raw_markup, bytes):
            raw_markup = raw_markup.decode("utf-8", errors="replace")
        self.html = raw_markup if isinstance(raw_markup, str) else ""
        self._text = None

    @property
    def text(self) -> str:
        # 只在寬鬆規則需要時才轉換，且只轉換一次
        if self._text is None:
            try:
                self._text = markup_to_text(self.html)
            except Exception as e:
                logger.warning(f"無法將 HTML 轉為純文字，寬鬆規則將不會命中: {e}")
                self._text = ""
        return self._text


Extractor = Callable[[AlmanacMarkup], Optional[str]]


# --- 擷取規則的產生器 ---
def _definition_value(*labels: str) -> Extractor:
    """嚴格規則：`<dt>標籤</dt><dd>內容</dd>`，回傳 dd 內的純文字。"""
    patterns = [
        re.compile(f"<dt[^>]*>\\s*{label}\\s*[:：]?\\s*</dt>\\s*<dd[^>]*>(.*?)</dd>", re.DOTALL)
        for label in labels
    ]

    def extract(markup: AlmanacMarkup) -> Optional[str]:
        for pattern in patterns:
            match = pattern.search(markup.html)
            if match:
                return markup_to_text(match.group(1))
        return None
    return extract


def _text_pattern(pattern: str) -> Extractor:
    """寬鬆規則：對純文字套用正則表達式，回傳第一個群組。"""
    compiled = re.compile(pattern)

    def extract(markup: AlmanacMarkup) -> Optional[str]:
        match = compiled.search(markup.text)
        return match.group(1) if match else None
    return extract


def _text_section(label: str, stop_labels: str, chars: str = LIST_CHARS, max_len: int = 120) -> Extractor:
    """
    寬鬆規則：從「標籤」之後開始擷取，遇到下一個區段的標籤、非允許字元或文字結尾就停止。
    標籤前必須是開頭或空白，避免「吉神宜趨」被當成「宜」。
    """
    return _text_pattern(
        f"(?:^|\\s){label}\\s*[:：]?\\s*([{chars}]{{1,{max_len}}}?)"
        f"(?=\\s*(?:{stop_labels})|[^{chars}]|$)"
    )


def _inline_section(label: str, excluded_prefixes: str, stop_labels: str) -> Extractor:
    """
    最寬鬆的規則：區段之間沒有空白或標籤，例如「宜祭祀、祈福忌嫁娶沖(辛丑)牛」。
    只排除「吉神宜趨」「凶煞宜忌」「彭祖百忌」這類複合詞裡的同一個字。
    """
    return _text_pattern(
        f"(?<![{excluded_prefixes}]){label}\\s*[:：]?\\s*([{LIST_CHARS}]{{1,120}}?)"
        f"(?=\\s*(?:{stop_labels})|[^{LIST_CHARS}]|$)"
    )


# --- 將擷取到的原始字串整理成欄位值 ---
def _as_text(raw: str) -> str:
    return collapse_whitespace(raw)


def _as_solar_term(raw: str) -> Optional[str]:
    match = _SOLAR_TERM_PATTERN.search(raw)
    return match.group(1) if match else None


def _as_animal(raw: str) -> Optional[str]:
    # "(辛丑)牛 煞西" -> "牛"
    match = _ANIMAL_PATTERN.search(_PARENTHESIZED.sub("", raw))
    return match.group(0) if match else None


def _as_direction(raw: str) -> Optional[str]:
    # "(辛丑)牛 煞西" -> "西方"；"正南" -> "正南方"
    match = _DIRECTION_PATTERN.search(raw.split("煞")[-1])
    return f"{match.group(1)}方" if match else None


def _as_hours(raw: str) -> List[str]:
    hours = []
    for token in split_items(raw):
        if token.endswith("時"):
            token = token[:-1]
        if len(token) == 1 and token in HOUR_BRANCHES:
            hours.append(token)
    return hours


# --- 欄位 -> (擷取規則列表, 整理函式, 預設值) ---
"""
規則依序嘗試，順序即優先權；要新增或調整寫法只需要修改這張表。
"""
FIELD_RULES: Dict[str, Tuple[List[Extractor], Callable, object]] = {
    "lunarMonthDay": ([
        _definition_value("農曆"),
        _text_pattern(f"農曆\\s*[:：]?\\s*({LUNAR_MONTH}{LUNAR_DAY})"),
        _text_pattern(f"({LUNAR_MONTH}{LUNAR_DAY})"),
    ], _as_text, DEFAULT_LUNAR_MONTH_DAY),

    "stemYear": ([
        _text_pattern(f"({STEM}{BRANCH}{ANIMAL}年)"),
        _text_pattern(f"({STEM}{BRANCH}年)"),
    ], _as_text, DEFAULT_STEM_BRANCH["year"]),

    "stemMonth": ([
        _text_pattern(f"({STEM}{BRANCH}月)"),
    ], _as_text, DEFAULT_STEM_BRANCH["month"]),

    "stemDay": ([
        _text_pattern(f"({STEM}{BRANCH}日)"),
    ], _as_text, DEFAULT_STEM_BRANCH["day"]),

    "zodiacAnimal": ([
        _text_pattern(f"{STEM}{BRANCH}({ANIMAL})年"),
        _definition_value("生肖"),
        _text_pattern(f"生肖\\s*[:：]?\\s*({ANIMAL})"),
    ], _as_animal, DEFAULT_ZODIAC_ANIMAL),

    "solarTerm": ([
        _definition_value("節氣"),
        _text_pattern(f"節氣\\s*[:：]?\\s*({SOLAR_TERMS})"),
    ], _as_solar_term, None),

    "favorableActivities": ([
        _definition_value("宜"),
        _text_section("宜", "忌|沖|煞|吉神|凶煞|彭祖"),
        _inline_section("宜", "神煞不", "忌|沖|煞|吉神|凶煞|彭祖"),
    ], split_items, DEFAULT_FAVORABLE_ACTIVITIES),

    "unfavorableActivities": ([
        _definition_value("忌"),
        _text_section("忌", "沖|煞|吉神|凶煞|凶神|彭祖|胎神"),
        _inline_section("忌", "百宜", "沖|煞|吉神|凶煞|凶神|彭祖|胎神"),
    ], split_items, DEFAULT_UNFAVORABLE_ACTIVITIES),

    "clashAnimal": ([
        _definition_value("沖", "沖煞"),
        _text_pattern(f"沖\\s*[:：]?\\s*[\\(（]\\s*{STEM}{BRANCH}\\s*[\\)）]\\s*({ANIMAL})"),
        _text_pattern(f"沖\\s*[:：]?\\s*({ANIMAL})"),
    ], _as_animal, DEFAULT_CLASH_ANIMAL),

    "clashDirection": ([
        _definition_value("沖", "沖煞"),
        _definition_value("煞"),
        _text_pattern(f"沖[^煞]{{0,12}}煞\\s*[:：]?\\s*({DIRECTION})"),
        _text_pattern(f"(?:^|\\s)煞\\s*[:：]?\\s*({DIRECTION})方"),
    ], _as_direction, DEFAULT_CLASH_DIRECTION),

    "auspiciousSpirits": ([
        _definition_value("吉神宜趨", "吉神"),
        _text_section("吉神(?:宜趨)?", "凶煞|凶神|胎神|喜神|福神|財神|方位|彭祖|吉時"),
    ], split_items, ()),

    "inauspiciousSpirits": ([
        _definition_value("凶煞宜忌", "凶煞", "凶神"),
        _text_section("凶(?:煞|神)(?:宜忌)?", "吉神|胎神|喜神|福神|財神|方位|彭祖|吉時"),
    ], split_items, ()),

    "joySpirit": ([
        _definition_value("喜神"),
        _text_pattern(f"喜神\\s*[:：]?\\s*({DIRECTION})"),
    ], _as_direction, DEFAULT_DIRECTIONAL_SPIRITS["joy"]),

    "wealthSpirit": ([
        _definition_value("財神"),
        _text_pattern(f"財神\\s*[:：]?\\s*({DIRECTION})"),
    ], _as_direction, DEFAULT_DIRECTIONAL_SPIRITS["wealth"]),

    "fortuneSpirit": ([
        _definition_value("福神"),
        _text_pattern(f"福神\\s*[:：]?\\s*({DIRECTION})"),
    ], _as_direction, DEFAULT_DIRECTIONAL_SPIRITS["fortune"]),

    "fetalSpiritLocation": ([
        _definition_value("胎神占方", "胎神"),
        _text_section("胎神(?:占方)?", "吉時|彭祖|喜神|吉神|凶煞|宜|忌", chars=CJK + " ", max_len=40),
    ], _as_text, DEFAULT_FETAL_SPIRIT_LOCATION),

    "favorableHours": ([
        _definition_value("吉時"),
        _text_section("吉時", "彭祖|胎神|喜神|吉神|凶煞"),
    ], _as_hours, DEFAULT_FAVORABLE_HOURS),

    "hundredTaboos": ([
        _definition_value("彭祖百忌"),
        _text_section("彭祖百忌", "胎神|吉時|喜神|吉神|凶煞", chars=CJK + "；;，, ", max_len=60),
    ], _as_text, DEFAULT_HUNDRED_TABOOS),
}


def _default_value(default):
    # 列表型預設值每次都回傳新的 list，避免不同紀錄共用同一個物件
    if isinstance(default, tuple):
        return list(default)
    return default


def extract_field(field_name: str, markup: AlmanacMarkup):
    """依 FIELD_RULES 的順序嘗試擷取單一欄位，全部落空時回傳預設值。"""
    extractors, shaper, default = FIELD_RULES[field_name]
    for index, extractor in enumerate(extractors):
        try:
            raw = extractor(markup)
            if not raw:
                continue
            value = shaper(raw)
        except Exception as e:
            logger.warning(f"欄位 {field_name} 的第 {index + 1} 個擷取規則發生錯誤: {e}", exc_info=True)
            continue
        if value:
            return value

    logger.debug(f"欄位 {field_name} 未擷取到資料，使用預設值: {default!r}")
    return _default_value(default)


def extract_hour_clashes(markup: AlmanacMarkup) -> Dict[str, Tuple[str, str]]:
    """擷取逐時辰的沖煞，同一時辰只保留第一次出現的結果。"""
    clashes = {}
    try:
        for match in _HOUR_CLASH_PATTERN.finditer(markup.text):
            hour, animal, direction = match.groups()
            clashes.setdefault(hour, (animal, direction))
    except Exception as e:
        logger.warning(f"擷取逐時辰沖煞時發生錯誤: {e}", exc_info=True)
        return {}
    return clashes


# --- 解析器的主要入口 ---
def parse_almanac_html(raw_markup, target_date) -> Dict:
    """
    Args:
        raw_markup (str): 農民曆網站的原始 HTML（任意文字皆可，包含空字串）。
        target_date (date | str): 這份資料對應的日期。

    Returns:
        Dict: 完整的農民曆紀錄；每個欄位都有值，列表欄位至少是空列表。
    """
    date_str = target_date.isoformat() if isinstance(target_date, date) else str(target_date)
    markup = AlmanacMarkup(raw_markup)

    fields = {name: extract_field(name, markup) for name in FIELD_RULES}
    hour_clashes = extract_hour_clashes(markup)

    record = {
        "date"                  : date_str,
        "lunarMonthDay"         : fields["lunarMonthDay"],
        "stemBranch"            : {
            "year"  : fields["stemYear"],
            "month" : fields["stemMonth"],
            "day"   : fields["stemDay"],
        },
        "zodiacAnimal"          : fields["zodiacAnimal"],
        "solarTerm"             : fields["solarTerm"],
        "favorableActivities"   : fields["favorableActivities"],
        "unfavorableActivities" : fields["unfavorableActivities"],
        "clashAnimal"           : fields["clashAnimal"],
        "clashDirection"        : fields["clashDirection"],
        "auspiciousSpirits"     : fields["auspiciousSpirits"],
        "inauspiciousSpirits"   : fields["inauspiciousSpirits"],
        "directionalSpirits"    : {
            "joy"     : fields["joySpirit"],
            "wealth"  : fields["wealthSpirit"],
            "fortune" : fields["fortuneSpirit"],
        },
        "fetalSpiritLocation"   : fields["fetalSpiritLocation"],
        "favorableHours"        : fields["favorableHours"],
        "hundredTaboos"         : fields["hundredTaboos"],
        "hourlyAdvisory"        : derive_hourly_luck(fields["favorableHours"], hour_clashes),
    }

    logger.info(f"農民曆解析完成: {date_str} {record['lunarMonthDay']}")
    return record
