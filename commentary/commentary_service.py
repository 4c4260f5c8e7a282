# commentary/commentary_service.py
"""
向 OpenAI 相容的文字生成服務要求 AI 解說，並把回傳的文字解析成 JSON 物件。
主要職責：
1. `generate_daily_commentary`：根據農民曆與藏曆紀錄，產生當日的分析、修行建議與生活建議。
2. `find_lucky_dates`：依事件類型與月份推薦吉日，失敗時回傳空列表。
3. `get_zodiac_fortune`：取得生肖運勢，錯誤會往上拋給呼叫者。
頻率限制錯誤會轉為 `CommentaryRateLimitError`，讓呼叫者可以進入冷卻時間。
"""
import re
import json
import logging
from typing import Dict, List, Optional

import openai

from config import LLM_MODEL_NAME, LLM_TEMPERATURE
from utils.errors import CommentaryError, CommentaryFormatError, CommentaryRateLimitError
from .llm_client import get_default_llm_client

logger = logging.getLogger(__name__)

EVENT_TYPES = ("結婚", "搬家", "開業", "出行", "裝修", "簽約")
ZODIAC_LIST = ("鼠", "牛", "虎", "兔", "龍", "蛇", "馬", "羊", "猴", "雞", "狗", "豬")

DEFAULT_RETRY_AFTER_SECONDS = 45

DAILY_COMMENTARY_KEYS = ("analysis", "dharmaAdvice", "dailyAdvice")

SYSTEM_PROMPT = "你是精通農民曆與藏傳佛教曆法的顧問，請使用繁體中文回答，並且只回傳純 JSON。"

_CODE_FENCE_PATTERN = re.compile(r"```(?:json)?")


# --- 回應文字處理 ---
def strip_code_fences(text: str) -> str:
    """移除 ```json 與 ``` 標記，以及前後空白。"""
    return _CODE_FENCE_PATTERN.sub("", text or "").strip()


def parse_commentary_json(text: str):
    """
    Raises:
        CommentaryFormatError: 文字不是合法 JSON，或解析結果不是物件。
    """
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise CommentaryFormatError(f"AI 回傳內容不是合法的 JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise CommentaryFormatError(f"AI 回傳的 JSON 不是物件，而是 {type(parsed).__name__}")
    return parsed


def _retry_after_from(error: openai.RateLimitError) -> int:
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None) or {}
    value = headers.get("retry-after") or headers.get("Retry-After")
    try:
        return max(int(float(value)), 1)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


# --- 呼叫文字生成服務 ---
def request_completion(prompt: str, client=None) -> str:
    """
    送出提示詞並回傳模型輸出的文字。

    Raises:
        CommentaryRateLimitError: 服務回報流量上限。
        CommentaryError: 沒有設定金鑰、連線失敗或其他服務錯誤。
    """
    client = client or get_default_llm_client()
    if client is None:
        raise CommentaryError("未設定 LLM_API_KEY，無法產生 AI 解說。")

    api_params = {
        "model": LLM_MODEL_NAME,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt + "\n回傳純 JSON。"},
        ],
        "temperature": LLM_TEMPERATURE,
    }

    try:
        response = client.chat.completions.create(**api_params)
    except openai.RateLimitError as e:
        retry_after = _retry_after_from(e)
        logger.warning(f"AI 服務流量上限，{retry_after} 秒後再試: {e}")
        raise CommentaryRateLimitError(str(e), retry_after=retry_after) from e
    except openai.APIError as e:
        logger.error(f"呼叫 AI 服務失敗: {e}")
        raise CommentaryError(f"呼叫 AI 服務失敗: {e}") from e

    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise CommentaryFormatError("AI 回應中沒有文字內容") from e
    if not content:
        raise CommentaryFormatError("AI 回應中沒有文字內容")
    return content


# --- 當日解說 ---
def build_daily_commentary_prompt(almanac: Dict, tibetan: Dict) -> str:
    stem_branch = almanac.get("stemBranch") or {}
    lines = [
        f"日期：{almanac.get('date', '')}",
        f"農曆：{almanac.get('lunarMonthDay', '')}",
        f"干支：{stem_branch.get('year', '')} {stem_branch.get('month', '')} {stem_branch.get('day', '')}",
        f"宜：{'、'.join(almanac.get('favorableActivities') or [])}",
        f"忌：{'、'.join(almanac.get('unfavorableActivities') or [])}",
        f"沖煞：沖{almanac.get('clashAnimal', '')} 煞{almanac.get('clashDirection', '')}",
        f"藏曆：{tibetan.get('tibetanLabel', '')}",
        f"佛菩薩聖日：{tibetan.get('observance') or '無'}",
    ]
    return (
        "請根據以下資料分析當日的吉凶：\n"
        + "\n".join(lines)
        + '\n請回傳 JSON 物件，包含三個字串欄位："analysis"（藏曆分析）、'
        '"dharmaAdvice"（修行建議）、"dailyAdvice"（生活建議）。'
    )


def generate_daily_commentary(almanac: Dict, tibetan: Dict, client=None) -> Dict[str, str]:
    """
    Returns:
        Dict[str, str]: {"analysis", "dharmaAdvice", "dailyAdvice"}；三個欄位都一定有內容。

    Raises:
        CommentaryFormatError: 任何一個欄位缺少或是空白。
        CommentaryError (含子類別): 由呼叫者決定改用預設文字。
    """
    prompt = build_daily_commentary_prompt(almanac, tibetan)
    parsed = parse_commentary_json(request_completion(prompt, client=client))

    commentary = {}
    for key in DAILY_COMMENTARY_KEYS:
        value = parsed.get(key)
        if not isinstance(value, str) or not value.strip():
            raise CommentaryFormatError(f"AI 回傳的 JSON 缺少 {key} 欄位")
        commentary[key] = value.strip()
    logger.info(f"已取得 {almanac.get('date', '')} 的 AI 解說。")
    return commentary


# --- 擇日 ---
def find_lucky_dates(event_type: str, month: str, client=None) -> List[Dict]:
    """
    Args:
        event_type (str): 結婚、搬家、開業、出行、裝修、簽約其中之一。
        month (str): YYYY-MM。

    Returns:
        List[Dict]: 每筆為 {"date", "lunarDate", "reason", "rating"}；任何失敗都回傳 []。
    """
    prompt = (
        f"擇日：請在 {month} 中挑選適合「{event_type}」的日子。\n"
        '請回傳 JSON 物件 {"dates": [{"date": "YYYY-MM-DD", "lunarDate": "", "reason": "", "rating": 1-5}]}。'
    )
    try:
        parsed = parse_commentary_json(request_completion(prompt, client=client))
    except CommentaryError as e:
        logger.warning(f"擇日 ({event_type} {month}) 失敗，回傳空列表: {e}")
        return []

    recommendations = []
    for item in parsed.get("dates") or []:
        if not isinstance(item, dict) or not item.get("date"):
            continue
        try:
            rating = int(item.get("rating", 0))
        except (TypeError, ValueError):
            rating = 0
        recommendations.append({
            "date"      : str(item["date"]),
            "lunarDate" : str(item.get("lunarDate") or ""),
            "reason"    : str(item.get("reason") or ""),
            "rating"    : rating,
        })
    return recommendations


# --- 生肖運勢 ---
def get_zodiac_fortune(zodiac: str, date_str: str, client=None) -> Dict:
    """
    Returns:
        Dict: {"zodiac", "daily": {"overall", "wealth", "love", "career", "score"}, "monthly", "elementAnalysis"}

    Raises:
        CommentaryError (含子類別): 不做降級處理。
    """
    prompt = (
        f"運勢：請分析生肖「{zodiac}」在 {date_str} 的運勢。\n"
        '請回傳 JSON 物件 {"zodiac": "", "daily": {"overall": "", "wealth": "", "love": "", '
        '"career": "", "score": 0-100}, "monthly": "", "elementAnalysis": ""}。'
    )
    parsed = parse_commentary_json(request_completion(prompt, client=client))
    daily = parsed.get("daily") if isinstance(parsed.get("daily"), dict) else {}

    try:
        score = int(daily.get("score", 0))
    except (TypeError, ValueError):
        score = 0

    return {
        "zodiac" : parsed.get("zodiac") or zodiac,
        "daily"  : {
            "overall" : str(daily.get("overall") or ""),
            "wealth"  : str(daily.get("wealth") or ""),
            "love"    : str(daily.get("love") or ""),
            "career"  : str(daily.get("career") or ""),
            "score"   : score,
        },
        "monthly"         : str(parsed.get("monthly") or ""),
        "elementAnalysis" : str(parsed.get("elementAnalysis") or ""),
    }
