# commentary/llm_client.py
"""
快取 OpenAI 相容客戶端，同一組金鑰與網址只建立一次。
重試交由呼叫者（前端）決定，所以客戶端本身不做自動重試。
"""
from functools import lru_cache
from openai import OpenAI

from config import LLM_API_KEY, LLM_BASE_URL, REQUEST_TIMEOUT_SECONDS


@lru_cache(maxsize=8)
def get_llm_client(api_key: str, base_url: str) -> OpenAI:
    """Return a cached OpenAI client for a given key/base URL pair."""
    return OpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=REQUEST_TIMEOUT_SECONDS * 3)


def get_default_llm_client() -> OpenAI | None:
    # 沒有設定金鑰時回傳 None，呼叫端改用預設文字
    if not LLM_API_KEY:
        return None
    return get_llm_client(LLM_API_KEY, LLM_BASE_URL)
