import json
from types import SimpleNamespace

import pytest
import requests


# 定義列表版面的農民曆頁面
DEFINITION_LIST_MARKUP = """
<html><head><style>.x { color: red; }</style></head><body>
<div class="date">2025年01月14日 農曆十二月十五 乙巳蛇年 己丑月 丁未日</div>
<p>子時 23:00-01:00 沖馬 煞南</p>
<dl>
  <dt>宜</dt><dd>祭祀、祈福、餘事勿取</dd>
  <dt>忌</dt><dd>開市 動土</dd>
  <dt>沖</dt><dd>(辛丑)牛 煞西</dd>
  <dt>喜神</dt><dd>正南</dd>
  <dt>財神</dt><dd>東北</dd>
  <dt>吉時</dt><dd>子、丑、卯時、午</dd>
  <dt>彭祖百忌</dt><dd>丁不剃頭  未不服藥</dd>
  <dt>胎神</dt><dd>倉庫門外東南</dd>
</dl>
</body></html>
"""

# 沒有定義列表、只有純文字的頁面
PLAIN_TEXT_MARKUP = (
    "<div>農曆十二月十五 乙巳蛇年 己丑月 丁未日 "
    "宜：祭祀、祈福、餘事勿取 忌：開市、動土 沖：(辛丑)牛 煞西 吉時：子、丑、卯</div>"
)


@pytest.fixture
def definition_list_markup():
    return DEFINITION_LIST_MARKUP


@pytest.fixture
def plain_text_markup():
    return PLAIN_TEXT_MARKUP


# --- 假的 OpenAI 相容客戶端 ---
class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLMClient:
    def __init__(self, content=None, error=None):
        self.chat = SimpleNamespace(completions=FakeCompletions(content, error))

    @property
    def calls(self):
        return self.chat.completions.calls


@pytest.fixture
def make_llm_client():
    def factory(content=None, error=None):
        if isinstance(content, (dict, list)):
            content = json.dumps(content, ensure_ascii=False)
        return FakeLLMClient(content=content, error=error)
    return factory


DAILY_COMMENTARY = {
    "analysis": "今日為阿彌陀佛節日，宜念佛。",
    "dharmaAdvice": "持誦阿彌陀佛聖號。",
    "dailyAdvice": "宜祭祀祈福，不宜開市。",
}


@pytest.fixture
def daily_commentary():
    return dict(DAILY_COMMENTARY)


# --- 假的 requests 回應與 session ---
class FakeResponse:
    def __init__(self, text="", status_code=200, encoding="utf-8"):
        self.text = text
        self.status_code = status_code
        self.encoding = encoding
        self.apparent_encoding = "utf-8"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_session():
    def factory(text="", status_code=200, encoding="utf-8", error=None):
        return FakeSession(FakeResponse(text, status_code, encoding), error)
    return factory
