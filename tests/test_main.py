import pytest

import main
from advisory import daily_almanac_aggregator
from commentary import commentary_service
from utils.cache_store import InMemoryCacheStore
from utils.errors import FetchError, CommentaryRateLimitError


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "CACHE_STORE", InMemoryCacheStore())
    monkeypatch.setattr(daily_almanac_aggregator, "ENABLE_TIBETAN_LOOKUP", False)
    main.app.config["TESTING"] = True
    return main.app.test_client()


@pytest.fixture
def almanac_site(monkeypatch, definition_list_markup):
    requested = []

    def fake_fetch(date_str, session=None):
        requested.append(date_str)
        return definition_list_markup

    monkeypatch.setattr(daily_almanac_aggregator, "fetch_almanac_html", fake_fetch)
    monkeypatch.setattr(main, "fetch_almanac_html", fake_fetch)
    return requested


@pytest.fixture
def llm(monkeypatch, make_llm_client):
    def install(content=None, error=None):
        fake = make_llm_client(content, error)
        monkeypatch.setattr(commentary_service, "get_default_llm_client", lambda: fake)
        return fake
    return install


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_almanac_endpoint(client, almanac_site):
    response = client.get("/api/almanac?date=2025-01-30")

    assert response.status_code == 200
    body = response.get_json()
    assert body["favorableActivities"] == ["祭祀", "祈福"]
    assert len(body["hourlyAdvisory"]) == 12
    assert almanac_site == ["2025-01-30"]


def test_invalid_date_is_400(client, almanac_site):
    response = client.get("/api/almanac?date=2025-3-1")

    assert response.status_code == 400
    assert response.get_json() == {"error": "日期格式錯誤，請使用 YYYY-MM-DD"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert almanac_site == []


def test_fetch_failure_is_502(client, monkeypatch):
    def failing_fetch(date_str, session=None):
        raise FetchError("HTTP 503", url="https://example.test", status_code=503)

    monkeypatch.setattr(daily_almanac_aggregator, "fetch_almanac_html", failing_fetch)
    response = client.get("/api/almanac?date=2025-01-30")

    assert response.status_code == 502
    assert "error" in response.get_json()


def test_raw_markup_passthrough(client, almanac_site, definition_list_markup):
    response = client.get("/api/fetch-almanac?date=2025-01-30")

    assert response.status_code == 200
    assert response.content_type.startswith("text/html")
    assert response.get_data(as_text=True) == definition_list_markup


def test_tibetan_endpoint(client):
    response = client.get("/api/tibetan?date=2025-01-30")

    body = response.get_json()
    assert body["tibetanDayName"] == "十五"
    assert body["meritMultiplier"] == "百萬倍"


def test_daily_endpoint(client, almanac_site, llm, daily_commentary):
    llm(daily_commentary)

    response = client.get("/api/daily?date=2025-01-30")

    body = response.get_json()
    assert response.status_code == 200
    assert body["commentaryStatus"] == "ok"
    assert body["tibetan"]["analysis"] == daily_commentary["analysis"]

    client.get("/api/daily?date=2025-01-30")
    assert almanac_site == ["2025-01-30"]

    client.get("/api/daily?date=2025-01-30&refresh=1")
    assert almanac_site == ["2025-01-30", "2025-01-30"]


def test_daily_endpoint_rate_limited(client, almanac_site, monkeypatch):
    def raise_rate_limit(*args, **kwargs):
        raise CommentaryRateLimitError("busy", retry_after=40)

    monkeypatch.setattr(daily_almanac_aggregator, "generate_daily_commentary", raise_rate_limit)
    response = client.get("/api/daily?date=2025-01-30")

    assert response.status_code == 200
    assert response.headers["Retry-After"] == "40"
    assert response.get_json()["commentaryStatus"] == "rate_limited"
    assert response.get_json()["dailyAdvice"] == "請參考農民曆宜忌列表"


def test_lucky_dates(client, llm):
    llm({"dates": [{"date": "2025-03-08", "lunarDate": "二月初九", "reason": "天德合日", "rating": 5}]})

    response = client.get("/api/lucky-dates", query_string={"event": "結婚", "month": "2025-03"})

    assert response.status_code == 200
    assert response.get_json()[0]["date"] == "2025-03-08"


def test_lucky_dates_rejects_unknown_event(client):
    assert client.get("/api/lucky-dates", query_string={"event": "考試", "month": "2025-03"}).status_code == 400
    assert client.get("/api/lucky-dates", query_string={"event": "結婚", "month": "2025-3"}).status_code == 400


def test_zodiac_fortune_rate_limited(client, llm):
    def raise_rate_limit(*args, **kwargs):
        raise CommentaryRateLimitError("busy", retry_after=15)

    fake = llm()
    fake.chat.completions.create = raise_rate_limit

    response = client.get("/api/zodiac-fortune", query_string={"zodiac": "龍", "date": "2025-03-01"})

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "15"


def test_zodiac_fortune_unknown_zodiac(client):
    assert client.get("/api/zodiac-fortune", query_string={"zodiac": "貓", "date": "2025-03-01"}).status_code == 400
