import httpx
import openai
import pytest

from advisory import daily_almanac_aggregator
from advisory.daily_almanac_aggregator import get_daily_almanac, get_tibetan_record, build_cache_key
from utils.cache_store import InMemoryCacheStore
from utils.errors import FetchError, InvalidDateError


@pytest.fixture(autouse=True)
def no_tibetan_lookup(monkeypatch):
    monkeypatch.setattr(daily_almanac_aggregator, "ENABLE_TIBETAN_LOOKUP", False)


def _rate_limit_error():
    request = httpx.Request("POST", "https://llm.example/chat/completions")
    response = httpx.Response(429, headers={"retry-after": "20"}, request=request)
    return openai.RateLimitError("Too Many Requests", response=response, body=None)


def test_complete_result_is_cached(make_session, make_llm_client, definition_list_markup, daily_commentary):
    cache = InMemoryCacheStore()
    session = make_session(text=definition_list_markup)
    client = make_llm_client(daily_commentary)

    advisory = get_daily_almanac("2025-01-30", cache, client=client, session=session)

    assert advisory["commentaryStatus"] == "ok"
    assert advisory["auspicious"] == ["祭祀", "祈福"]
    assert advisory["tibetan"]["dayName"] == "十五"
    assert cache.get(build_cache_key("2025-01-30")) == advisory

    # 第二次直接讀快取，不再發出請求
    assert get_daily_almanac("2025-01-30", cache, client=client, session=session) == advisory
    assert len(session.requests) == 1
    assert len(client.calls) == 1


def test_force_refresh_bypasses_cache(make_session, make_llm_client, definition_list_markup, daily_commentary):
    cache = InMemoryCacheStore()
    cache.set(build_cache_key("2025-01-30"), {"stale": True})
    session = make_session(text=definition_list_markup)

    advisory = get_daily_almanac(
        "2025-01-30", cache, client=make_llm_client(daily_commentary), session=session, force_refresh=True
    )

    assert "stale" not in advisory
    assert cache.get(build_cache_key("2025-01-30")) == advisory


def test_malformed_commentary_degrades(make_session, make_llm_client, definition_list_markup):
    cache = InMemoryCacheStore()

    advisory = get_daily_almanac(
        "2025-01-30", cache, client=make_llm_client("今日大吉"), session=make_session(text=definition_list_markup)
    )

    assert advisory["commentaryStatus"] == "unavailable"
    assert advisory["dailyAdvice"] == "請參考農民曆宜忌列表"
    assert advisory["auspicious"] == ["祭祀", "祈福"]
    assert cache.get(build_cache_key("2025-01-30")) is None


def test_rate_limit_degrades_with_retry_after(make_session, make_llm_client, definition_list_markup):
    cache = InMemoryCacheStore()

    advisory = get_daily_almanac(
        "2025-01-30", cache,
        client=make_llm_client(error=_rate_limit_error()),
        session=make_session(text=definition_list_markup),
    )

    assert advisory["commentaryStatus"] == "rate_limited"
    assert advisory["retryAfter"] == 20
    assert cache.get(build_cache_key("2025-01-30")) is None


def test_fetch_error_propagates(make_session, make_llm_client):
    with pytest.raises(FetchError):
        get_daily_almanac(
            "2025-01-30", InMemoryCacheStore(),
            client=make_llm_client({}), session=make_session(status_code=503),
        )


def test_invalid_date_is_rejected_before_fetch(make_session):
    session = make_session(text="")
    with pytest.raises(InvalidDateError):
        get_daily_almanac("2025-1-30", InMemoryCacheStore(), session=session)
    assert session.requests == []


def test_tibetan_record_with_failed_lookup_stands_alone(make_session):
    session = make_session(status_code=500)
    record = get_tibetan_record("2025-01-30", session=session, enable_lookup=True)

    assert record["observance"].startswith("阿彌陀佛")
    assert len(session.requests) == 1


@pytest.mark.parametrize("content", [{"foo": "bar"}, {"analysis": "吉日"}])
def test_incomplete_commentary_is_not_cached(make_session, make_llm_client, definition_list_markup, content):
    cache = InMemoryCacheStore()

    advisory = get_daily_almanac(
        "2025-01-30", cache, client=make_llm_client(content), session=make_session(text=definition_list_markup)
    )

    assert advisory["commentaryStatus"] == "unavailable"
    assert advisory["tibetan"]["analysis"] != "吉日"
    assert cache.get(build_cache_key("2025-01-30")) is None
