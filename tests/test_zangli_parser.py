from datetime import date

from tibetan_calendar.tibetan_calculator import convert_to_tibetan_date
from tibetan_calendar.zangli_parser import parse_zangli_day, enrich_tibetan_record
from tibetan_calendar import zangli_api
from utils.errors import FetchError

ZANGLI_MARKUP = """
<h2>2025年1月</h2>
<table>
  <tr><td>2</td><td>初二</td></tr>
  <tr><td>3</td><td>十五 阿弥陀佛节日 作何善恶成百万倍 月全食</td></tr>
  <tr><td>4</td><td>十六</td></tr>
</table>
<h2>2025年2月</h2>
<table>
  <tr><td>3</td><td>初八 药师佛节日</td></tr>
</table>
"""


def test_full_moon_row():
    result = parse_zangli_day(ZANGLI_MARKUP, 2025, 1, 3)

    assert result["tibetanDay"] == "十五"
    assert result["observance"] == "阿彌陀佛節日、月圓日、布薩日"
    assert result["meritMultiplier"] == "百萬倍"
    assert result["specialEvent"] == "月全食"


def test_plain_row_has_no_observance():
    result = parse_zangli_day(ZANGLI_MARKUP, 2025, 1, 2)

    assert result["tibetanDay"] == "初二"
    assert result["observance"] is None
    assert result["meritMultiplier"] is None


def test_rows_are_looked_up_within_the_month():
    result = parse_zangli_day(ZANGLI_MARKUP, 2025, 2, 3)
    assert result["observance"] == "藥師佛節日、布薩日"


def test_missing_month_returns_none():
    assert parse_zangli_day(ZANGLI_MARKUP, 2025, 5, 1) is None


def test_enrich_keeps_original_record():
    record = convert_to_tibetan_date("2025-01-17")
    lookup = {"tibetanDay": "十五", "observance": "阿彌陀佛節日", "meritMultiplier": "百萬倍", "specialEvent": "月全食"}

    enriched = enrich_tibetan_record(record, lookup)

    assert enriched["observance"] == "阿彌陀佛節日"
    assert enriched["meritMultiplier"] == "百萬倍"
    assert enriched["specialEvent"] == "月全食"
    assert record["observance"] is None
    assert enrich_tibetan_record(record, None) == record


def test_lookup_failure_returns_none(make_session):
    session = make_session(status_code=503)
    assert zangli_api.lookup_tibetan_day(date(2025, 1, 3), session=session) is None


def test_lookup_success(make_session):
    session = make_session(text=ZANGLI_MARKUP)
    result = zangli_api.lookup_tibetan_day(date(2025, 1, 3), session=session)

    assert result["tibetanDay"] == "十五"
    assert session.requests[0]["url"].endswith("2025.html")


def test_fetch_raises_fetch_error(make_session):
    session = make_session(status_code=404)
    try:
        zangli_api.fetch_tibetan_calendar_html(2025, session=session)
    except FetchError as e:
        assert e.status_code == 404
    else:
        raise AssertionError("FetchError not raised")
