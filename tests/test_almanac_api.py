import pytest
import requests

from almanac.almanac_api import fetch_almanac_html, build_almanac_url
from utils.errors import FetchError


def test_url_is_templated_by_date():
    assert build_almanac_url("2025-01-14").endswith("2025-01-14")


def test_fetch_returns_markup(make_session):
    session = make_session(text="<html>宜 祭祀</html>")

    assert fetch_almanac_html("2025-01-14", session=session) == "<html>宜 祭祀</html>"
    sent = session.requests[0]
    assert sent["url"] == build_almanac_url("2025-01-14")
    assert "User-Agent" in sent["headers"]
    assert sent["timeout"] > 0


def test_undeclared_encoding_is_replaced(make_session):
    session = make_session(text="<html></html>", encoding="ISO-8859-1")
    fetch_almanac_html("2025-01-14", session=session)
    assert session.response.encoding == "utf-8"


def test_non_success_status_raises(make_session):
    session = make_session(status_code=500)

    with pytest.raises(FetchError) as excinfo:
        fetch_almanac_html("2025-01-14", session=session)
    assert excinfo.value.status_code == 500
    assert excinfo.value.url == build_almanac_url("2025-01-14")


@pytest.mark.parametrize("error", [
    requests.exceptions.Timeout("timed out"),
    requests.exceptions.ConnectionError("refused"),
])
def test_transport_errors_raise(make_session, error):
    session = make_session(error=error)

    with pytest.raises(FetchError) as excinfo:
        fetch_almanac_html("2025-01-14", session=session)
    assert excinfo.value.status_code is None
