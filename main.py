# main.py
"""
農民曆與藏曆服務的主入口檔案。
使用 Flask 框架建立一個 Web 伺服器，提供前端查詢用的 JSON API。
主要職責：
1. 建立 Flask 應用程式與快取實例（快取由這一層持有，再傳給聚合器）。
2. 驗證查詢參數，把服務層的例外轉成對應的 HTTP 狀態碼與 JSON 錯誤訊息。
3. 在每個回應加上 CORS 標頭，讓瀏覽器前端可以直接呼叫。
業務邏輯都在各功能模組中，這裡只做轉接。
"""
import os
import logging
from flask import Flask, request, jsonify

from config import IS_DEBUG_MODE, CACHE_BACKEND

from almanac.almanac_api import fetch_almanac_html
from advisory.daily_almanac_aggregator import get_almanac_record, get_tibetan_record, get_daily_almanac
from commentary.commentary_service import find_lucky_dates, get_zodiac_fortune, EVENT_TYPES, ZODIAC_LIST
from utils.cache_store import create_cache_store
from utils.date_utils import validate_date_string, INVALID_DATE_MESSAGE
from utils.errors import InvalidDateError, FetchError, CommentaryError, CommentaryRateLimitError

logger = logging.getLogger(__name__)

logger.info("程式開始啟動...")

app = Flask(__name__)
app.json.ensure_ascii = False

# 快取實例只在這裡建立一次
CACHE_STORE = create_cache_store(CACHE_BACKEND)
logger.info("Flask App 與快取實例化成功。")


# --- CORS ---
@app.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


# --- 共用錯誤回應 ---
def _error(message: str, status: int):
    return jsonify({"error": message}), status


@app.errorhandler(InvalidDateError)
def handle_invalid_date(e):
    logger.warning(f"日期參數錯誤: {e}")
    return _error(INVALID_DATE_MESSAGE, 400)


@app.errorhandler(FetchError)
def handle_fetch_error(e):
    logger.error(f"取得外部資料失敗 ({e.url}): {e}", exc_info=True)
    return _error("無法取得農民曆資料，請稍後再試", 502)


@app.errorhandler(CommentaryRateLimitError)
def handle_rate_limit(e):
    logger.warning(f"AI 服務流量上限，{e.retry_after} 秒後再試。")
    response, status = _error("AI 服務忙碌中，請稍後再試", 429)
    response.headers["Retry-After"] = str(e.retry_after)
    return response, status


@app.errorhandler(CommentaryError)
def handle_commentary_error(e):
    logger.error(f"AI 服務錯誤: {e}", exc_info=True)
    return _error("AI 服務暫時無法使用", 503)


# --- 健康檢查路由 ---
@app.route("/health")
def health_check():
    return "OK", 200


# --- 農民曆 ---
@app.route("/api/almanac", methods=["GET"])
def api_almanac():
    date_str = request.args.get("date", "")
    return jsonify(get_almanac_record(date_str))


# 原始網頁直接轉送，給前端或除錯使用
@app.route("/api/fetch-almanac", methods=["GET"])
def api_fetch_almanac():
    target_date = validate_date_string(request.args.get("date", ""))
    markup = fetch_almanac_html(target_date.isoformat())
    return markup, 200, {"Content-Type": "text/html; charset=utf-8"}


# --- 藏曆 ---
@app.route("/api/tibetan", methods=["GET"])
def api_tibetan():
    date_str = request.args.get("date", "")
    return jsonify(get_tibetan_record(date_str))


# --- 當日建議 ---
@app.route("/api/daily", methods=["GET"])
def api_daily():
    date_str = request.args.get("date", "")
    force_refresh = request.args.get("refresh", "") in ("1", "true")
    advisory = get_daily_almanac(date_str, CACHE_STORE, force_refresh=force_refresh)

    response = jsonify(advisory)
    if advisory.get("commentaryStatus") == "rate_limited" and advisory.get("retryAfter"):
        response.headers["Retry-After"] = str(advisory["retryAfter"])
    return response


# --- 擇日 ---
@app.route("/api/lucky-dates", methods=["GET"])
def api_lucky_dates():
    event_type = request.args.get("event", "")
    month = request.args.get("month", "")
    if event_type not in EVENT_TYPES:
        return _error(f"不支援的事件類型，請使用：{'、'.join(EVENT_TYPES)}", 400)
    # 月份以當月一日驗證
    validate_date_string(f"{month}-01")
    return jsonify(find_lucky_dates(event_type, month))


# --- 生肖運勢 ---
@app.route("/api/zodiac-fortune", methods=["GET"])
def api_zodiac_fortune():
    zodiac = request.args.get("zodiac", "")
    if zodiac not in ZODIAC_LIST:
        return _error(f"不支援的生肖，請使用：{'、'.join(ZODIAC_LIST)}", 400)
    target_date = validate_date_string(request.args.get("date", ""))
    return jsonify(get_zodiac_fortune(zodiac, target_date.isoformat()))


# --- 啟動 Flask ---
# 本機測試才用 Flask，部署到雲端用 gunicorn 伺服器
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port, debug=IS_DEBUG_MODE)
