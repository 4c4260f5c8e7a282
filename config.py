# config.py
"""
集中處理所有配置：
1. 環境變數的讀取，特別是外部農民曆網站、藏曆網站與 AI 文字生成服務的設定。
2. 全局日誌 (logging) 系統的設定，確保所有日誌都有統一的格式和輸出目的地。
3. 快取後端的選擇與鍵值前綴。
"""
import os
import sys
import logging
from dotenv import load_dotenv # 載入 .env 檔案中的環境變數
from logging.handlers import TimedRotatingFileHandler

# --- 載入 .env 檔案中的環境變數 ---
load_dotenv()

# --- 環境變數設定 ---
# 如果環境變數不存在，使用預設值
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "main.log")

# 把字串轉成 logging 模組用的數字等級；如果字串無效，就退回 INFO 等級
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)

# 是否啟用 debug 模式，部署到雲端時預設是 False
IS_DEBUG_MODE = os.getenv("IS_DEBUG_MODE", "False").lower() == "true"

# --- 建立全域 Logger 設定函式 ---
def setup_logging() -> None:
    """
    配置根日誌器，並添加兩個處理器 (handler)：一個輸出到終端機，另一個輸出到 log 檔案。
    整個專案共享相同的設定，各模組只需要 `logging.getLogger(__name__)`。
    """
    root = logging.getLogger()

    # 移除並關閉所有 handler，避免重複設定日誌
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(LOG_LEVEL)

    # 共用的格式：時間 - logger 名稱 - 等級 - 檔案名稱:行號 - 訊息
    fmt = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
    )

    # console handler: 日誌直接輸出到標準輸出 (stdout)
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(LOG_LEVEL)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # rotating file handler: 只有在 ENABLE_FILE_LOG 為 "true" 時才啟用，午夜輪換並保留 7 個備份
    if os.getenv("ENABLE_FILE_LOG", "False").lower() == "true":
        fh = TimedRotatingFileHandler(LOG_FILE, when="midnight", interval=1, backupCount=7, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

setup_logging()
logger = logging.getLogger(__name__)

# --- HTTP 請求共用設定 ---
HTTP_USER_AGENT = os.getenv(
    "HTTP_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

# --- 外部資料來源 ---
# 農民曆網站，以日期 (YYYY-MM-DD) 直接組成網址
ALMANAC_SOURCE_URL_TEMPLATE = os.getenv("ALMANAC_SOURCE_URL_TEMPLATE", "https://www.goodaytw.com/{date}")

# 藏曆年曆頁面，一年一頁；只作為佛菩薩節日的補充資料，預設關閉
TIBETAN_SOURCE_URL_TEMPLATE = os.getenv("TIBETAN_SOURCE_URL_TEMPLATE", "https://zangli.pro/calendar/{year}.html")
ENABLE_TIBETAN_LOOKUP = os.getenv("ENABLE_TIBETAN_LOOKUP", "False").lower() == "true"

# --- AI 文字生成服務 (OpenAI 相容介面) ---
LLM_API_KEY = os.getenv("LLM_API_KEY")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
LLM_MODEL_NAME = os.getenv("LLM_MODEL_NAME", "gemini-1.5-flash")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))

if LLM_API_KEY is None:
    logger.error("環境變數 LLM_API_KEY 未設定。AI 解說功能將改用預設文字。")

# --- 快取設定 ---
# "memory" 為行程內快取；"firestore" 使用 Google Cloud Firestore
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "memory").lower()
CACHE_KEY_PREFIX = os.getenv("CACHE_KEY_PREFIX", "almanac_cache_v5_")
FIRESTORE_CACHE_COLLECTION = os.getenv("FIRESTORE_CACHE_COLLECTION", "almanac_cache")
