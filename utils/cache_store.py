# utils/cache_store.py
"""
當日建議紀錄的快取。
以字串鍵讀寫 JSON 相容的值，呼叫者只依賴 `get` 與 `set`，不需要知道背後是記憶體還是 Firestore。
主要職責：
1. `InMemoryCacheStore`：預設後端，只存在目前的程序裡。
2. `FirestoreCacheStore`：使用 Google Application Default Credentials (ADC) 連線 Firestore，
   讓多個執行個體 (如 Cloud Run) 共用快取。
3. `create_cache_store`：依設定建立對應的後端。
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from config import CACHE_BACKEND, FIRESTORE_CACHE_COLLECTION

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """快取介面。找不到時 `get` 回傳 None。"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryCacheStore(CacheStore):
    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value


# --- Firestore 後端 ---
class FirestoreCacheStore(CacheStore):
    """每個快取鍵對應一份文件，內容存在 "value" 欄位。"""

    def __init__(self, collection_name: str = FIRESTORE_CACHE_COLLECTION, client=None):
        if client is None:
            client = _get_firestore_client()
        self._collection = client.collection(collection_name)

    def get(self, key: str) -> Optional[Any]:
        try:
            snapshot = self._collection.document(key).get()
        except Exception as e:
            logger.error(f"讀取 Firestore 快取 {key} 失敗: {e}", exc_info=True)
            return None

        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return data.get("value")

    def set(self, key: str, value: Any) -> None:
        try:
            self._collection.document(key).set({"value": value})
            logger.debug(f"已寫入 Firestore 快取 {key}")
        except Exception as e:
            logger.error(f"寫入 Firestore 快取 {key} 失敗: {e}", exc_info=True)


def _get_firestore_client():
    """初始化 Firebase Admin SDK（只做一次），回傳 Firestore 客戶端。"""
    import firebase_admin
    from firebase_admin import firestore
    from firebase_admin.credentials import ApplicationDefault

    if not firebase_admin._apps:
        try:
            firebase_admin.initialize_app(ApplicationDefault())
            logger.info("Firebase Firestore 連線成功。")
        except Exception as e:
            logger.error(f"Firebase 連線失敗: {e}", exc_info=True)
            raise RuntimeError("無法連線到 Firebase Firestore") from e
    return firestore.client()


def create_cache_store(backend: str = CACHE_BACKEND) -> CacheStore:
    if backend == "firestore":
        logger.info(f"使用 Firestore 快取 (collection: {FIRESTORE_CACHE_COLLECTION})")
        return FirestoreCacheStore()
    if backend != "memory":
        logger.warning(f"未知的快取後端 '{backend}'，改用記憶體快取。")
    return InMemoryCacheStore()
