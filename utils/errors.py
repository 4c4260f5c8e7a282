# utils/errors.py
"""
專案共用的例外類別。
- 傳輸失敗 (FetchError) 一律往上拋，由呼叫者決定重試或改用快取。
- 欄位擷取失敗不是錯誤，由解析器的預設值處理，所以這裡沒有對應的類別。
- AI 解說相關的錯誤可以被復原，其中頻率限制 (CommentaryRateLimitError) 獨立成一類，讓呼叫者可以進入冷卻時間。
"""
from typing import Optional


class AlmanacServiceError(Exception):
    """所有服務層錯誤的基底類別。"""


class InvalidDateError(AlmanacServiceError, ValueError):
    """日期字串不是 YYYY-MM-DD 格式，或不是有效的日期。"""


class FetchError(AlmanacServiceError):
    """向外部網站取得資料失敗（連線錯誤、逾時或非 2xx 狀態碼）。"""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CommentaryError(AlmanacServiceError):
    """AI 文字生成服務呼叫失敗。"""


class CommentaryFormatError(CommentaryError):
    """AI 回傳的文字無法解析成 JSON 物件。"""


class CommentaryRateLimitError(CommentaryError):
    """AI 服務回報流量上限，呼叫者應該等待 retry_after 秒後再試。"""

    def __init__(self, message: str, retry_after: int = 45):
        super().__init__(message)
        self.retry_after = retry_after
