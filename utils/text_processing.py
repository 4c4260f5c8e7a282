# utils/text_processing.py
"""
文字處理工具模組，標準化和清理從外部網頁取得的文字資料。
1. `split_items`：把「祭祀、祈福、餘事勿取」這類字串切成乾淨的列表。
2. `markup_to_text`：用 BeautifulSoup 去掉 HTML 標籤，得到可以直接用正則表達式比對的純文字。
3. `to_traditional`：把藏曆網站上的簡體字轉為繁體字。
"""
import re
from bs4 import BeautifulSoup

# 全形逗號、頓號、空白、間隔號
LIST_SEPARATOR_PATTERN = re.compile(r"[，、\s·・]+")

# 農民曆常見的套語，不是實際的活動名稱
BOILERPLATE_PHRASE = "餘事勿取"

_WHITESPACE_PATTERN = re.compile(r"\s+")

# 藏曆網站只用到少數字，逐字對照即可
_SIMPLIFIED_TO_TRADITIONAL = str.maketrans({
    "弥": "彌", "药": "藥", "释": "釋", "观": "觀", "萨": "薩",
    "莲": "蓮", "师": "師", "荟": "薈", "禅": "禪", "胜": "勝",
    "节": "節", "变": "變", "转": "轉", "轮": "輪", "诞": "誕",
    "万": "萬", "亿": "億", "恶": "惡", "环": "環", "马": "馬",
    "龙": "龍", "鸡": "雞", "猪": "豬", "铁": "鐵", "闰": "閏",
    "历": "曆", "满": "滿", "怀": "懷", "灯": "燈", "愿": "願",
})


def split_items(raw: str) -> list[str]:
    """
    依分隔符號切割字串，去除前後空白，並丟掉空字串與「餘事勿取」。
    不主動去除重複項目。
    """
    if not raw:
        return []
    items = []
    for piece in LIST_SEPARATOR_PATTERN.split(raw):
        piece = piece.strip()
        if piece and piece != BOILERPLATE_PHRASE:
            items.append(piece)
    return items


def collapse_whitespace(text: str) -> str:
    if not text:
        return ""
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def markup_to_text(markup: str) -> str:
    """
    將 HTML 轉成以空白分隔的單行純文字，標籤之間以空白隔開，避免相鄰欄位黏在一起。
    """
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return collapse_whitespace(soup.get_text(" "))


def to_traditional(text: str) -> str:
    if not text:
        return text
    return text.translate(_SIMPLIFIED_TO_TRADITIONAL)
