# almanac/almanac_constants.py
# 存放農民曆解析與時辰吉凶相關的靜態常數和預設值

# 天干、地支、生肖
HEAVENLY_STEMS = "甲乙丙丁戊己庚辛壬癸"
EARTHLY_BRANCHES = "子丑寅卯辰巳午未申酉戌亥"
ZODIAC_ANIMALS = "鼠牛虎兔龍蛇馬羊猴雞狗豬"

# 十二時辰，順序固定
HOUR_BRANCHES = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

# 每個時辰對應的時鐘區間
HOUR_TIME_RANGES = {
    "子" : "23:00-01:00",
    "丑" : "01:00-03:00",
    "寅" : "03:00-05:00",
    "卯" : "05:00-07:00",
    "辰" : "07:00-09:00",
    "巳" : "09:00-11:00",
    "午" : "11:00-13:00",
    "未" : "13:00-15:00",
    "申" : "15:00-17:00",
    "酉" : "17:00-19:00",
    "戌" : "19:00-21:00",
    "亥" : "21:00-23:00",
}

# 吉時與非吉時的固定宜忌
LUCKY_HOUR_ACTIVITIES = ("祈福", "求財", "出行")
UNLUCKY_HOUR_ACTIVITIES = ("動土", "安葬")

# 二十四節氣（繁體）
SOLAR_TERM_NAMES = (
    "小寒", "大寒", "立春", "雨水", "驚蟄", "春分",
    "清明", "穀雨", "立夏", "小滿", "芒種", "夏至",
    "小暑", "大暑", "立秋", "處暑", "白露", "秋分",
    "寒露", "霜降", "立冬", "小雪", "大雪", "冬至",
)

# --- 各欄位擷取失敗時的預設值 ---
DEFAULT_LUNAR_MONTH_DAY = "農曆日期"
DEFAULT_STEM_BRANCH = {
    "year"  : "年",
    "month" : "月",
    "day"   : "日",
}
DEFAULT_ZODIAC_ANIMAL = ""
DEFAULT_FAVORABLE_ACTIVITIES = ("祭祀", "祈福")
DEFAULT_UNFAVORABLE_ACTIVITIES = ("開市", "動土")
DEFAULT_CLASH_ANIMAL = ""
DEFAULT_CLASH_DIRECTION = ""
DEFAULT_DIRECTIONAL_SPIRITS = {
    "joy"     : "東方",
    "wealth"  : "西方",
    "fortune" : "南方",
}
DEFAULT_FETAL_SPIRIT_LOCATION = ""
DEFAULT_FAVORABLE_HOURS = ("子", "丑", "寅")
DEFAULT_HUNDRED_TABOOS = ""
