# tibetan_calendar/tibetan_constants.py
# 藏曆換算用的固定對照表

# 藏曆年份對照（簡化版，只涵蓋有限年份）
TIBETAN_YEARS = {
    2024 : "木龍年",
    2025 : "木蛇年",
    2026 : "火馬年",
    2027 : "火羊年",
    2028 : "土猴年",
    2029 : "土雞年",
    2030 : "鐵狗年",
    2031 : "鐵豬年",
}

# 藏曆新年與公曆的差距，以固定天數近似
TIBETAN_DAY_OFFSET = 45
TIBETAN_YEAR_DAYS = 360
TIBETAN_MONTH_DAYS = 30

TIBETAN_MONTH_NAMES = (
    "正月", "二月", "三月", "四月", "五月", "六月",
    "七月", "八月", "九月", "十月", "十一月", "十二月",
)

DIGIT_NAMES = ("", "一", "二", "三", "四", "五", "六", "七", "八", "九")

# 佛菩薩聖日，以藏曆日為鍵
BUDDHA_DAYS = {
    1  : "禪定勝王佛節日 · 作何善惡成百倍",
    8  : "藥師佛節日 · 作何善惡成千倍",
    10 : "蓮師薈供日 · 作何善惡成十萬倍",
    15 : "阿彌陀佛節日 · 作何善惡成百萬倍",
    18 : "觀音菩薩節日 · 作何善惡成千萬倍",
    21 : "地藏王菩薩節日 · 作何善惡成億倍",
    25 : "空行母薈供日",
    30 : "釋迦牟尼佛節日 · 作何善惡成九億倍",
}

# 二十八星宿
CONSTELLATIONS = (
    "角", "亢", "氐", "房", "心", "尾", "箕",
    "斗", "牛", "女", "虛", "危", "室", "壁",
    "奎", "婁", "胃", "昴", "畢", "觜", "參",
    "井", "鬼", "柳", "星", "張", "翼", "軫",
)

# 二十七瑜伽
YOGAS = (
    "駿足", "福德", "成就", "吉祥", "光輝", "金剛", "毒害",
    "持節", "事業", "奮威", "妙花", "善相", "堅固", "正念",
    "平順", "懷德", "幻惑", "極惡", "善戲", "調伏", "鐵鉤",
    "熾盛", "分散", "常住", "具光", "和合", "貪欲",
)

# --- 藏曆傳統宜忌 ---
PRACTICE_DAYS = (1, 8, 10, 15, 25, 30)
HOUSEHOLD_DAYS = (5, 12, 20, 28)
CAUTION_DAYS = (9, 19, 29)
RESTRAINT_DAYS = (4, 14, 24)

PRACTICE_ACTIVITIES = ("修法", "供養", "放生", "佈施", "持咒", "誦經")
HOUSEHOLD_ACTIVITIES = ("剪髮", "沐浴", "修房", "遷居")
ORDINARY_ACTIVITIES = ("日常修持", "行善積德")
CAUTION_AVOIDANCES = ("重要決策", "簽約", "遠行")
RESTRAINT_AVOIDANCES = ("殺生", "飲酒", "爭執")

# 剪髮吉凶
HAIRCUT_ADVICE = {
    1  : "增長壽命",
    2  : "招致疾病",
    3  : "增長財富",
    4  : "招損財產",
    5  : "增益智慧",
    8  : "吉祥如意",
    9  : "招邪惡事",
    10 : "增長福德",
    11 : "減損壽命",
    13 : "修持順緣",
    15 : "增上福報",
    18 : "增益財富",
    21 : "招致疾病",
    22 : "財富增長",
    25 : "獲得成就",
    27 : "招致惡運",
    30 : "招致爭鬥",
}
DEFAULT_HAIRCUT_ADVICE = "平常日，可剪可不剪"

WIND_HORSE_PRACTICE_ADVICE = "極吉：懸掛經幡、升起風馬，功德倍增"
WIND_HORSE_HOUSEHOLD_ADVICE = "吉：適合懸掛新經幡"
WIND_HORSE_CAUTION_ADVICE = "不宜：暫緩懸掛"
WIND_HORSE_ORDINARY_ADVICE = "平常日：可懸掛"
