from utils.text_processing import split_items, markup_to_text, to_traditional, collapse_whitespace


def test_split_on_all_separators():
    assert split_items("祭祀，祈福、出行 嫁娶·納采・入宅") == ["祭祀", "祈福", "出行", "嫁娶", "納采", "入宅"]


def test_split_drops_empty_and_boilerplate():
    assert split_items("  祭祀、、餘事勿取 ") == ["祭祀"]
    assert split_items("餘事勿取") == []
    assert split_items("") == []
    assert split_items(None) == []


def test_split_keeps_duplicates():
    assert split_items("祭祀、祭祀") == ["祭祀", "祭祀"]


def test_markup_to_text_separates_tags():
    markup = "<script>var x = 1;</script><dt>宜</dt><dd>祭祀</dd>\n<p>忌</p>"
    assert markup_to_text(markup) == "宜 祭祀 忌"
    assert markup_to_text("") == ""


def test_collapse_whitespace():
    assert collapse_whitespace(" a \n\t b ") == "a b"
    assert collapse_whitespace(None) == ""


def test_to_traditional():
    assert to_traditional("阿弥陀佛节日 作何善恶成百万倍") == "阿彌陀佛節日 作何善惡成百萬倍"
    assert to_traditional("") == ""
    assert to_traditional(None) is None
