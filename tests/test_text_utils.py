from utils.text_utils import (
    escape_xml_text,
    format_date_range,
    format_year_month,
    normalize_dashes,
    post_process_cover_letter,
    sanitize_filename,
    truncate,
)


def test_normalize_dashes():
    assert normalize_dashes("2019\u20132021 \u2014 remote") == "2019-2021 - remote"
    assert normalize_dashes(None) == ""


def test_escape_xml_text():
    assert escape_xml_text('R&D <team> "quoted"') == 'R&amp;D &lt;team&gt; &quot;quoted&quot;'


def test_post_process_cover_letter():
    text = "Dear team,\n\n1. Cut costs by 30 %\n- Led migrations\n\n\n\nBest,\nJane"
    assert post_process_cover_letter(text) == "Dear team,\n\nCut costs by 30%\nLed migrations\n\nBest,\nJane"


def test_truncate_on_word_boundary():
    assert truncate("short", 10) == "short"
    assert truncate("alpha beta gamma delta", 12) == "alpha beta..."


def test_sanitize_filename():
    assert sanitize_filename("Senior Dev @ Acme, Inc.") == "Senior_Dev___Acme__Inc_"


def test_format_dates():
    assert format_year_month("2021-03") == "Mar 2021"
    assert format_year_month(None) == ""
    assert format_date_range("2020-01", None, True) == "Jan 2020 - Present"
    assert format_date_range("2020-01", "2021-12") == "Jan 2020 - Dec 2021"
    assert format_date_range("2020-01", None) == "Jan 2020"
