"""Tests for description sanitizing and word trimming."""

from topic_rss.models import FilterConfig
from topic_rss.sanitizer import sanitize_description, strip_markup, trim_words


def test_removes_photo_credit():
    """General credit patterns are stripped and spacing repaired"""
    text = "Great win tonight. Photo by John Smith. More to come."
    assert sanitize_description(text, FilterConfig()) == "Great win tonight. More to come."


def test_removes_each_general_pattern():
    """All built-in boilerplate patterns are case-insensitive"""
    config = FilterConfig()
    assert sanitize_description("Lead. PHOTO: Jane Doe. Tail", config) == "Lead. Tail"
    assert sanitize_description("Lead. Credit: Team Staff. Tail", config) == "Lead. Tail"
    assert sanitize_description("Lead. Photo credit: Someone. Tail", config) == "Lead. Tail"
    assert sanitize_description("Lead via Getty Images. Tail", config) == "Lead Tail"
    assert sanitize_description("Lead AP Photo/Charles Krupa. Tail", config) == "Lead Tail"


def test_custom_patterns_are_literal_and_case_insensitive():
    """Custom lines match verbatim, blank lines are ignored"""
    config = FilterConfig(custom_filter_patterns=("Sponsored content", "   ", "a.b", "(ad)"))
    text = "Read this. SPONSORED CONTENT axb. Buy now (ad) today"
    assert sanitize_description(text, config) == "Read this. axb. Buy now today"


def test_whitespace_is_collapsed_and_trimmed():
    assert sanitize_description("  a \n\n b  ", FilterConfig()) == "a b"
    assert sanitize_description("", FilterConfig()) == ""


def test_sanitize_is_idempotent_when_removal_splices_a_match():
    """Removing one credit can expose another; the result is still a fixed point"""
    config = FilterConfig()
    text = "PhoPhoto by X.to by Y. End"
    once = sanitize_description(text, config)
    assert once == "End"
    assert sanitize_description(once, config) == once


def test_sanitize_is_idempotent_on_plain_text():
    config = FilterConfig(custom_filter_patterns=("Advertisement",))
    text = "Advertisement  The   Bruins   won. Photo by A. B."
    once = sanitize_description(text, config)
    assert sanitize_description(once, config) == once


def test_strip_markup():
    assert " ".join(strip_markup("<p>Hello <b>world</b></p>").split()) == "Hello world"
    assert "alert" not in strip_markup("<script>alert(1)</script>ok")
    assert strip_markup("plain text") == "plain text"
    assert strip_markup("") == ""


def test_trim_words_cuts_and_marks():
    """Text longer than the limit is cut at a word boundary with a marker"""
    words = [f"w{i}" for i in range(35)]
    out = trim_words(" ".join(words), 30)
    assert out == " ".join(words[:30]) + "&hellip;"


def test_trim_words_keeps_short_text_and_escapes():
    assert trim_words("one  two\nthree", 30) == "one two three"
    assert trim_words("a < b & c", 30) == "a &lt; b &amp; c"
