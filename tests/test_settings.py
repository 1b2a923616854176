"""Tests for settings adapters and model validation."""

import logging

import pytest
from rich.logging import RichHandler

from topic_rss.exceptions import ConfigError
from topic_rss.logging_utils import setup_logging
from topic_rss.models import FeedSource, FilterConfig
from topic_rss.settings import (
    DEFAULT_DISPLAY_NAME,
    filter_config_from_settings,
    load_settings,
    sources_from_mapping,
    split_lines,
)


def test_feed_source_label_defaults_to_host():
    assert FeedSource("https://nesn.com/feed/").label == "nesn.com"
    assert FeedSource("https://nesn.com/feed/", "  NESN ").label == "NESN"


def test_filter_config_validation():
    with pytest.raises(ConfigError):
        FilterConfig(short_content_threshold=-1)
    with pytest.raises(ConfigError):
        FilterConfig(description_words=0)


def test_filter_config_normalizes_blocked_titles():
    config = FilterConfig(blocked_titles=[" Breaking News ", "", "  "])
    assert config.blocked_titles == frozenset({"Breaking News"})


def test_split_lines():
    assert split_lines(" a \n\n b\r\n  ") == ["a", "b"]
    assert split_lines(None) == []


def test_sources_from_mapping():
    sources = sources_from_mapping({
        " https://a.example.com/feed ": "A",
        "": "ignored",
        "https://b.example.com/rss": "",
    })
    assert sources == [
        FeedSource("https://a.example.com/feed", "A"),
        FeedSource("https://b.example.com/rss", "b.example.com"),
    ]


def test_filter_config_from_cms_settings():
    config = filter_config_from_settings({
        "blocked_titles": "Daily Odds\n  Injury Report  \n",
        "custom_filters": "Sponsored\n\nAdvertisement",
        "skip_short_content": True,
    })
    assert config.blocked_titles == frozenset({"Daily Odds", "Injury Report"})
    assert config.custom_filter_patterns == ("Sponsored", "Advertisement")
    assert config.skip_short_content is True
    assert config.use_fallback_images is True
    assert config.short_content_threshold == 100


def test_filter_config_from_empty_settings():
    assert filter_config_from_settings({}) == FilterConfig()


def test_load_settings_from_env():
    env = {
        "TOPIC_RSS_FEEDS": "https://nesn.com/feed/|NESN\nhttps://b.example.com/rss\n",
        "TOPIC_RSS_BLOCKED_TITLES": "Daily Odds",
        "TOPIC_RSS_SKIP_SHORT_CONTENT": "yes",
        "TOPIC_RSS_SHORT_CONTENT_THRESHOLD": "80",
        "TOPIC_RSS_USE_FALLBACK_IMAGES": "false",
        "TOPIC_RSS_MAX_ITEMS": "12",
        "TOPIC_RSS_MAX_WORKERS": "4",
        "TOPIC_RSS_NAME": "Boston Sports",
    }
    settings = load_settings(env)
    assert settings.sources == (
        FeedSource("https://nesn.com/feed/", "NESN"),
        FeedSource("https://b.example.com/rss", "b.example.com"),
    )
    assert settings.filters.blocked_titles == frozenset({"Daily Odds"})
    assert settings.filters.skip_short_content is True
    assert settings.filters.short_content_threshold == 80
    assert settings.filters.use_fallback_images is False
    assert settings.max_items == 12
    assert settings.max_workers == 4
    assert settings.display_name == "Boston Sports"


def test_load_settings_defaults():
    settings = load_settings({})
    assert settings.sources == ()
    assert settings.filters == FilterConfig()
    assert settings.max_items == 30
    assert settings.max_workers == 1
    assert settings.display_name == DEFAULT_DISPLAY_NAME


def test_load_settings_rejects_bad_values():
    with pytest.raises(ConfigError):
        load_settings({"TOPIC_RSS_MAX_ITEMS": "many"})
    with pytest.raises(ConfigError):
        load_settings({"TOPIC_RSS_SKIP_SHORT_CONTENT": "maybe"})
    with pytest.raises(ConfigError):
        load_settings({"TOPIC_RSS_MAX_WORKERS": "0"})


def test_setup_logging_installs_rich_handler():
    logger = setup_logging("debug")
    assert logger.name == "topic_rss"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)

    assert setup_logging("INFO", console=False).handlers == []
