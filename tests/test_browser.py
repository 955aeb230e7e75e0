"""Tests for the Selenium page adapter, without a browser."""

import pytest
from selenium.common.exceptions import NoSuchWindowException, StaleElementReferenceException

from tube2tldr.browser import SeleniumNode, SeleniumPage
from tube2tldr.errors import PageAccessError


class StaleElement:
    id = "element-1"

    def value_of_css_property(self, prop):
        raise StaleElementReferenceException("stale element reference: element is not attached")

    def get_dom_attribute(self, name):
        return "Show transcript"


class ClosedDriver:
    @property
    def current_url(self):
        raise NoSuchWindowException("no such window: target window already closed")

    def find_elements(self, by, value):
        raise NoSuchWindowException()


def test_stale_element_becomes_page_access_error():
    node = SeleniumNode(driver=None, element=StaleElement())

    with pytest.raises(PageAccessError, match="stale element reference"):
        node.computed_style("display")


def test_working_calls_pass_through():
    node = SeleniumNode(driver=None, element=StaleElement())
    assert node.get_attribute("aria-label") == "Show transcript"


def test_closed_window_becomes_page_access_error():
    page = SeleniumPage(ClosedDriver())

    with pytest.raises(PageAccessError, match="no such window"):
        page.url
    with pytest.raises(PageAccessError, match="find_by_tag"):
        page.find_by_tag("button")
