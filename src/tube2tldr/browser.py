"""
Selenium implementation of the page tree.

Reads go through WebElement where Selenium offers them; DOM mutations
(remove, inline style, click on possibly hidden controls) go through
execute_script, like the page's own scripts would do them.

The watch page re-renders while it is being poked at, so any WebDriver
failure is raised as PageAccessError and handled like the other
acquisition errors.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Iterator, List, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from tube2tldr.errors import PageAccessError


def _css(tag: str, class_name: Optional[str] = None) -> str:
    return f"{tag}.{class_name}" if class_name else tag


def page_access(method):
    """Re-raise WebDriver failures of a page tree method as PageAccessError."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except WebDriverException as e:
            message = (e.msg or type(e).__name__).strip().splitlines()[0]
            raise PageAccessError(f"Browser error in {method.__name__}: {message}") from e

    return wrapper


class SeleniumNode:
    def __init__(self, driver: webdriver.Chrome, element: WebElement):
        self.driver = driver
        self.element = element

    def __eq__(self, other) -> bool:
        return isinstance(other, SeleniumNode) and self.element == other.element

    def __hash__(self) -> int:
        return hash(self.element.id)

    def __repr__(self) -> str:
        return f"SeleniumNode(<{self.element.id}>)"

    @property
    @page_access
    def tag(self) -> str:
        return self.element.tag_name.lower()

    @property
    @page_access
    def parent(self) -> Optional["SeleniumNode"]:
        parent = self.driver.execute_script("return arguments[0].parentElement;", self.element)
        return SeleniumNode(self.driver, parent) if parent is not None else None

    @property
    @page_access
    def children(self) -> List["SeleniumNode"]:
        return [SeleniumNode(self.driver, e) for e in self.element.find_elements(By.XPATH, "./*")]

    @page_access
    def text(self) -> str:
        # textContent, not .text: the latter is empty for hidden elements
        return self.element.get_attribute("textContent") or ""

    @page_access
    def get_attribute(self, name: str) -> Optional[str]:
        return self.element.get_dom_attribute(name)

    @page_access
    def computed_style(self, prop: str) -> str:
        return self.element.value_of_css_property(prop)

    @page_access
    def find_all(self, tag: str, class_name: Optional[str] = None) -> List["SeleniumNode"]:
        return [
            SeleniumNode(self.driver, e)
            for e in self.element.find_elements(By.CSS_SELECTOR, _css(tag, class_name))
        ]

    @page_access
    def set_style(self, prop: str, value: str) -> None:
        self.driver.execute_script(
            "arguments[0].style.setProperty(arguments[1], arguments[2]);", self.element, prop, value
        )

    @page_access
    def remove(self) -> None:
        self.driver.execute_script("arguments[0].remove();", self.element)

    @page_access
    def click(self) -> None:
        self.driver.execute_script("arguments[0].click();", self.element)


class SeleniumPage:
    def __init__(self, driver: webdriver.Chrome):
        self.driver = driver

    @property
    @page_access
    def url(self) -> str:
        return self.driver.current_url

    @page_access
    def find_by_tag(self, tag: str, class_name: Optional[str] = None) -> List[SeleniumNode]:
        return [
            SeleniumNode(self.driver, e)
            for e in self.driver.find_elements(By.CSS_SELECTOR, _css(tag, class_name))
        ]

    @page_access
    def find_by_id(self, element_id: str) -> Optional[SeleniumNode]:
        found = self.driver.find_elements(By.ID, element_id)
        return SeleniumNode(self.driver, found[0]) if found else None


def build_driver(headless: bool) -> webdriver.Chrome:
    """Create and return a Chrome WebDriver with reasonable defaults."""
    options = webdriver.ChromeOptions()
    if headless:
        # Chrome >= 109 supports new headless
        options.add_argument("--headless=new")
    options.add_argument("--disable-gpu")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1280,900")
    options.add_argument("--lang=en-US")

    service = Service(ChromeDriverManager().install())
    driver = webdriver.Chrome(service=service, options=options)
    driver.set_page_load_timeout(60)
    return driver


@contextmanager
def open_page(url: str, headless: bool = True, ready_tag: str = "ytd-watch-flexy", timeout_sec: int = 30) -> Iterator[SeleniumPage]:
    """Open ``url`` in Chrome and yield it as a page tree; the browser is closed afterwards."""
    driver = build_driver(headless)
    try:
        driver.get(url)
        try:
            WebDriverWait(driver, timeout_sec).until(
                EC.presence_of_element_located((By.TAG_NAME, ready_tag))
            )
        except TimeoutException:
            print(f"    Warning: <{ready_tag}> did not appear within {timeout_sec}s, continuing anyway")
        yield SeleniumPage(driver)
    finally:
        driver.quit()
