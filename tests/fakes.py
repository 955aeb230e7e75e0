"""In-memory page tree used by the tests."""

from typing import Callable, Dict, List, Optional

DEFAULT_STYLE = {"display": "block", "visibility": "visible", "opacity": "1"}


class FakeNode:
    def __init__(
        self,
        tag: str,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        style: Optional[Dict[str, str]] = None,
        children: Optional[List["FakeNode"]] = None,
        classes: Optional[List[str]] = None,
        on_click: Optional[Callable[["FakeNode"], None]] = None,
    ):
        self.tag = tag
        self._text = text
        self.attrs = dict(attrs or {})
        self.style = dict(DEFAULT_STYLE)
        self.style.update(style or {})
        self.classes = list(classes or [])
        self.parent: Optional["FakeNode"] = None
        self.children: List["FakeNode"] = []
        self.on_click = on_click
        self.page: Optional["FakePage"] = None
        self.clicks = 0
        for child in children or []:
            self.append(child)

    def __repr__(self):
        return f"FakeNode(<{self.tag}> {self._text!r})"

    def append(self, child: "FakeNode") -> "FakeNode":
        child.parent = self
        self.children.append(child)
        return child

    def walk(self):
        for child in self.children:
            yield child
            yield from child.walk()

    def text(self) -> str:
        return self._text + "".join(child.text() for child in self.children)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    def computed_style(self, prop: str) -> str:
        return self.style.get(prop, "")

    def find_all(self, tag: str, class_name: Optional[str] = None) -> List["FakeNode"]:
        return [
            node
            for node in self.walk()
            if node.tag == tag and (class_name is None or class_name in node.classes)
        ]

    def set_style(self, prop: str, value: str) -> None:
        self._log("set_style", prop, value)
        self.style[prop] = value

    def remove(self) -> None:
        self._log("remove")
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def click(self) -> None:
        self._log("click")
        self.clicks += 1
        if self.on_click is not None:
            self.on_click(self)

    def _log(self, action: str, *args) -> None:
        page = self.page or self._find_page()
        if page is not None:
            page.actions.append((action, self) + args)

    def _find_page(self) -> Optional["FakePage"]:
        node = self
        while node.parent is not None:
            node = node.parent
        return node.page


class FakePage:
    def __init__(self, url: str = "https://www.youtube.com/watch?v=dQw4w9WgXcQ", children=None):
        self.url = url
        self.root = FakeNode("html", children=children or [])
        self.root.page = self
        self.actions = []
        self.queries = 0

    def add(self, node: FakeNode) -> FakeNode:
        return self.root.append(node)

    def find_by_tag(self, tag: str, class_name: Optional[str] = None) -> List[FakeNode]:
        self.queries += 1
        return self.root.find_all(tag, class_name)

    def find_by_id(self, element_id: str) -> Optional[FakeNode]:
        for node in self.root.walk():
            if node.attrs.get("id") == element_id:
                return node
        return None

    def side_effects(self):
        return [action for action, *_ in self.actions]


def transcript_entry(timestamp: str, text: str) -> FakeNode:
    return FakeNode(
        "ytd-transcript-segment-renderer",
        children=[
            FakeNode("div", text=f"  {timestamp}  ", classes=["segment-timestamp"]),
            FakeNode("yt-formatted-string", text=text),
        ],
    )


def transcript_button(label: str = "Show transcript", **kwargs) -> FakeNode:
    return FakeNode("button", attrs={"aria-label": label}, **kwargs)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
