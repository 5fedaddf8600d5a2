from typing import (
    LiteralString,
    Optional,
    Iterable,
    Iterator,
    Union,
    Callable,
    cast,
)
from mypy_extensions import KwArg, VarArg

# --
# HTMPL defines functions to build HTML documents as trees of nodes, which
# are serialized with escaping applied to text and attribute values.

HTML_EMPTY: list[LiteralString] = "br col hr img input link meta wbr".split()
HTML_ESCAPED = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#x27;"}
)

HTML_QUOTED = str.maketrans({"&": "&amp;", '"': "&quot;", "<": "&lt;"})


def escape(text: str) -> str:
    return text.translate(HTML_ESCAPED)


def quoted(text: Optional[str]) -> str:
    return text.translate(HTML_QUOTED) if text else ""


TNodeContent = Union["Node", str, bool, float, int, None]
TAttributeContent = str | bool | float | int | None


class Node:
    __slots__ = ["name", "attributes", "children"]

    def __init__(
        self,
        name: str,
        children: Optional[Iterable[TNodeContent]] = None,
        attributes: Optional[dict[str, TAttributeContent]] = None,
    ):
        self.name = name
        self.attributes: dict[str, TAttributeContent] = attributes or {}
        self.children: list[TNodeContent] = [_ for _ in children] if children else []

    def iterHTML(self) -> Iterator[str]:
        if self.name == "#raw":
            yield str(self.attributes.get("#value") or "")
        elif self.name == "#text":
            yield escape(str(self.attributes.get("#value") or ""))
        else:
            yield f"<{self.name}"
            for k, v in self.attributes.items():
                if v is None or v is False:
                    continue
                yield f" {k}" if v is True else f' {k}="{quoted(str(v))}"'
            yield ">"
            if self.name in HTML_EMPTY:
                return
            for _ in self.children:
                if isinstance(_, Node):
                    yield from _.iterHTML()
                elif _ is None:
                    pass
                else:
                    yield escape(str(_))
            yield f"</{self.name}>"

    def __call__(self, *content: Union[str, "Node"]) -> "Node":
        for _ in content:
            self.children.append(text(_) if isinstance(_, str) else _)
        return self

    def __str__(self) -> str:
        return "".join(self.iterHTML())


def text(value: str) -> Node:
    return Node("#text", attributes={"#value": value})


def raw(html: str) -> Node:
    """Wraps already serialized HTML, which is output as-is."""
    return Node("#raw", attributes={"#value": html})


NodeFactory = Callable[
    [
        VarArg(TNodeContent | list[TNodeContent]),
        KwArg(TAttributeContent),
    ],
    Node,
]


def nodeFactory(name: str) -> NodeFactory:
    def f(
        *children: TNodeContent | list[TNodeContent],
        **attributes: TAttributeContent,
    ) -> Node:
        content: list[TNodeContent] = []
        for _ in children:
            if isinstance(_, list) or isinstance(_, tuple):
                content += list(_)
            else:
                content.append(_)
        # `_` stands for `class`, which is a reserved word
        attrs: dict[str, TAttributeContent] = {
            ("class" if k == "_" else k): v for k, v in attributes.items()
        }
        return Node(
            name,
            children=[text(_) if isinstance(_, str) else _ for _ in content],
            attributes=attrs,
        )

    f.__name__ = name
    return cast(NodeFactory, f)


HTML_TAGS: list[LiteralString] = (
    """\
a body br caption code div footer h1 h2 head header hr html li link main meta
nav p section small span style table tbody td th thead title tr ul\
""".split()
)


class Markup:
    __slots__ = ["_factories", "_name"]

    def __init__(self, name: str, factories: dict[str, NodeFactory]):
        self._name: str = name
        self._factories: dict[str, NodeFactory] = factories

    def __getattr__(self, name: str) -> NodeFactory:
        factories = self._factories
        if name not in factories:
            raise AttributeError(
                f"No tag {name}, pick one of {','.join(factories.keys())}"
            )
        return factories[name]


def markup(name: str, tags: list[LiteralString]) -> Markup:
    return Markup(name, {_: nodeFactory(_) for _ in tags})


H: Markup = markup("html", HTML_TAGS)


def html(*nodes: Node, doctype: str | None = None) -> Iterator[str]:
    if doctype:
        yield f"{doctype}\n" if doctype.startswith("<!") else f"<!DOCTYPE {doctype}>\n"
    for _ in nodes:
        yield from _.iterHTML()


# EOF
