# src/transformer/tree/serializer.py
import logging
import re
from typing import List, Optional

from .core import Node, NodeType
from ..model import SerializerOptions

logger = logging.getLogger(__name__)

DELIMITER_CELLS = {
    None: "---",
    "left": ":--",
    "right": "--:",
    "center": ":-:",
}

# An ATX closing sequence at the end of heading text would be swallowed on re-parse.
TRAILING_HASH_RUN = re.compile(r"(^|[ \t])#+$")


class TreeSerializer:
    """
    Writes a Node tree back to markdown using a fixed set of formatting options.

    Payloads of TEXT, ESCAPE, HTML and CODE nodes are emitted verbatim; only the
    block structure (fences, list markers, indentation, blank lines) is normalized.
    Inside table cells pipes are written as `\\|`; markdown-it unescapes them while
    splitting the row, so the cell payloads come back unchanged.
    Serializing a freshly parsed tree is therefore a fixed point after one pass.
    """

    def __init__(self, options: Optional[SerializerOptions] = None) -> None:
        self.options = options or SerializerOptions()
        # Set while a table cell renders; a bare pipe there would split the cell.
        self._in_cell = False

    def serialize(self, tree: Node) -> str:
        """Renders a ROOT node. The result ends with exactly one newline (or is empty)."""
        body = self._blocks([c for c in tree.children if c.type != NodeType.DEFINITION], tight=False)
        definitions = "\n".join(
            self._definition(c) for c in tree.children if c.type == NodeType.DEFINITION
        )
        out = "\n\n".join(part for part in (body, definitions) if part)
        return out + "\n" if out else ""

    # -------- Block level --------

    def _blocks(self, nodes: List[Node], tight: bool) -> str:
        rendered = [self._block(node) for node in nodes]
        separator = "\n" if tight else "\n\n"
        return separator.join(r for r in rendered if r != "")

    def _block(self, node: Node) -> str:
        t = node.type
        if t == NodeType.PARAGRAPH:
            return self._inline(node.children)
        if t == NodeType.HEADING:
            return self._heading(node)
        if t == NodeType.BLOCKQUOTE:
            return self._blockquote(node)
        if t == NodeType.LIST:
            return self._list(node)
        if t == NodeType.CODE:
            return self._code(node)
        if t == NodeType.HTML:
            return (node.value or "").rstrip("\n")
        if t == NodeType.THEMATIC_BREAK:
            return self.options.thematic_break
        if t == NodeType.TABLE:
            return self._table(node)
        if t == NodeType.FRONT_MATTER:
            marker = node.markup or "---"
            content = (node.value or "").rstrip("\n")
            return f"{marker}\n{content}\n{marker}" if content else f"{marker}\n{marker}"
        if t == NodeType.DEFINITION:
            return self._definition(node)
        if node.value is not None:
            return node.value.rstrip("\n")
        # Unknown container: render whatever it holds
        return self._blocks(node.children, tight=False)

    def _heading(self, node: Node) -> str:
        level = int(node.attrs.get("level", 1))
        text = self._inline(node.children, in_heading=True).strip()
        if TRAILING_HASH_RUN.search(text):
            text += " #"
        return "#" * level + (" " + text if text else "")

    def _blockquote(self, node: Node) -> str:
        content = self._blocks(node.children, tight=False)
        if not content:
            return ">"
        return "\n".join(("> " + line) if line else ">" for line in content.split("\n"))

    def _list(self, node: Node) -> str:
        tight = bool(node.attrs.get("tight", True))
        ordered = bool(node.attrs.get("ordered", False))
        start = int(node.attrs.get("start", 1))

        items = []
        for i, item in enumerate(node.children):
            if ordered:
                number = item.info or str(start + i)
                marker = number + (node.markup or ".")
            else:
                marker = node.markup or "-"
            items.append(self._list_item(item, marker, tight))
        return ("\n" if tight else "\n\n").join(items)

    def _list_item(self, item: Node, marker: str, tight: bool) -> str:
        content = self._blocks(item.children, tight=tight)
        if not content:
            return marker
        pad = " " * self.options.list_item_indent
        indent = " " * (len(marker) + len(pad))
        lines = content.split("\n")
        out = [marker + pad + lines[0]]
        out.extend((indent + line) if line else "" for line in lines[1:])
        return "\n".join(out)

    def _code(self, node: Node) -> str:
        code = node.value or ""
        if code and not code.endswith("\n"):
            code += "\n"
        info = node.info or ""

        char = self.options.fence
        if char == "`" and "`" in info:
            # A backtick fence cannot carry an info string containing backticks
            char = "~"
        longest = max((len(run) for run in re.findall(re.escape(char) + "+", code)), default=0)
        fence = char * max(3, longest + 1)
        return f"{fence}{info}\n{code}{fence}"

    def _table(self, node: Node) -> str:
        rows = [row for row in node.children if row.type == NodeType.TABLE_ROW]
        if not rows:
            return ""
        header = rows[0]
        aligns = [cell.attrs.get("align") for cell in header.children]

        lines = [self._table_row(header)]
        lines.append("| " + " | ".join(DELIMITER_CELLS.get(a, "---") for a in aligns) + " |")
        lines.extend(self._table_row(row) for row in rows[1:])
        return "\n".join(lines)

    def _table_row(self, row: Node) -> str:
        self._in_cell = True
        try:
            cells = [self._inline(cell.children).strip() for cell in row.children]
        finally:
            self._in_cell = False
        return "| " + " | ".join(cells) + " |"

    def _cell_safe(self, payload: str) -> str:
        return payload.replace("|", "\\|") if self._in_cell else payload

    def _definition(self, node: Node) -> str:
        label = node.attrs.get("label", "")
        return f"[{label}]: {self._destination(node.url)}{self._title(node.title)}"

    # -------- Inline level --------

    def _inline(self, nodes: List[Node], in_heading: bool = False) -> str:
        return "".join(self._inline_node(node, in_heading) for node in nodes)

    def _inline_node(self, node: Node, in_heading: bool) -> str:
        t = node.type
        if t in (NodeType.TEXT, NodeType.HTML):
            return self._cell_safe(node.value or "")
        if t == NodeType.ESCAPE:
            return node.value or ""
        if t == NodeType.SOFTBREAK:
            return " " if in_heading else "\n"
        if t == NodeType.HARDBREAK:
            return " " if in_heading else "\\\n"
        if t == NodeType.INLINE_CODE:
            return self._inline_code(node)
        if t in (NodeType.EMPHASIS, NodeType.STRONG, NodeType.DELETE):
            default = {NodeType.EMPHASIS: "*", NodeType.STRONG: "**", NodeType.DELETE: "~~"}[t]
            marker = node.markup or default
            return marker + self._inline(node.children, in_heading) + marker
        if t == NodeType.LINK:
            return self._link(node, in_heading)
        if t == NodeType.IMAGE:
            alt = self._inline(node.children, in_heading)
            target = self._cell_safe(self._destination(node.url) + self._title(node.title))
            return f"![{alt}]({target})"
        if node.value is not None:
            return node.value
        return self._inline(node.children, in_heading)

    def _inline_code(self, node: Node) -> str:
        ticks = node.markup or "`"
        content = node.value or ""
        if content and (
                content[0] == "`" or content[-1] == "`"
                or (content[0] == " " and content[-1] == " " and content.strip())
        ):
            content = f" {content} "
        return f"{ticks}{self._cell_safe(content)}{ticks}"

    def _link(self, node: Node, in_heading: bool) -> str:
        text = self._inline(node.children, in_heading)
        url = node.url or ""

        # Autolinks stay autolinks as long as no pass rewrote their target
        if node.markup == "autolink" and url == node.attrs.get("source_url"):
            if url.startswith("mailto:") and text == url[len("mailto:"):]:
                return f"<{self._cell_safe(url[len('mailto:'):])}>"
            return f"<{self._cell_safe(url)}>"

        target = self._cell_safe(self._destination(url) + self._title(node.title))
        return f"[{text}]({target})"

    @staticmethod
    def _destination(url: Optional[str]) -> str:
        url = url or ""
        if not url or re.search(r"[\s<>]", url) or not _balanced_parens(url):
            return "<" + url.replace("<", "\\<").replace(">", "\\>") + ">"
        return url

    @staticmethod
    def _title(title: Optional[str]) -> str:
        if not title:
            return ""
        return ' "' + title.replace('"', '\\"') + '"'


def _balanced_parens(url: str) -> bool:
    depth = 0
    for ch in url:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0
