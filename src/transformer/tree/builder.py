# src/transformer/tree/builder.py
import logging
from typing import Any, Dict, List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.front_matter import front_matter_plugin

from .core import Node, NodeType

logger = logging.getLogger(__name__)

# Opening token type -> node type for container tokens that map one-to-one.
CONTAINER_TYPES: Dict[str, NodeType] = {
    "paragraph_open": NodeType.PARAGRAPH,
    "heading_open": NodeType.HEADING,
    "blockquote_open": NodeType.BLOCKQUOTE,
    "bullet_list_open": NodeType.LIST,
    "ordered_list_open": NodeType.LIST,
    "list_item_open": NodeType.LIST_ITEM,
    "table_open": NodeType.TABLE,
    "tr_open": NodeType.TABLE_ROW,
    "th_open": NodeType.TABLE_CELL,
    "td_open": NodeType.TABLE_CELL,
    "em_open": NodeType.EMPHASIS,
    "strong_open": NodeType.STRONG,
    "s_open": NodeType.DELETE,
    "link_open": NodeType.LINK,
}

# Table sections carry no information the serializer needs besides "is header".
TRANSPARENT_TYPES = {"thead_open", "thead_close", "tbody_open", "tbody_close"}


class TreeBuilder:
    """
    Builder responsible for parsing raw markdown into a Node tree.

    Uses markdown-it-py (CommonMark + GFM tables and strikethrough + front matter).
    The 'text_join' core rule is disabled so backslash escapes and character
    references stay separate ESCAPE nodes holding their source form; TEXT nodes
    therefore only contain characters that were literally present in the source.
    """

    def __init__(self) -> None:
        self.md = (
            MarkdownIt("commonmark")
            .enable(["table", "strikethrough"])
            .disable("text_join")
            .use(front_matter_plugin)
        )

    def parse(self, raw_text: str) -> Node:
        """
        Parses markdown text into a ROOT node. Total for any string input.

        Args:
            raw_text (str): The document text as read from disk.

        Returns:
            Node: The document tree; reference definitions are appended as DEFINITION nodes.
        """
        # Basic cleanup: a BOM would hide front matter from the parser
        text = raw_text[1:] if raw_text.startswith("\ufeff") else raw_text

        env: Dict[str, Any] = {}
        tokens = self.md.parse(text, env)

        root = Node(type=NodeType.ROOT)
        self._build(tokens, root)
        root.children.extend(self._definitions(env))
        return root

    def _build(self, tokens: Sequence[Token], container: Node) -> None:
        """Turns a flat, nesting-annotated token stream into children of 'container'."""
        stack: List[Node] = [container]
        in_table_head = False

        for token in tokens:
            if token.type in TRANSPARENT_TYPES:
                in_table_head = token.type == "thead_open"
                continue

            if token.nesting == 1:
                node = self._open_node(token, in_table_head)
                stack[-1].children.append(node)
                stack.append(node)
            elif token.nesting == -1:
                if len(stack) == 1:
                    logger.debug("Unbalanced closing token '%s' ignored.", token.type)
                    continue
                closed = stack.pop()
                if closed.type == NodeType.LIST:
                    closed.attrs["tight"] = self._is_tight(closed)
            elif token.type == "inline":
                self._build(token.children or [], stack[-1])
            else:
                stack[-1].children.append(self._leaf_node(token))

    def _open_node(self, token: Token, in_table_head: bool) -> Node:
        node_type = CONTAINER_TYPES.get(token.type, NodeType.RAW)
        node = Node(type=node_type, markup=token.markup or "", info=token.info or "")

        if node_type == NodeType.PARAGRAPH:
            node.attrs["hidden"] = bool(token.hidden)
        elif node_type == NodeType.HEADING:
            node.attrs["level"] = int(token.tag[1:]) if token.tag[1:].isdigit() else 1
        elif node_type == NodeType.LIST:
            node.attrs["ordered"] = token.type == "ordered_list_open"
            if node.attrs["ordered"]:
                node.attrs["start"] = int(token.attrGet("start") or 1)
        elif node_type == NodeType.TABLE_ROW:
            node.attrs["header"] = in_table_head
        elif node_type == NodeType.TABLE_CELL:
            node.attrs["align"] = self._alignment(token)
        elif node_type == NodeType.LINK:
            href = str(token.attrGet("href") or "")
            title = token.attrGet("title")
            node.url = href
            node.title = str(title) if title else None
            node.attrs["source_url"] = href
        elif node_type == NodeType.RAW:
            node.attrs["token"] = token.type
        return node

    def _leaf_node(self, token: Token) -> Node:
        t = token.type
        if t == "text":
            return Node(type=NodeType.TEXT, value=token.content)
        if t == "text_special":
            # markup holds the source form ('&lt;', '\\*'); content the decoded character
            return Node(type=NodeType.ESCAPE, value=token.markup or token.content, info=token.info or "")
        if t == "softbreak":
            return Node(type=NodeType.SOFTBREAK)
        if t == "hardbreak":
            return Node(type=NodeType.HARDBREAK)
        if t == "code_inline":
            return Node(type=NodeType.INLINE_CODE, value=token.content, markup=token.markup or "`")
        if t in ("html_inline", "html_block"):
            return Node(type=NodeType.HTML, value=token.content, attrs={"block": t == "html_block"})
        if t == "fence":
            return Node(type=NodeType.CODE, value=token.content, info=token.info or "",
                        markup=token.markup or "", attrs={"fenced": True})
        if t == "code_block":
            return Node(type=NodeType.CODE, value=token.content, attrs={"fenced": False})
        if t == "hr":
            return Node(type=NodeType.THEMATIC_BREAK, markup=token.markup or "")
        if t == "front_matter":
            return Node(type=NodeType.FRONT_MATTER, value=token.content, markup=token.markup or "---")
        if t == "image":
            title = token.attrGet("title")
            node = Node(
                type=NodeType.IMAGE,
                url=str(token.attrGet("src") or ""),
                title=str(title) if title else None,
            )
            self._build(token.children or [], node)
            return node

        logger.debug("No dedicated node for token '%s'; keeping it verbatim.", t)
        return Node(type=NodeType.RAW, value=token.content, attrs={"token": t})

    @staticmethod
    def _alignment(token: Token) -> Optional[str]:
        style = str(token.attrGet("style") or "")
        if style.startswith("text-align:"):
            return style.split(":", 1)[1].strip() or None
        return None

    @staticmethod
    def _is_tight(list_node: Node) -> bool:
        """A list is tight when markdown-it hid every paragraph directly inside its items."""
        paragraphs = [
            child
            for item in list_node.children
            for child in item.children
            if child.type == NodeType.PARAGRAPH
        ]
        return all(p.attrs.get("hidden") for p in paragraphs)

    @staticmethod
    def _definitions(env: Dict[str, Any]) -> List[Node]:
        """Reference definitions never show up in the token stream; keep them as trailing nodes."""
        definitions = []
        for label, ref in (env.get("references") or {}).items():
            title = ref.get("title")
            definitions.append(Node(
                type=NodeType.DEFINITION,
                url=ref.get("href", ""),
                title=title or None,
                attrs={"label": label},
            ))
        return definitions
