"""Walking and rewriting S-expression trees.

ASTVisitor dispatches each node to ``visit_<ClassName>`` when the subclass
defines one (ast.NodeVisitor naming, hence PascalCase method suffixes) and
to generic_visit() otherwise. Only Program (``body``) and ListExpression
(``items``) have children; every other node is a leaf.

ASTTransformer builds new trees. A visit method may return a node (kept in
place of the original), None (dropped) or a list of nodes (spliced in).

Traversal depth is bounded by a DepthGuard, so hand-built trees nested past
max_depth raise DepthLimitExceededError rather than exhausting the stack.

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import ClassVar

from sexpengine.constants import MAX_DEPTH
from sexpengine.core.depth_guard import DepthGuard

from .ast import (
    ASTNode,
    BlockComment,
    LineComment,
    ListExpression,
    Program,
)

__all__ = ["ASTTransformer", "ASTVisitor", "CommentStripper", "children_of", "strip_comments"]

type TransformerResult = ASTNode | None | list[ASTNode]

# Container node type -> name of its child tuple
_CHILD_FIELDS: dict[type, str] = {Program: "body", ListExpression: "items"}


def children_of(node: ASTNode) -> tuple[ASTNode, ...]:
    """Direct children of node, in source order (empty for leaves)."""
    field_name = _CHILD_FIELDS.get(type(node))
    if field_name is None:
        return ()
    return getattr(node, field_name)  # type: ignore[no-any-return]


class ASTVisitor[T = ASTNode]:
    """Read-only traversal with per-node-type hooks.

    Example:
        >>> class IdentifierCounter(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.names = []
        ...
        ...     def visit_Identifier(self, node: Identifier) -> ASTNode:
        ...         self.names.append(node.name)
        ...         return node
        ...
        >>> counter = IdentifierCounter()
        >>> _ = counter.visit(parse_program("(log (add x y))"))
        >>> counter.names
        ['log', 'add', 'x', 'y']
    """

    __slots__ = ("_depth_guard", "_handlers")

    # Node class name -> hook method name, computed once per subclass
    _class_visit_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {
            name.removeprefix("visit_"): name for name in dir(cls) if name.startswith("visit_")
        }

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Set up the depth guard.

        Subclasses overriding __init__ must call super().__init__().

        Args:
            max_depth: Deepest traversal allowed (default: MAX_DEPTH)
        """
        self._depth_guard = DepthGuard(max_depth=MAX_DEPTH if max_depth is None else max_depth)
        self._handlers: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Run the hook for node's type, or generic_visit()."""
        node_type = type(node)
        handler = self._handlers.get(node_type)
        if handler is None:
            hook = self._class_visit_methods.get(node_type.__name__)
            handler = getattr(self, hook) if hook is not None else self.generic_visit
            self._handlers[node_type] = handler
        return handler(node)

    def generic_visit(self, node: ASTNode) -> T:
        """Visit every child, one level deeper, and return node itself.

        Raises:
            DepthLimitExceededError: If the tree is deeper than max_depth
        """
        with self._depth_guard:
            for child in children_of(node):
                self.visit(child)
        return node  # type: ignore[return-value]  # T defaults to ASTNode


class ASTTransformer(ASTVisitor[TransformerResult]):
    """Rebuilding traversal; the input tree is never modified.

    Example:
        >>> class Renamer(ASTTransformer):
        ...     def visit_Identifier(self, node: Identifier) -> Identifier:
        ...         return replace(node, name=node.name.upper())
        ...
        >>> renamed = Renamer().transform(parse_program("(log x)"))
        >>> renamed.body[0].items[0].name
        'LOG'
    """

    def transform(self, node: ASTNode) -> TransformerResult:
        """Entry point; same as visit()."""
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> TransformerResult:
        """Copy a container with transformed children; return leaves as-is.

        Spans are carried over unchanged.

        Raises:
            DepthLimitExceededError: If the tree is deeper than max_depth
        """
        with self._depth_guard:
            field_name = _CHILD_FIELDS.get(type(node))
            if field_name is None:
                return node
            return replace(node, **{field_name: self._transform_children(children_of(node))})

    def _transform_children(self, nodes: tuple[ASTNode, ...]) -> tuple[ASTNode, ...]:
        result: list[ASTNode] = []
        for node in nodes:
            match self.visit(node):
                case None:
                    pass
                case list() as several:
                    result.extend(several)
                case single:
                    result.append(single)
        return tuple(result)


class CommentStripper(ASTTransformer):
    """Remove every BlockComment and LineComment from a tree."""

    def visit_BlockComment(self, node: BlockComment) -> None:  # noqa: N802 - ast.NodeVisitor naming
        return None

    def visit_LineComment(self, node: LineComment) -> None:  # noqa: N802 - ast.NodeVisitor naming
        return None


def strip_comments[N: (Program, ListExpression)](node: N, *, max_depth: int | None = None) -> N:
    """Return a copy of node without comment nodes, at any depth.

    Example:
        >>> stripped = strip_comments(parse_program("; hi\\n(a #| x |# b)"))
        >>> [item.name for item in stripped.body[0].items]
        ['a', 'b']
    """
    return CommentStripper(max_depth=max_depth).transform(node)  # type: ignore[return-value]
