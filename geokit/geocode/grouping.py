"""
Disambiguation tree for search results, dood!

Search backends often return several results with the same name ("Paris"
in France, Texas and Tennessee). To tell them apart, every result is filed
into a tree keyed by an ordered list of attributes, country first and
finer administrative levels after it. A result's description is its name
followed by the attribute values on its path whose tree node has at least
one sibling, most specific first:

    country:   France           United States
    admin1:    Ile-de-France    Texas      Tennessee
    leaf:      Paris            Paris      Paris

gives "Paris, France", "Paris, Texas, United States" and
"Paris, Tennessee, United States". Levels where all results agree add
nothing.

Values are matched case-insensitively. A missing value becomes a
placeholder node: results lacking the attribute share it, and it never
merges with a valued node, so it still counts as a sibling of one.

Nodes live in a flat list and refer to each other by index.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

ROOT = 0


@dataclass
class GroupingNode(Generic[T]):
    """Single tree node; ``value`` None is a placeholder, ``item`` is set on leaves only."""

    value: Optional[str]
    parent: int
    children: List[int] = field(default_factory=list)
    item: Optional[T] = None


class GroupingTree(Generic[T]):
    """
    Tree of results keyed by disambiguating attributes, dood!

    Args:
        keys: Attribute names from least to most specific

    Example:
        >>> tree = GroupingTree[str](["country", "admin1"])
        >>> tree.insert({"country": "France"}, "paris-fr")
        >>> tree.insert({"country": "United States", "admin1": "Texas"}, "paris-tx")
        >>> [formatDescription("Paris", tokens) for _, tokens in tree.walk()]
        ['Paris, France', 'Paris, United States']
    """

    def __init__(self, keys: Sequence[str]):
        self.keys: Tuple[str, ...] = tuple(keys)
        self.nodes: List[GroupingNode[T]] = [GroupingNode(value=None, parent=-1)]
        self.leaves: List[int] = []

    def _addNode(self, parent: int, value: Optional[str], item: Optional[T] = None) -> int:
        index = len(self.nodes)
        self.nodes.append(GroupingNode(value=value, parent=parent, item=item))
        self.nodes[parent].children.append(index)
        return index

    def _findOrAddChild(self, parent: int, value: Optional[str]) -> int:
        folded = value.casefold() if value is not None else None
        for childIndex in self.nodes[parent].children:
            childValue = self.nodes[childIndex].value
            if childValue is None and folded is None:
                return childIndex
            if childValue is not None and folded is not None and childValue.casefold() == folded:
                return childIndex
        return self._addNode(parent, value)

    def insert(self, attributes: Mapping[str, str], item: T) -> int:
        """
        File one result under its attribute path.

        Args:
            attributes: Result attributes; missing or empty keys use placeholders
            item: Object stored in the new leaf

        Returns:
            int: Index of the leaf node
        """
        current = ROOT
        for key in self.keys:
            current = self._findOrAddChild(current, attributes.get(key) or None)

        leaf = self._addNode(current, value=None, item=item)
        self.leaves.append(leaf)
        return leaf

    def disambiguators(self, leaf: int) -> List[str]:
        """Attribute values that set this leaf apart, most specific first."""
        ret: List[str] = []
        current = self.nodes[leaf].parent
        while current != ROOT:
            node = self.nodes[current]
            if node.value is not None and len(self.nodes[node.parent].children) > 1:
                ret.append(node.value)
            current = node.parent
        return ret

    def walk(self) -> List[Tuple[T, List[str]]]:
        """Every stored item with its disambiguators, in insertion order, dood!"""
        return [(self.nodes[leaf].item, self.disambiguators(leaf)) for leaf in self.leaves]  # type: ignore[misc]


def formatDescription(name: str, disambiguators: Sequence[str]) -> str:
    """Join a name and its disambiguators into display text."""
    return ", ".join(token for token in [name, *disambiguators] if token)
