"""
The in-memory representation of a decoded Celeste map: a tree of named `Element`'s carrying typed `Attribute`'s.
"""

import struct

from dataclasses import dataclass, field
from enum import Enum
from typing import Union, Optional, List, Tuple, Iterable


class AttributeType(Enum):
    BOOL = 'bool'
    BYTE = 'byte'
    SHORT = 'short'
    INT = 'int'
    FLOAT = 'float'
    STRING = 'string'
    LONG = 'long'
    DOUBLE = 'double'


AttributeValue = Union[bool, int, float, str]


_INTEGER_RANGES = {
    AttributeType.BYTE: (0, (1 << 8) - 1),
    AttributeType.SHORT: (-(1 << 15), (1 << 15) - 1),
    AttributeType.INT: (-(1 << 31), (1 << 31) - 1),
    AttributeType.LONG: (-(1 << 63), (1 << 63) - 1),
}

_REAL_TYPES = frozenset([AttributeType.FLOAT, AttributeType.DOUBLE])


@dataclass(frozen=True, eq=False)
class Attribute:
    """
    A typed attribute value. Exactly one of the variants in `AttributeType` is active, as indicated by `type`.

    Use the ``as_*`` accessors to get the value in a type-safe manner. They widen losslessly: all integer variants
    are returned as `int`, and both float variants as `float`. A mismatched accessor returns None.

    Real values compare by their bit pattern, so NaN attributes equal each other (as long as the payloads match)
    but 0.0 and -0.0 do not.
    """

    type: AttributeType
    value: AttributeValue

    @classmethod
    def from_bool(cls, value: bool) -> 'Attribute':
        return cls(AttributeType.BOOL, bool(value))

    @classmethod
    def from_byte(cls, value: int) -> 'Attribute':
        return cls._from_integer(AttributeType.BYTE, value)

    @classmethod
    def from_short(cls, value: int) -> 'Attribute':
        return cls._from_integer(AttributeType.SHORT, value)

    @classmethod
    def from_int(cls, value: int) -> 'Attribute':
        return cls._from_integer(AttributeType.INT, value)

    @classmethod
    def from_long(cls, value: int) -> 'Attribute':
        return cls._from_integer(AttributeType.LONG, value)

    @classmethod
    def from_float(cls, value: float) -> 'Attribute':
        return cls(AttributeType.FLOAT, float(value))

    @classmethod
    def from_double(cls, value: float) -> 'Attribute':
        return cls(AttributeType.DOUBLE, float(value))

    @classmethod
    def from_string(cls, value: str) -> 'Attribute':
        if not isinstance(value, str):
            raise TypeError(f"String attribute must hold a str, got {type(value).__name__}")

        return cls(AttributeType.STRING, value)

    @classmethod
    def _from_integer(cls, attr_type: AttributeType, value: int) -> 'Attribute':
        low, high = _INTEGER_RANGES[attr_type]
        if not (low <= value <= high):
            raise ValueError(f"Value {value} is out of range for a {attr_type.value} attribute")

        return cls(attr_type, value)

    def is_integer(self) -> bool:
        return self.type in _INTEGER_RANGES

    def is_real(self) -> bool:
        return self.type in _REAL_TYPES

    def as_integer(self) -> Optional[int]:
        return self.value if self.is_integer() else None

    def as_real(self) -> Optional[float]:
        return self.value if self.is_real() else None

    def as_bool(self) -> Optional[bool]:
        return self.value if self.type == AttributeType.BOOL else None

    def as_string(self) -> Optional[str]:
        return self.value if self.type == AttributeType.STRING else None

    def __eq__(self, other):
        if not isinstance(other, Attribute):
            return NotImplemented

        return self._comparison_key() == other._comparison_key()

    def __hash__(self):
        return hash(self._comparison_key())

    def _comparison_key(self) -> Tuple[AttributeType, Union[AttributeValue, bytes]]:
        if self.is_real():
            return self.type, struct.pack('<d', self.value)

        return self.type, self.value


@dataclass(eq=False, repr=False)
class Element:
    """
    A named node in a map tree.

    Both the attributes and the children are kept in the order in which they occur in the file. Attribute names need
    not be unique; the lookup functions return the first match.

    Equality is structural and is checked without recursion, so it works for arbitrarily deep trees. The `repr` only
    shows the element itself, not its descendants.
    """

    name: str
    attributes: List[Tuple[str, Attribute]] = field(default_factory=list)
    children: List['Element'] = field(default_factory=list)

    def get_attribute(self, name: str) -> Optional[Attribute]:
        return next(self.iter_attributes(name), None)

    def get_child(self, name: str) -> Optional['Element']:
        return next(self.iter_children(name), None)

    def iter_attributes(self, name: str) -> Iterable[Attribute]:
        return (value for attr_name, value in self.attributes if attr_name == name)

    def iter_children(self, name: str) -> Iterable['Element']:
        return (child for child in self.children if child.name == name)

    def iter_tree(self) -> Iterable[Tuple['Element', int]]:
        """
        Walks this element and all of its descendants in pre-order, yielding each element along with its depth
        (0 for this element).

        The walk does not use recursion, so it works for arbitrarily deep trees.
        """
        stack = [(self, 0)]

        while len(stack) > 0:
            element, depth = stack.pop()
            yield element, depth

            stack.extend((child, depth + 1) for child in reversed(element.children))

    def __eq__(self, other):
        if not isinstance(other, Element):
            return NotImplemented

        pending = [(self, other)]

        while len(pending) > 0:
            left, right = pending.pop()
            if left is right:
                continue

            if (left.name != right.name) or (left.attributes != right.attributes) or \
                    (len(left.children) != len(right.children)):
                return False

            pending.extend(zip(left.children, right.children))

        return True

    __hash__ = None

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r}, {len(self.attributes)} attributes, " \
               f"{len(self.children)} children)"


@dataclass
class Map:
    package_name: str
    root: Element

    def iter_elements(self) -> Iterable[Tuple[Element, int]]:
        return self.root.iter_tree()
