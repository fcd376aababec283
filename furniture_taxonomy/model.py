from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

XSD_NS = "http://www.w3.org/2001/XMLSchema#"
XSD_STRING = XSD_NS + "string"
XSD_DECIMAL = XSD_NS + "decimal"
XSD_DATE = XSD_NS + "date"
XSD_BOOLEAN = XSD_NS + "boolean"
XSD_ANY_URI = XSD_NS + "anyURI"
XSD_INTEGER = XSD_NS + "integer"


class PropertyType(Enum):
    STRING = "STRING"
    DECIMAL = "DECIMAL"
    INTEGER = "INTEGER"
    DATE = "DATE"
    BOOLEAN = "BOOLEAN"
    INTEGER_SCALE_1TO5 = "INTEGER_SCALE_1TO5"
    DECIMAL_CM = "DECIMAL_CM"
    UNIT = "UNIT"
    DECIMAL_KG = "DECIMAL_KG"
    DECIMAL_M2 = "DECIMAL_M2"
    DECIMAL_M3 = "DECIMAL_M3"
    CATEGORY = "CATEGORY"
    URL = "URL"
    MULTI_CATEGORY = "MULTI_CATEGORY"
    EMAIL_FORM = "EMAIL_FORM"
    RESOURCE_TYPE = "RESOURCE_TYPE"
    EMISSION = "EMISSION"


_FIXED_RANGE_TYPES = {
    XSD_DATE: PropertyType.DATE,
    XSD_BOOLEAN: PropertyType.BOOLEAN,
    XSD_ANY_URI: PropertyType.URL,
    XSD_INTEGER: PropertyType.INTEGER,
}


def classify_property_type(range_type: Optional[str], name: Optional[str]) -> PropertyType:
    """Map a property's range URI and local name to a PropertyType.

    Datatype ranges are refined by naming conventions (``weight`` -> kg,
    ``volume`` -> m3, ...). Substring checks are case-sensitive and the
    first matching rule wins.
    """
    if range_type is None:
        return PropertyType.STRING
    name = name or ""

    if range_type == XSD_STRING:
        if name == "unit":
            return PropertyType.UNIT
        if name == "resourceType":
            return PropertyType.RESOURCE_TYPE
        return PropertyType.STRING

    if range_type == XSD_DECIMAL:
        if "weight" in name:
            return PropertyType.DECIMAL_KG
        if "volume" in name:
            return PropertyType.DECIMAL_M3
        if "length" in name or "width" in name or "height" in name:
            return PropertyType.DECIMAL_CM
        if "emission" in name:
            return PropertyType.EMISSION
        return PropertyType.DECIMAL

    if range_type in _FIXED_RANGE_TYPES:
        return _FIXED_RANGE_TYPES[range_type]

    # Object-valued or custom range
    if "Manufacturer" in range_type or "Furniture" in range_type:
        return PropertyType.CATEGORY
    if "emission" in name:
        return PropertyType.EMISSION
    if name == "unit":
        return PropertyType.UNIT
    if name == "resourceType":
        return PropertyType.RESOURCE_TYPE
    return PropertyType.STRING


@dataclass(frozen=True)
class PropertyDefinition:
    name: str
    uri: str
    english_label: Optional[str] = None
    norwegian_label: Optional[str] = None
    range_type: Optional[str] = None  # XSD datatype or another class URI
    domain_class: Optional[str] = None  # local name of the owning class
    description: Optional[str] = None

    @property
    def property_type(self) -> PropertyType:
        return classify_property_type(self.range_type, self.name)


@dataclass(frozen=True)
class CategoryInfo:
    class_name: str
    english_name: str
    uri: str
    norwegian_name: Optional[str] = None
    description: Optional[str] = None
    parent_class_name: Optional[str] = None
    properties: tuple[PropertyDefinition, ...] = field(default_factory=tuple)
    children: tuple["CategoryInfo", ...] = field(default_factory=tuple)

    def is_root(self) -> bool:
        return self.parent_class_name is None


@dataclass(frozen=True)
class TaxonomyTree:
    root_categories: tuple[CategoryInfo, ...] = field(default_factory=tuple)

    def iter_categories(self) -> Iterator[CategoryInfo]:
        """Yield every category in pre-order (parent before its children)."""
        stack = list(reversed(self.root_categories))
        while stack:
            category = stack.pop()
            yield category
            stack.extend(reversed(category.children))

    def iter_with_depth(self) -> Iterator[tuple[int, CategoryInfo]]:
        """Like iter_categories, paired with the depth below the roots (roots are 0)."""
        stack = [(0, c) for c in reversed(self.root_categories)]
        while stack:
            depth, category = stack.pop()
            yield depth, category
            stack.extend((depth + 1, c) for c in reversed(category.children))

    def find_by_class_name(self, class_name: str) -> Optional[CategoryInfo]:
        for category in self.iter_categories():
            if category.class_name == class_name:
                return category
        return None

    def count_categories(self) -> int:
        return sum(1 for _ in self.iter_categories())


@dataclass(frozen=True)
class TaxonomyStats:
    total_categories: int
    root_categories: int
