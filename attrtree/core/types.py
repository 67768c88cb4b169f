"""
Attribute Type Descriptors

Value-less shape descriptors mirroring every Attribute variant:

- Line (scalar) types: bool, integer, float, expression, enumerated, line
- Block (structured) types: code, text, collection, complex,
  enumerable collection, table

Every type is a frozen pydantic model discriminated by ``kind``, so types can
be compared structurally, hashed, and round-tripped through model_dump /
model_validate.
"""

from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, FrozenSet, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field as ModelField, field_serializer, field_validator

if TYPE_CHECKING:
    from .attribute import Attribute


class Language(str, Enum):
    """Source language of expression and code attributes"""

    C = "c"
    CXX = "cxx"
    SWIFT = "swift"
    JAVASCRIPT = "javascript"
    PYTHON = "python"


class AttributeKind(str, Enum):
    """Tag of every Attribute / AttributeType variant"""

    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    EXPRESSION = "expression"
    ENUMERATED = "enumerated"
    LINE = "line"
    CODE = "code"
    TEXT = "text"
    COLLECTION = "collection"
    COMPLEX = "complex"
    ENUMERABLE_COLLECTION = "enumerable_collection"
    TABLE = "table"


LINE_KINDS = frozenset(
    {
        AttributeKind.BOOL,
        AttributeKind.INTEGER,
        AttributeKind.FLOAT,
        AttributeKind.EXPRESSION,
        AttributeKind.ENUMERATED,
        AttributeKind.LINE,
    }
)


# Export names, one per variant. Must stay stable across releases.
TYPE_TAG_NAMES = {
    AttributeKind.BOOL: "BoolAttributeType",
    AttributeKind.INTEGER: "IntegerAttributeType",
    AttributeKind.FLOAT: "FloatAttributeType",
    AttributeKind.EXPRESSION: "ExpressionAttributeType",
    AttributeKind.ENUMERATED: "EnumAttributeType",
    AttributeKind.LINE: "LineAttributeType",
    AttributeKind.CODE: "CodeAttributeType",
    AttributeKind.TEXT: "TextAttributeType",
    AttributeKind.COLLECTION: "CollectionAttributeType",
    AttributeKind.COMPLEX: "ComplexAttributeType",
    AttributeKind.ENUMERABLE_COLLECTION: "EnumCollectionAttributeType",
    AttributeKind.TABLE: "TableAttributeType",
}


class AttributeType(BaseModel):
    """
    Attribute type (base class)

    Concrete types are the subclasses below; ``kind`` identifies the variant.
    """

    model_config = ConfigDict(frozen=True)

    kind: str

    @property
    def attribute_kind(self) -> AttributeKind:
        return AttributeKind(self.kind)

    @property
    def is_line(self) -> bool:
        return self.attribute_kind in LINE_KINDS

    @property
    def is_block(self) -> bool:
        return not self.is_line

    @property
    def is_recursive(self) -> bool:
        """Whether the type contains other attributes (collection, complex, table)"""
        return self.attribute_kind in (
            AttributeKind.COLLECTION,
            AttributeKind.COMPLEX,
            AttributeKind.TABLE,
        )

    @property
    def is_table(self) -> bool:
        return self.attribute_kind == AttributeKind.TABLE

    @property
    def tag_name(self) -> str:
        """Export name of this type"""
        return TYPE_TAG_NAMES[self.attribute_kind]

    def describe(self) -> str:
        """Short human readable description, used in error messages"""
        return self.kind

    def default_value(self) -> "Attribute":
        """The value a freshly created attribute of this type holds"""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()


class LineAttributeType(AttributeType):
    """Scalar attribute type"""

    def parse(self, text: str) -> Optional["Attribute"]:
        """
        Build an attribute of this type from its textual form

        Returns:
            The attribute, or None when the text is not a valid value
        """
        raise NotImplementedError


class BlockAttributeType(AttributeType):
    """Structured attribute type"""

    pass


class BoolType(LineAttributeType):
    kind: Literal["bool"] = "bool"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=False)

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        if text not in ("true", "false"):
            return None
        return Attribute(type=self, value=text == "true")


class IntegerType(LineAttributeType):
    kind: Literal["integer"] = "integer"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=0)

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        try:
            return Attribute(type=self, value=int(text))
        except ValueError:
            return None


class FloatType(LineAttributeType):
    kind: Literal["float"] = "float"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=0.0)

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        try:
            return Attribute(type=self, value=float(text))
        except ValueError:
            return None


class ExpressionType(LineAttributeType):
    kind: Literal["expression"] = "expression"
    language: Language

    def describe(self) -> str:
        return f"expression({self.language.value})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value="")

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        return Attribute(type=self, value=text)


class EnumeratedType(LineAttributeType):
    kind: Literal["enumerated"] = "enumerated"
    valid_values: FrozenSet[str]

    @field_serializer("valid_values")
    def serialize_valid_values(self, v):
        return sorted(v)

    def describe(self) -> str:
        return f"enumerated({', '.join(sorted(self.valid_values))})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        first = min(self.valid_values) if self.valid_values else ""
        return Attribute(type=self, value=first)

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        if text not in self.valid_values:
            return None
        return Attribute(type=self, value=text)


class LineType(LineAttributeType):
    kind: Literal["line"] = "line"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value="")

    def parse(self, text: str) -> Optional["Attribute"]:
        from .attribute import Attribute

        return Attribute(type=self, value=text)


class CodeType(BlockAttributeType):
    kind: Literal["code"] = "code"
    language: Language

    def describe(self) -> str:
        return f"code({self.language.value})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value="")


class TextType(BlockAttributeType):
    kind: Literal["text"] = "text"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value="")


class CollectionType(BlockAttributeType):
    """Homogeneous collection; every element has ``element_type``"""

    kind: Literal["collection"] = "collection"
    element_type: "AttributeTypeUnion"

    def describe(self) -> str:
        return f"collection({self.element_type.describe()})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=())


class Field(BaseModel):
    """A labelled slot of a complex layout"""

    model_config = ConfigDict(frozen=True)

    name: str
    type: "AttributeTypeUnion"


class ComplexType(BlockAttributeType):
    """Record with an ordered field layout"""

    kind: Literal["complex"] = "complex"
    layout: Tuple[Field, ...] = ()

    @field_validator("layout")
    @classmethod
    def validate_unique_labels(cls, v):
        names = [field.name for field in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field labels: {', '.join(duplicates)}")
        return v

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.layout)

    def field_type(self, label: str) -> Optional[AttributeType]:
        for field in self.layout:
            if field.name == label:
                return field.type
        return None

    def describe(self) -> str:
        return f"complex({', '.join(self.labels)})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        values = {field.name: field.type.default_value() for field in self.layout}
        return Attribute(type=self, value=values)


class EnumerableCollectionType(BlockAttributeType):
    kind: Literal["enumerable_collection"] = "enumerable_collection"
    valid_values: FrozenSet[str]

    @field_serializer("valid_values")
    def serialize_valid_values(self, v):
        return sorted(v)

    def describe(self) -> str:
        return f"enumerable_collection({', '.join(sorted(self.valid_values))})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=frozenset())


LineAttributeTypeUnion = Annotated[
    Union[BoolType, IntegerType, FloatType, ExpressionType, EnumeratedType, LineType],
    ModelField(discriminator="kind"),
]


class TableColumn(BaseModel):
    """A named, line-typed table column"""

    model_config = ConfigDict(frozen=True)

    name: str
    type: LineAttributeTypeUnion


class TableType(BlockAttributeType):
    kind: Literal["table"] = "table"
    columns: Tuple[TableColumn, ...] = ()

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def describe(self) -> str:
        return f"table({', '.join(self.column_names)})"

    def default_value(self) -> "Attribute":
        from .attribute import Attribute

        return Attribute(type=self, value=())


AttributeTypeUnion = Annotated[
    Union[
        BoolType,
        IntegerType,
        FloatType,
        ExpressionType,
        EnumeratedType,
        LineType,
        CodeType,
        TextType,
        CollectionType,
        ComplexType,
        EnumerableCollectionType,
        TableType,
    ],
    ModelField(discriminator="kind"),
]

CollectionType.model_rebuild()
Field.model_rebuild()
ComplexType.model_rebuild()


def columns(*pairs: Tuple[str, Any]) -> Tuple[TableColumn, ...]:
    """Build table columns from ``(name, line_type)`` pairs"""
    return tuple(TableColumn(name=name, type=column_type) for name, column_type in pairs)


def layout(*pairs: Tuple[str, Any]) -> Tuple[Field, ...]:
    """Build a complex layout from ``(label, type)`` pairs"""
    return tuple(Field(name=name, type=field_type) for name, field_type in pairs)
