"""
Element model for the dashboard widget tree.

Each variant is its own pydantic model keyed by ``type`` so a variant only
carries the fields that make sense for it (a divider never holds a query).
Wire names are camelCase (``positionType``, ``parentId``, ``tableName``);
Python attributes are snake_case.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    TypeAdapter,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import ElementValidationError


ElementType = Literal["text", "image", "chart", "table", "divider", "container"]
ELEMENT_TYPES = ("text", "image", "chart", "table", "divider", "container")
DATA_BOUND_TYPES = ("table", "chart")

PositionType = Literal["absolute", "relative"]
SymbolicSize = Literal["auto", "100%"]
Size = Union[SymbolicSize, PositiveInt, PositiveFloat]
Number = Union[int, float]

TextType = Literal["paragraph", "h1", "h2", "h3"]
TextFormat = Literal["bold", "italic", "underline"]
ChartType = Literal["bar", "line", "pie"]

# Structural fields only change through dedicated actions
PROTECTED_FIELDS = frozenset({"id", "type", "children", "parent_id"})
DERIVED_FIELDS = frozenset({"is_full_width", "is_full_height"})


class ElementBase(BaseModel):
    """Fields shared by every element variant"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str
    x: Number = 0
    y: Number = 0
    width: Size = 200
    height: Size = 150
    position_type: PositionType = "absolute"
    margin: Optional[str] = None
    padding: Optional[str] = None
    styles: Dict[str, Any] = Field(default_factory=dict)
    parent_id: Optional[str] = None
    is_full_width: bool = False
    is_full_height: bool = False

    @model_validator(mode="before")
    @classmethod
    def _mirror_full_size(cls, data: Any) -> Any:
        # isFullWidth/isFullHeight always follow width/height
        if isinstance(data, dict):
            data = dict(data)
            for key in ("is_full_width", "is_full_height", "isFullWidth", "isFullHeight"):
                data.pop(key, None)
            data["isFullWidth"] = data.get("width") == "100%"
            data["isFullHeight"] = data.get("height") == "100%"
        return data

    @property
    def is_container(self) -> bool:
        return self.type == "container"

    @property
    def is_data_bound(self) -> bool:
        return self.type in DATA_BOUND_TYPES


class TextElement(ElementBase):
    """Free text block"""
    type: Literal["text"] = "text"
    content: str = "New Text"
    text_type: TextType = "paragraph"
    text_format: List[TextFormat] = Field(default_factory=list)


class ImageElement(ElementBase):
    """Image; ``content`` holds the source URL"""
    type: Literal["image"] = "image"
    content: str = ""


class DataBoundElement(ElementBase):
    """Element whose ``data`` is the result of running ``query``"""
    table_name: str = ""
    query: str = ""
    data: List[Dict[str, Any]] = Field(default_factory=list)


class ChartElement(DataBoundElement):
    type: Literal["chart"] = "chart"
    chart_type: ChartType = "bar"


class TableElement(DataBoundElement):
    type: Literal["table"] = "table"


class DividerElement(ElementBase):
    type: Literal["divider"] = "divider"


class ContainerElement(ElementBase):
    """Element that lays out the elements listed in ``children``"""
    type: Literal["container"] = "container"
    children: List[str] = Field(default_factory=list)


Element = Annotated[
    Union[
        TextElement,
        ImageElement,
        ChartElement,
        TableElement,
        DividerElement,
        ContainerElement,
    ],
    Field(discriminator="type"),
]

element_adapter: TypeAdapter = TypeAdapter(Element)
element_list_adapter: TypeAdapter = TypeAdapter(List[Element])


class ColumnInfo(BaseModel):
    """One row of ``DESCRIBE <table>`` as returned by the list-tables endpoint"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    field: str = Field(alias="Field")
    type: str = Field(alias="Type")
    null: str = Field("", alias="Null")
    key: str = Field("", alias="Key")
    default: Optional[str] = Field(None, alias="Default")
    extra: str = Field("", alias="Extra")


class TableInfo(BaseModel):
    """Table name plus column structure; read-only"""

    model_config = ConfigDict(frozen=True)

    name: str
    structure: List[ColumnInfo] = Field(default_factory=list)


class Dashboard(BaseModel):
    """Named, ordered collection of elements"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="dashboardName")
    elements: List[Element] = Field(default_factory=list)


def _first_error(exc: PydanticValidationError) -> ElementValidationError:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "element"
    return ElementValidationError(field, error.get("msg", str(exc)))


def parse_element(data: Dict[str, Any]) -> Element:
    """Validate a raw mapping into the matching element variant"""
    try:
        return element_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def parse_elements(items: List[Dict[str, Any]]) -> List[Element]:
    try:
        return element_list_adapter.validate_python(items)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def dump_element(element: ElementBase, include_data: bool = True) -> Dict[str, Any]:
    """Serialize an element with its wire (camelCase) field names"""
    exclude = None if include_data else {"data"}
    return element.model_dump(mode="json", by_alias=True, exclude=exclude)


def dump_elements(elements, include_data: bool = True) -> List[Dict[str, Any]]:
    return [dump_element(el, include_data=include_data) for el in elements]


def normalize_updates(element: ElementBase, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a partial update onto the element's Python field names.

    Keys may use either the wire or the Python spelling. Keys that the
    variant does not have, structural keys and derived flags are dropped.
    """
    fields = type(element).model_fields
    by_alias = {(info.alias or name): name for name, info in fields.items()}

    changes = {}
    for key, value in updates.items():
        name = key if key in fields else by_alias.get(key)
        if name is None or name in PROTECTED_FIELDS or name in DERIVED_FIELDS:
            continue
        changes[name] = value
    return changes


def apply_updates(element: ElementBase, changes: Dict[str, Any]) -> ElementBase:
    """Return a new element with ``changes`` merged in, re-validated"""
    merged = element.model_dump()
    merged.update(changes)
    try:
        return type(element).model_validate(merged)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def replace_fields(element: ElementBase, **changes: Any) -> ElementBase:
    """Structural replacement (children, parent_id, data) used by the reducer"""
    merged = element.model_dump()
    merged.update(changes)
    return type(element).model_validate(merged)
