"""
Core schema representation for code generation.

Converts JSON Schema documents into a normalized, immutable internal
format (SchemaNode) that generators can render consistently.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple
from enum import Enum

from ...logging_config import get_logger
from .errors import UnsupportedSchemaError

logger = get_logger(__name__)

SchemaResolver = Callable[[str], Awaitable[Dict[str, Any]]]

DEFAULT_MAX_REF_DEPTH = 16

# Keywords kept as documentation rather than structure
CONSTRAINT_KEYWORDS = (
    "minLength",
    "maxLength",
    "pattern",
    "format",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minItems",
    "maxItems",
    "default",
)

UNSUPPORTED_KEYWORDS = ("not", "if", "then", "else", "prefixItems")


class NodeKind(Enum):
    """Structural kinds of the intermediate representation."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    RECORD = "record"
    UNION = "union"
    LITERAL = "literal"
    ANY = "any"


PRIMITIVE_KINDS = {
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "integer": NodeKind.NUMBER,
    "boolean": NodeKind.BOOLEAN,
    "null": NodeKind.NULL,
}


@dataclass(frozen=True)
class SchemaField:
    """A named member of an object node."""

    name: str
    node: "SchemaNode"
    optional: bool = False


@dataclass(frozen=True)
class SchemaNode:
    """Immutable structural representation of one schema."""

    kind: NodeKind
    fields: Tuple[SchemaField, ...] = ()

    # For arrays
    items: Optional["SchemaNode"] = None

    # For records
    values: Optional["SchemaNode"] = None

    # For unions
    members: Tuple["SchemaNode", ...] = ()

    # For literals
    literal: Any = None

    # Objects that also accept unknown keys
    additional_properties: bool = False

    description: Optional[str] = None
    constraints: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_composite(self) -> bool:
        """Whether rendering this node may require a named declaration."""
        return self.kind in (NodeKind.OBJECT, NodeKind.ARRAY, NodeKind.RECORD, NodeKind.UNION)

    @property
    def is_nullable(self) -> bool:
        """Whether ``null`` is one of the accepted values."""
        if self.kind == NodeKind.NULL:
            return True
        return self.kind == NodeKind.UNION and any(m.kind == NodeKind.NULL for m in self.members)

    def get_field(self, name: str) -> Optional[SchemaField]:
        """Get field by name."""
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def depth(self) -> int:
        """Get maximum nesting depth of this node."""
        children: List[SchemaNode] = [f.node for f in self.fields]
        children.extend(m for m in self.members)
        if self.items is not None:
            children.append(self.items)
        if self.values is not None:
            children.append(self.values)
        return 1 + max((child.depth() for child in children), default=0)


def _is_primitive_literal(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


class _Converter:
    """Recursive JSON Schema -> SchemaNode conversion for one root document."""

    def __init__(self, root: Any, resolver: Optional[SchemaResolver], max_ref_depth: int):
        self.root = root
        self.resolver = resolver
        self.max_ref_depth = max_ref_depth

    async def convert(self, schema: Any, location: str, ref_depth: int = 0) -> SchemaNode:
        if schema is True:
            return SchemaNode(kind=NodeKind.ANY)
        if schema is False:
            raise UnsupportedSchemaError("Schema 'false' accepts no value", location)
        if not isinstance(schema, Mapping):
            raise UnsupportedSchemaError(
                f"Expected a schema object, got {type(schema).__name__}", location
            )

        for keyword in UNSUPPORTED_KEYWORDS:
            if keyword in schema:
                raise UnsupportedSchemaError(f"Keyword '{keyword}' is not supported", location)

        if "$ref" in schema:
            node = await self._convert_ref(schema, location, ref_depth)
        else:
            node = await self._convert_structure(schema, location, ref_depth)

        if schema.get("nullable") is True:
            node = _with_null(node)
        return node

    async def _convert_structure(self, schema: Mapping, location: str, ref_depth: int) -> SchemaNode:
        description = schema.get("description")
        constraints = {k: schema[k] for k in CONSTRAINT_KEYWORDS if k in schema}

        if "const" in schema:
            return self._literal(schema["const"], f"{location}/const", description)

        if "enum" in schema:
            values = schema["enum"]
            if not isinstance(values, list) or not values:
                raise UnsupportedSchemaError("'enum' must be a non-empty list", f"{location}/enum")
            literals = tuple(
                self._literal(value, f"{location}/enum/{index}")
                for index, value in enumerate(values)
            )
            if len(literals) == 1:
                return SchemaNode(
                    kind=NodeKind.LITERAL, literal=literals[0].literal, description=description
                )
            return SchemaNode(kind=NodeKind.UNION, members=literals, description=description)

        for keyword in ("anyOf", "oneOf"):
            if keyword in schema:
                return await self._convert_union(schema, keyword, location, ref_depth, description)

        if "allOf" in schema:
            return await self._convert_all_of(schema, location, ref_depth, description)

        schema_type = schema.get("type")

        if isinstance(schema_type, list):
            return await self._convert_type_list(schema, schema_type, location, ref_depth, description)

        if schema_type is None:
            if "properties" in schema or "additionalProperties" in schema:
                schema_type = "object"
            elif "items" in schema:
                schema_type = "array"
            else:
                return SchemaNode(kind=NodeKind.ANY, description=description, constraints=constraints)

        if schema_type == "object":
            return await self._convert_object(schema, location, ref_depth, description, constraints)

        if schema_type == "array":
            return await self._convert_array(schema, location, ref_depth, description, constraints)

        if schema_type in PRIMITIVE_KINDS:
            if schema_type == "integer":
                constraints["integer"] = True
            return SchemaNode(
                kind=PRIMITIVE_KINDS[schema_type],
                description=description,
                constraints=constraints,
            )

        raise UnsupportedSchemaError(f"Unknown schema type '{schema_type}'", f"{location}/type")

    async def _convert_object(
        self,
        schema: Mapping,
        location: str,
        ref_depth: int,
        description: Optional[str],
        constraints: Dict[str, Any],
    ) -> SchemaNode:
        properties = schema.get("properties") or {}
        required = set(schema.get("required") or [])
        additional = schema.get("additionalProperties", True)

        if not properties:
            if additional is False:
                return SchemaNode(kind=NodeKind.OBJECT, description=description, constraints=constraints)
            if isinstance(additional, Mapping) and additional:
                values = await self.convert(additional, f"{location}/additionalProperties", ref_depth)
            else:
                values = SchemaNode(kind=NodeKind.ANY)
            return SchemaNode(
                kind=NodeKind.RECORD, values=values, description=description, constraints=constraints
            )

        fields = []
        for name, prop_schema in properties.items():
            prop_node = await self.convert(prop_schema, f"{location}/properties/{name}", ref_depth)
            fields.append(SchemaField(name=name, node=prop_node, optional=name not in required))

        # Only an explicit opt-in opens the object to unknown keys
        open_object = isinstance(additional, Mapping) or (
            additional is True and "additionalProperties" in schema
        )
        return SchemaNode(
            kind=NodeKind.OBJECT,
            fields=tuple(fields),
            additional_properties=open_object,
            description=description,
            constraints=constraints,
        )

    async def _convert_array(
        self,
        schema: Mapping,
        location: str,
        ref_depth: int,
        description: Optional[str],
        constraints: Dict[str, Any],
    ) -> SchemaNode:
        items = schema.get("items")
        if isinstance(items, list):
            raise UnsupportedSchemaError("Tuple arrays are not supported", f"{location}/items")
        if items is None:
            items_node = SchemaNode(kind=NodeKind.ANY)
        else:
            items_node = await self.convert(items, f"{location}/items", ref_depth)
        return SchemaNode(
            kind=NodeKind.ARRAY, items=items_node, description=description, constraints=constraints
        )

    async def _convert_union(
        self,
        schema: Mapping,
        keyword: str,
        location: str,
        ref_depth: int,
        description: Optional[str],
    ) -> SchemaNode:
        options = schema[keyword]
        if not isinstance(options, list) or not options:
            raise UnsupportedSchemaError(f"'{keyword}' must be a non-empty list", f"{location}/{keyword}")

        members = []
        for index, option in enumerate(options):
            member = await self.convert(option, f"{location}/{keyword}/{index}", ref_depth)
            if member.kind == NodeKind.UNION and member.description is None:
                members.extend(member.members)
            else:
                members.append(member)

        if len(members) == 1:
            only = members[0]
            return only if description is None else _with_description(only, description)
        return SchemaNode(kind=NodeKind.UNION, members=tuple(members), description=description)

    async def _convert_all_of(
        self, schema: Mapping, location: str, ref_depth: int, description: Optional[str]
    ) -> SchemaNode:
        parts = schema["allOf"]
        if not isinstance(parts, list) or not parts:
            raise UnsupportedSchemaError("'allOf' must be a non-empty list", f"{location}/allOf")

        nodes = [
            await self.convert(part, f"{location}/allOf/{index}", ref_depth)
            for index, part in enumerate(parts)
        ]
        if len(nodes) == 1:
            only = nodes[0]
            return only if description is None else _with_description(only, description)

        merged: Dict[str, SchemaField] = {}
        additional = False
        for index, node in enumerate(nodes):
            if node.kind != NodeKind.OBJECT:
                raise UnsupportedSchemaError(
                    f"'allOf' member of kind '{node.kind.value}' cannot be merged",
                    f"{location}/allOf/{index}",
                )
            additional = additional or node.additional_properties
            for schema_field in node.fields:
                previous = merged.get(schema_field.name)
                optional = schema_field.optional and (previous is None or previous.optional)
                merged[schema_field.name] = SchemaField(
                    name=schema_field.name, node=schema_field.node, optional=optional
                )

        return SchemaNode(
            kind=NodeKind.OBJECT,
            fields=tuple(merged.values()),
            additional_properties=additional,
            description=description,
        )

    async def _convert_type_list(
        self,
        schema: Mapping,
        types: list,
        location: str,
        ref_depth: int,
        description: Optional[str],
    ) -> SchemaNode:
        if not types:
            raise UnsupportedSchemaError("'type' list is empty", f"{location}/type")

        structured = [t for t in types if t in ("object", "array")]
        non_null = [t for t in types if t != "null"]
        if structured and len(non_null) > 1:
            raise UnsupportedSchemaError(
                f"Type list {types} mixes structured and primitive kinds", f"{location}/type"
            )

        if structured and len(non_null) < len(types):
            # ["object", "null"]: the structured kind, made nullable
            single = dict(schema)
            single["type"] = structured[0]
            return _with_null(await self._convert_structure(single, location, ref_depth))

        if len(types) == 1:
            single = dict(schema)
            single["type"] = types[0]
            return await self._convert_structure(single, location, ref_depth)

        members = []
        for schema_type in types:
            if schema_type not in PRIMITIVE_KINDS:
                raise UnsupportedSchemaError(f"Unknown schema type '{schema_type}'", f"{location}/type")
            single = dict(schema)
            single["type"] = schema_type
            single.pop("description", None)
            members.append(await self._convert_structure(single, location, ref_depth))

        return SchemaNode(kind=NodeKind.UNION, members=tuple(members), description=description)

    async def _convert_ref(self, schema: Mapping, location: str, ref_depth: int) -> SchemaNode:
        ref = schema["$ref"]
        if ref_depth >= self.max_ref_depth:
            raise UnsupportedSchemaError(
                f"Reference '{ref}' exceeds the maximum depth of {self.max_ref_depth} "
                "(recursive schemas are not supported)",
                location,
            )

        if isinstance(ref, str) and ref.startswith("#"):
            target = self._resolve_pointer(ref, location)
        elif self.resolver is not None:
            logger.debug("Resolving external reference %s", ref)
            target = await self.resolver(ref)
        else:
            raise UnsupportedSchemaError(f"Cannot resolve external reference '{ref}'", location)

        node = await self.convert(target, location, ref_depth + 1)
        if "description" in schema:
            node = _with_description(node, schema["description"])
        return node

    def _resolve_pointer(self, ref: str, location: str) -> Any:
        target = self.root
        for token in ref[1:].split("/"):
            if not token:
                continue
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(target, Mapping) and token in target:
                target = target[token]
            elif isinstance(target, list) and token.isdigit() and int(token) < len(target):
                target = target[int(token)]
            else:
                raise UnsupportedSchemaError(f"Unresolvable reference '{ref}'", location)
        return target

    def _literal(self, value: Any, location: str, description: Optional[str] = None) -> SchemaNode:
        if not _is_primitive_literal(value):
            raise UnsupportedSchemaError(
                f"Literal of type {type(value).__name__} has no mapping", location
            )
        if value is None:
            return SchemaNode(kind=NodeKind.NULL, description=description)
        return SchemaNode(kind=NodeKind.LITERAL, literal=value, description=description)


def _with_null(node: SchemaNode) -> SchemaNode:
    """Accept ``null`` in addition to ``node``; the description moves to the union."""
    if node.is_nullable or node.kind == NodeKind.ANY:
        return node
    return SchemaNode(
        kind=NodeKind.UNION,
        members=(_with_description(node, None), SchemaNode(kind=NodeKind.NULL)),
        description=node.description,
    )


def _with_description(node: SchemaNode, description: Optional[str]) -> SchemaNode:
    return SchemaNode(
        kind=node.kind,
        fields=node.fields,
        items=node.items,
        values=node.values,
        members=node.members,
        literal=node.literal,
        additional_properties=node.additional_properties,
        description=description,
        constraints=node.constraints,
    )


async def to_intermediate(
    schema: Any,
    resolver: Optional[SchemaResolver] = None,
    max_ref_depth: int = DEFAULT_MAX_REF_DEPTH,
) -> SchemaNode:
    """
    Convert a JSON Schema document to the internal SchemaNode representation.

    Args:
        schema: JSON Schema as a dict (``True`` is accepted as "anything")
        resolver: Coroutine resolving non-local ``$ref`` URIs to schemas
        max_ref_depth: Maximum nesting of ``$ref`` expansions

    Returns:
        SchemaNode: Immutable structural representation

    Raises:
        UnsupportedSchemaError: On constructs without a defined mapping
    """
    converter = _Converter(schema, resolver, max_ref_depth)
    return await converter.convert(schema, "#")
