"""
TypeScript code generator implementation.

Renders SchemaNode trees as named TypeScript declarations and renders the
computed content of index modules, using templates.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.module import IndexView
from ...core.naming import NameSanitizer, NamingCase, quote_property, to_pascal_case
from ...core.schema import NodeKind, SchemaNode
from .naming import create_typescript_sanitizer

logger = get_logger(__name__)

EXPORT_PATTERN = re.compile(
    r"^export (?:declare )?(?:interface|type|const|let|class|function|enum) ([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)

PRIMITIVE_TYPES = {
    NodeKind.STRING: "string",
    NodeKind.NUMBER: "number",
    NodeKind.BOOLEAN: "boolean",
    NodeKind.NULL: "null",
    NodeKind.ANY: "any",
}


def _contains_object(node: SchemaNode) -> bool:
    """Check whether a nested object declaration is needed somewhere below ``node``."""
    if node.kind == NodeKind.OBJECT:
        return bool(node.fields) or node.additional_properties
    children = list(node.members)
    if node.items is not None:
        children.append(node.items)
    if node.values is not None:
        children.append(node.values)
    return any(_contains_object(child) for child in children)


def format_literal(value: Any) -> str:
    """Render a primitive as a TypeScript literal type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def escape_doc(line: str) -> str:
    return line.replace("*/", "*\\/").rstrip()


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript declarations."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize TypeScript generator with configuration."""
        super().__init__(config)

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "typescript"

    def get_template_directory(self) -> Path:
        """Return the TypeScript templates directory."""
        return Path(__file__).parent / "templates"

    # Schema declarations

    def type_name(self, name: str) -> str:
        """Declaration name for a definition entry, e.g. ``message-created`` -> ``MessageCreated``."""
        return create_typescript_sanitizer().sanitize_name(name, NamingCase.PASCAL_CASE)

    def to_type_source(self, node: SchemaNode, type_name: str, doc: Sequence[str] = ()) -> str:
        """
        Emit named declarations for ``node``, the top-level one named ``type_name``.

        Nested objects (and arrays, records or unions containing objects)
        are declared separately, named after their parent declaration and
        field. Output is deterministic for a given input.
        """
        sanitizer = create_typescript_sanitizer()
        root_name = sanitizer.claim_name(type_name, NamingCase.PASCAL_CASE)

        declarations: List[Optional[Dict[str, Any]]] = []
        root_doc = self._doc_lines(node) + [escape_doc(line) for line in doc if self.config.add_comments]
        self._declare(node, root_name, root_doc, declarations, sanitizer)

        logger.debug("Rendered %s with %d declaration(s)", root_name, len(declarations))
        return self.render_template(
            "declarations.ts.j2",
            {"declarations": declarations, "indent": self.config.indent},
        )

    def render_object_type(
        self, type_name: str, members: Sequence[Tuple[str, str]], doc: Sequence[str] = ()
    ) -> str:
        """Declare ``type_name`` as an object type whose members reference named types."""
        declaration = {
            "kind": "object",
            "name": type_name,
            "doc": [escape_doc(line) for line in doc] if self.config.add_comments else [],
            "fields": [
                {"key": quote_property(key), "optional": False, "type": member_type, "doc": []}
                for key, member_type in members
            ],
            "index_type": None,
        }
        return self.render_template(
            "declarations.ts.j2",
            {"declarations": [declaration], "indent": self.config.indent},
        )

    def _declare(
        self,
        node: SchemaNode,
        name: str,
        doc: List[str],
        declarations: List[Optional[Dict[str, Any]]],
        sanitizer: NameSanitizer,
    ) -> None:
        # Reserve the slot first so parents precede the declarations they use
        slot = len(declarations)
        declarations.append(None)

        if node.kind == NodeKind.OBJECT:
            fields = []
            for schema_field in node.fields:
                hint = f"{name}{to_pascal_case(schema_field.name) or 'Field'}"
                fields.append(
                    {
                        "key": quote_property(schema_field.name),
                        "optional": schema_field.optional,
                        "type": self._type_expr(schema_field.node, hint, declarations, sanitizer),
                        "doc": self._doc_lines(schema_field.node),
                    }
                )
            declarations[slot] = {
                "kind": "interface",
                "name": name,
                "doc": doc,
                "fields": fields,
                "index_type": "any" if node.additional_properties else None,
            }
        else:
            declarations[slot] = {
                "kind": "alias",
                "name": name,
                "doc": doc,
                "type": self._expand(node, name, declarations, sanitizer),
            }

    def _type_expr(
        self,
        node: SchemaNode,
        hint: str,
        declarations: List[Optional[Dict[str, Any]]],
        sanitizer: NameSanitizer,
    ) -> str:
        """Type expression referencing ``node``, declaring it when needed."""
        if node.kind == NodeKind.OBJECT and not node.fields and not node.additional_properties:
            return "{}"

        if node.kind == NodeKind.UNION and node.is_nullable:
            others = [m for m in node.members if m.kind != NodeKind.NULL]
            if len(others) == 1:
                # T | null keeps the field's own name for T
                return f"{self._type_expr(others[0], hint, declarations, sanitizer)} | null"

        if node.kind == NodeKind.OBJECT or (node.is_composite and _contains_object(node)):
            name = sanitizer.claim_name(hint, NamingCase.PASCAL_CASE)
            self._declare(node, name, [], declarations, sanitizer)
            return name

        return self._expand(node, hint, declarations, sanitizer)

    def _expand(
        self,
        node: SchemaNode,
        name: str,
        declarations: List[Optional[Dict[str, Any]]],
        sanitizer: NameSanitizer,
    ) -> str:
        """Structural type expression of ``node`` itself."""
        if node.kind in PRIMITIVE_TYPES:
            return PRIMITIVE_TYPES[node.kind]

        if node.kind == NodeKind.LITERAL:
            return format_literal(node.literal)

        if node.kind == NodeKind.ARRAY:
            element = self._type_expr(node.items, f"{name}Item", declarations, sanitizer)
            if " " in element:
                return f"Array<{element}>"
            return f"{element}[]"

        if node.kind == NodeKind.RECORD:
            value = self._type_expr(node.values, f"{name}Value", declarations, sanitizer)
            return f"{{ [k: string]: {value} }}"

        if node.kind == NodeKind.UNION:
            parts: List[str] = []
            for index, member in enumerate(node.members, start=1):
                part = self._type_expr(member, f"{name}{index}", declarations, sanitizer)
                if part not in parts:
                    parts.append(part)
            return " | ".join(parts)

        # Objects are only reached through _type_expr
        return self._type_expr(node, name, declarations, sanitizer)

    def exported_names(self, source: str) -> List[str]:
        """Top-level names a TypeScript source exports, e.g. ``export interface Foo`` -> ``Foo``."""
        return EXPORT_PATTERN.findall(source)

    def _doc_lines(self, node: SchemaNode) -> List[str]:
        """Documentation lines for a node: description, then constraint tags."""
        if not self.config.add_comments:
            return []

        lines = []
        if node.description:
            lines.extend(escape_doc(line) for line in node.description.strip().split("\n"))

        for keyword, value in node.constraints.items():
            if value is True:
                lines.append(f"@{keyword}")
            elif isinstance(value, str) and keyword != "default":
                lines.append(escape_doc(f"@{keyword} {value}"))
            else:
                lines.append(escape_doc(f"@{keyword} {json.dumps(value, ensure_ascii=False)}"))
        return lines

    # Index modules and hand-composed files

    def render_index(self, view: IndexView) -> str:
        """Render the content of a re-export or mixed module."""
        aggregate = None
        if view.aggregate is not None:
            aggregate = {
                "name": view.aggregate,
                "doc": [escape_doc(line) for line in view.doc] if self.config.add_comments else [],
                "entries": [
                    {"key": quote_property(entry.key), "type": entry.type_name}
                    for entry in view.entries
                ],
            }

        code = self.render_template(
            "module_index.ts.j2",
            {
                "header": self.config.header,
                "imports": view.imports,
                "content": view.content.strip("\n") if view.content else None,
                "exports": view.exports,
                "aggregate": aggregate,
                "indent": self.config.indent,
            },
        )
        return self.format_code(code)

    def render_secrets(self, mapping: Dict[str, str]) -> str:
        """Render the secrets accessor module."""
        secrets = [{"name": name, "env": env} for name, env in mapping.items()]
        code = self.render_template(
            "secrets.ts.j2",
            {"header": self.config.header, "secrets": secrets, "indent": self.config.indent},
        )
        return self.format_code(code)

    def render_bot_index(
        self, implementation: str, instances: List[Dict[str, str]]
    ) -> str:
        """Render the bot index tying installed instances and bot typings together."""
        code = self.render_template(
            "bot_index.ts.j2",
            {
                "header": self.config.header,
                "sdk_package": self.config.sdk_package,
                "implementation": implementation,
                "instances": instances,
                "indent": self.config.indent,
            },
        )
        return self.format_code(code)

    def render_integration_index(self, exports: List[str]) -> str:
        """Render the integration package index."""
        code = self.render_template(
            "integration_index.ts.j2",
            {"header": self.config.header, "exports": exports},
        )
        return self.format_code(code)

    def render_instance_metadata(self, name: str, version: str, instance_id: str) -> str:
        """Constant declarations describing an installed integration instance."""
        return "\n".join(
            [
                f"export const name = {format_literal(name)}",
                f"export const version = {format_literal(version)}",
                f"export const id = {format_literal(instance_id)}",
            ]
        )


def create_typescript_generator(config: Optional[GeneratorConfig] = None) -> TypeScriptGenerator:
    """Create a TypeScript generator, loading the default configuration when none is given."""
    return TypeScriptGenerator(config)
