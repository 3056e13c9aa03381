"""TypeScript declaration serializer for Kysely."""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from ..config import CodegenConfig, RuntimeEnumsStyle
from ..database.data_types import ArrayOf, DataType, Domain, EnumRef, Scalar, ScalarKind, Unknown
from .transformer import (
    TransformedColumn,
    TransformedDatabase,
    TransformedTable,
    is_identifier,
    to_pascal_case,
    to_screaming_snake_case,
)

HEADER = """/**
 * This file was generated by kysely-codegen.
 * Please do not edit it manually.
 */"""

COLUMN_TYPE = ("kysely", "ColumnType")
POSTGRES_INTERVAL = ("postgres-interval", "IPostgresInterval")

# name -> (declaration, definitions it references, imports it needs)
DEFINITIONS: Dict[str, Tuple[str, Tuple[str, ...], Tuple[Tuple[str, str], ...]]] = {
    "ArrayType": (
        "export type ArrayType<T> = ArrayTypeImpl<T> extends (infer U)[]\n"
        "  ? U[]\n"
        "  : ArrayTypeImpl<T>;",
        ("ArrayTypeImpl",),
        (),
    ),
    "ArrayTypeImpl": (
        "export type ArrayTypeImpl<T> = T extends ColumnType<infer S, infer I, infer U>\n"
        "  ? ColumnType<S[], I[], U[]>\n"
        "  : T[];",
        (),
        (COLUMN_TYPE,),
    ),
    "Generated": (
        "export type Generated<T> = T extends ColumnType<infer S, infer I, infer U>\n"
        "  ? ColumnType<S, I | undefined, U>\n"
        "  : ColumnType<T, T | undefined, T>;",
        (),
        (COLUMN_TYPE,),
    ),
    "GeneratedAlways": (
        "export type GeneratedAlways<T> = ColumnType<T, never, never>;",
        (),
        (COLUMN_TYPE,),
    ),
    "Int8": (
        "export type Int8 = ColumnType<string, bigint | number | string, bigint | number | string>;",
        (),
        (COLUMN_TYPE,),
    ),
    "Interval": (
        "export type Interval = ColumnType<IPostgresInterval, IPostgresInterval | number | string, "
        "IPostgresInterval | number | string>;",
        (),
        (COLUMN_TYPE, POSTGRES_INTERVAL),
    ),
    "Json": ("export type Json = JsonValue;", ("JsonValue",), ()),
    "JsonArray": ("export type JsonArray = JsonValue[];", (), ()),
    "JsonObject": (
        "export type JsonObject = {\n"
        "  [x: string]: JsonValue | undefined;\n"
        "};",
        (),
        (),
    ),
    "JsonPrimitive": ("export type JsonPrimitive = boolean | number | string | null;", (), ()),
    "JsonValue": (
        "export type JsonValue = JsonArray | JsonObject | JsonPrimitive;",
        ("JsonArray", "JsonObject", "JsonPrimitive"),
        (),
    ),
    "Numeric": (
        "export type Numeric = ColumnType<string, number | string, number | string>;",
        (),
        (COLUMN_TYPE,),
    ),
    "Timestamp": (
        "export type Timestamp = ColumnType<Date, Date | string, Date | string>;",
        (),
        (COLUMN_TYPE,),
    ),
}

# Definitions built on ColumnType; arrays of them go through ArrayType
COLUMN_TYPE_DEFINITIONS = {"Int8", "Interval", "Numeric", "Timestamp"}

SCALAR_TYPES: Dict[ScalarKind, str] = {
    ScalarKind.STRING: "string",
    ScalarKind.DATE_STRING: "string",
    ScalarKind.NUMBER: "number",
    ScalarKind.NUMBER_OR_STRING: "number | string",
    ScalarKind.BOOLEAN: "boolean",
    ScalarKind.BUFFER: "Buffer",
}

SCALAR_DEFINITIONS: Dict[ScalarKind, str] = {
    ScalarKind.BIGINT: "Int8",
    ScalarKind.NUMERIC_STRING: "Numeric",
    ScalarKind.DATE_TIMESTAMP: "Timestamp",
    ScalarKind.INTERVAL: "Interval",
    ScalarKind.JSON: "Json",
}


@dataclass
class _RenderState:
    """What one ``serialize`` call has referenced so far."""
    definitions: Set[str] = field(default_factory=set)
    domains: Dict[str, Domain] = field(default_factory=dict)


class Serializer:
    """Renders a transformed database into declaration text.

    Output is a pure function of the input: no clock, no environment, and
    every section has a fixed order, so equal inputs give byte-equal text.
    """

    def __init__(self, config: CodegenConfig):
        self.config = config

    def serialize(self, database: TransformedDatabase) -> str:
        state = _RenderState()

        enum_blocks = [
            self.serialize_enum(database.enum_names[identity], labels)
            for identity, labels in database.metadata.enums.items()
        ]
        interface_blocks = [self.serialize_table(table, database, state) for table in database.tables]
        db_block = self.serialize_db(database.tables)

        definition_blocks = self._definition_blocks(database, state)
        imports = self._imports(state.definitions)

        blocks = [HEADER]
        if imports:
            blocks.append("\n".join(imports))
        blocks.extend(enum_blocks)
        blocks.extend(definition_blocks)
        blocks.extend(interface_blocks)
        blocks.append(db_block)
        return "\n\n".join(blocks) + "\n"

    def serialize_enum(self, name: str, labels: List[str]) -> str:
        style = self.config.runtime_enums
        if style is None:
            union = " | ".join(json.dumps(label) for label in labels) or "never"
            return f"export type {name} = {union};"

        lines = [f"export enum {name} {{"]
        for label in labels:
            if style == RuntimeEnumsStyle.PASCAL_CASE:
                member = to_pascal_case(label)
            else:
                member = to_screaming_snake_case(label)
            lines.append(f"  {member} = {json.dumps(label)},")
        lines.append("}")
        return "\n".join(lines)

    def serialize_table(self, table: TransformedTable, database: TransformedDatabase, state: _RenderState) -> str:
        lines = []
        if table.table.comment:
            lines.extend(self._doc_comment(table.table.comment, indent=""))

        if not table.columns:
            lines.append(f"export interface {table.interface_name} {{}}")
            return "\n".join(lines)

        # Properties are sorted by printed name; metadata keeps catalog order
        lines.append(f"export interface {table.interface_name} {{")
        for column in sorted(table.columns, key=lambda column: column.name):
            if column.column.comment:
                lines.extend(self._doc_comment(column.column.comment, indent="  "))
            lines.append(f"  {self._property_key(column.name)}: {self.column_type(column, database, state)};")
        lines.append("}")
        return "\n".join(lines)

    def serialize_db(self, tables: List[TransformedTable]) -> str:
        if not tables:
            return "export interface DB {}"
        lines = ["export interface DB {"]
        for table in tables:
            lines.append(f"  {self._property_key(table.key)}: {table.interface_name};")
        lines.append("}")
        return "\n".join(lines)

    def column_type(self, column: TransformedColumn, database: TransformedDatabase, state: _RenderState) -> str:
        """Type expression of one property.

        An override is printed verbatim. Otherwise nullable columns get
        ``| null``, then always-generated columns are wrapped in
        ``GeneratedAlways`` and defaulted or auto-incrementing ones in
        ``Generated``.
        """
        if column.type_override is not None:
            return column.type_override

        metadata = column.column
        expression = self.render_type(metadata.data_type, database, state)
        if metadata.is_nullable:
            expression = f"{expression} | null"

        if metadata.is_generated:
            state.definitions.add("GeneratedAlways")
            return f"GeneratedAlways<{expression}>"
        if metadata.has_default_value or metadata.is_auto_incrementing:
            state.definitions.add("Generated")
            return f"Generated<{expression}>"
        return expression

    def render_type(self, data_type: DataType, database: TransformedDatabase, state: _RenderState) -> str:
        if isinstance(data_type, Scalar):
            if data_type.kind in SCALAR_DEFINITIONS:
                name = SCALAR_DEFINITIONS[data_type.kind]
                state.definitions.add(name)
                return name
            return SCALAR_TYPES[data_type.kind]

        if isinstance(data_type, ArrayOf):
            element = self.render_type(data_type.element, database, state)
            if element in COLUMN_TYPE_DEFINITIONS:
                state.definitions.add("ArrayType")
                return f"ArrayType<{element}>"
            if " | " in element:
                return f"({element})[]"
            return f"{element}[]"

        if isinstance(data_type, EnumRef):
            return database.enum_names[data_type.identity]

        if isinstance(data_type, Domain):
            state.domains.setdefault(data_type.qualified_name, data_type)
            return database.domain_names[data_type.qualified_name]

        if isinstance(data_type, Unknown):
            return "unknown"

        raise TypeError(f"Unsupported data type: {data_type!r}")

    def _definition_blocks(self, database: TransformedDatabase, state: _RenderState) -> List[str]:
        declarations: Dict[str, str] = {}

        # Domain aliases can reference further domains and definitions
        rendered: Set[str] = set()
        while len(rendered) < len(state.domains):
            for qualified_name, domain in list(state.domains.items()):
                if qualified_name in rendered:
                    continue
                rendered.add(qualified_name)
                name = database.domain_names[qualified_name]
                underlying = self.render_type(domain.underlying, database, state)
                declarations[name] = f"export type {name} = {underlying};"

        state.definitions = self._definition_closure(state.definitions)
        for name in state.definitions:
            declarations[name] = DEFINITIONS[name][0]

        return [declarations[name] for name in sorted(declarations)]

    @staticmethod
    def _definition_closure(names: Set[str]) -> Set[str]:
        pending = list(names)
        closure: Set[str] = set()
        while pending:
            name = pending.pop()
            if name in closure:
                continue
            closure.add(name)
            pending.extend(DEFINITIONS[name][1])
        return closure

    def _imports(self, definitions: Set[str]) -> List[str]:
        modules: Dict[str, Set[str]] = {}
        for name in definitions:
            for module, symbol in DEFINITIONS[name][2]:
                modules.setdefault(module, set()).add(symbol)

        keyword = "import type" if self.config.type_only_imports else "import"
        return [
            f'{keyword} {{ {", ".join(sorted(symbols))} }} from "{module}";'
            for module, symbols in sorted(modules.items())
        ]

    @staticmethod
    def _property_key(name: str) -> str:
        return name if is_identifier(name) else json.dumps(name)

    @staticmethod
    def _doc_comment(text: str, indent: str) -> List[str]:
        lines = [f"{indent}/**"]
        for line in text.replace("*/", "*\\/").splitlines() or [""]:
            lines.append(f"{indent} * {line}".rstrip())
        lines.append(f"{indent} */")
        return lines
