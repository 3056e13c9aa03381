"""Name transformation: overrides, singularization, case conversion.

Turns introspected metadata into the names the serializer prints. The
rules run in a fixed order for every entity: an override wins outright,
otherwise the name is singularized (tables only) and then case-converted.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import CodegenConfig
from ..database.data_types import ArrayOf, DataType, Domain
from ..database.models import ColumnMetadata, DatabaseMetadata, TableMetadata
from .singularize import Singularizer, build_singularizer

logger = logging.getLogger(__name__)

WORD_SEPARATOR = re.compile(r"[^A-Za-z0-9]+")
SNAKE_BOUNDARY = re.compile(r"(?<=[A-Za-z0-9])[_\-\s]+([A-Za-z0-9])")
CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Names the serializer declares or imports itself
BUILTIN_TYPE_NAMES = frozenset({
    "ArrayType",
    "ArrayTypeImpl",
    "ColumnType",
    "DB",
    "Generated",
    "GeneratedAlways",
    "IPostgresInterval",
    "Int8",
    "Interval",
    "Json",
    "JsonArray",
    "JsonObject",
    "JsonPrimitive",
    "JsonValue",
    "Numeric",
    "Timestamp",
})


def to_pascal_case(name: str) -> str:
    """``user_status`` -> ``UserStatus``; all-caps words are lowered first."""
    words = []
    for word in WORD_SEPARATOR.split(name):
        if not word:
            continue
        if word.isupper():
            word = word.lower()
        words.append(word[0].upper() + word[1:])
    result = "".join(words)
    if not result or result[0].isdigit():
        result = "_" + result
    return result


def to_camel_case(name: str) -> str:
    """``bacchus_id`` -> ``bacchusId``. Leading underscores are kept."""
    if name.isupper():
        name = name.lower()
    return SNAKE_BOUNDARY.sub(lambda match: match.group(1).upper(), name)


def to_screaming_snake_case(name: str) -> str:
    """``inProgress`` / ``in progress`` -> ``IN_PROGRESS``."""
    words = [word for word in WORD_SEPARATOR.split(CAMEL_BOUNDARY.sub("_", name)) if word]
    result = "_".join(word.upper() for word in words)
    if not result or result[0].isdigit():
        result = "_" + result
    return result


def is_identifier(name: str) -> bool:
    return IDENTIFIER.match(name) is not None


@dataclass
class TransformedColumn:
    """A column with its printed property name and optional type override."""
    name: str
    column: ColumnMetadata
    type_override: Optional[str] = None


@dataclass
class TransformedTable:
    """A table with its interface name and its key in the ``DB`` interface."""
    interface_name: str
    key: str
    table: TableMetadata
    columns: List[TransformedColumn] = field(default_factory=list)


@dataclass
class TransformedDatabase:
    """Everything the serializer needs: metadata plus the computed names."""
    metadata: DatabaseMetadata
    tables: List[TransformedTable] = field(default_factory=list)
    enum_names: Dict[str, str] = field(default_factory=dict)
    domain_names: Dict[str, str] = field(default_factory=dict)


class NameTransformer:
    """Computes every printed name for one run.

    Args:
        config: Validated options; ``camel_case``, ``singularize`` and
            ``overrides`` are read here
        default_schemas: Schemas whose tables and types are printed without
            a schema prefix
    """

    def __init__(self, config: CodegenConfig, default_schemas: Sequence[str] = ()):
        self.config = config
        self.default_schemas = list(default_schemas)
        self.singularizer: Optional[Singularizer] = build_singularizer(config.singularize)

    def transform(self, metadata: DatabaseMetadata) -> TransformedDatabase:
        result = TransformedDatabase(metadata=metadata)
        for identity, _labels in metadata.enums.items():
            result.enum_names[identity] = self.enum_name(identity)
        for table in metadata.tables:
            result.tables.append(self.transform_table(table))
            for column in table.columns:
                self._collect_domains(column.data_type, result.domain_names)

        interface_names = [table.interface_name for table in result.tables]
        duplicates = sorted({name for name in interface_names if interface_names.count(name) > 1})
        if duplicates:
            logger.warning("Several tables map to the same interface name: %s", ", ".join(duplicates))
        return result

    def transform_table(self, table: TableMetadata) -> TransformedTable:
        return TransformedTable(
            interface_name=self.interface_name(table),
            key=self.table_key(table),
            table=table,
            columns=[self.transform_column(table, column) for column in table.columns],
        )

    def transform_column(self, table: TableMetadata, column: ColumnMetadata) -> TransformedColumn:
        return TransformedColumn(
            name=to_camel_case(column.name) if self.config.camel_case else column.name,
            column=column,
            type_override=self._column_override(table, column),
        )

    def interface_name(self, table: TableMetadata) -> str:
        """Override, else singularized PascalCase name with a schema prefix when needed."""
        overrides = self.config.overrides.tables
        for key in (table.qualified_name, table.name):
            if key in overrides:
                return overrides[key]

        name = self.singularize(table.name)
        if self._needs_prefix(table.schema):
            return to_pascal_case(table.schema) + to_pascal_case(name)
        return to_pascal_case(name)

    def table_key(self, table: TableMetadata) -> str:
        name = to_camel_case(table.name) if self.config.camel_case else table.name
        if self._needs_prefix(table.schema):
            schema = to_camel_case(table.schema) if self.config.camel_case else table.schema
            return f"{schema}.{name}"
        return name

    def enum_name(self, identity: str) -> str:
        schema, _, name = identity.rpartition(".")
        if schema and self._needs_prefix(schema):
            return self._unreserved(to_pascal_case(schema) + to_pascal_case(name), "Enum")
        return self._unreserved(to_pascal_case(name), "Enum")

    def domain_name(self, domain: Domain) -> str:
        if domain.schema and self._needs_prefix(domain.schema):
            return self._unreserved(to_pascal_case(domain.schema) + to_pascal_case(domain.name), "Domain")
        return self._unreserved(to_pascal_case(domain.name), "Domain")

    def singularize(self, name: str) -> str:
        if self.singularizer is None:
            return name
        return self.singularizer.singularize(name)

    def _needs_prefix(self, schema: Optional[str]) -> bool:
        return bool(schema) and schema not in self.default_schemas

    @staticmethod
    def _unreserved(name: str, suffix: str) -> str:
        if name not in BUILTIN_TYPE_NAMES:
            return name
        logger.debug("Type name %s is taken by a built-in declaration, using %s%s", name, name, suffix)
        return name + suffix

    def _column_override(self, table: TableMetadata, column: ColumnMetadata) -> Optional[str]:
        overrides = self.config.overrides.columns
        for key in (f"{table.qualified_name}.{column.name}", f"{table.name}.{column.name}"):
            if key in overrides:
                return overrides[key]
        return None

    def _collect_domains(self, data_type: DataType, names: Dict[str, str]) -> None:
        if isinstance(data_type, ArrayOf):
            self._collect_domains(data_type.element, names)
        elif isinstance(data_type, Domain):
            names.setdefault(data_type.qualified_name, self.domain_name(data_type))
            self._collect_domains(data_type.underlying, names)
