"""End-to-end generation: connect, introspect, name, serialize."""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from .config import CodegenConfig
from .database.base import DialectAdapter
from .database.dialects import get_dialect, infer_dialect
from .database.introspector import Introspector
from .database.models import DatabaseMetadata
from .errors import ConfigError
from .generator.serializer import Serializer
from .generator.transformer import NameTransformer
from .generator.verify import VerifyResult, verify_file

logger = logging.getLogger(__name__)


def resolve_adapter(config: CodegenConfig) -> DialectAdapter:
    """Adapter for the configured dialect, inferred from the URL when unset."""
    if config.dialect is not None:
        name = config.dialect.value
    elif not config.url:
        raise ConfigError("A connection URL is required. Pass --url or set DATABASE_URL.", path=["url"])
    else:
        name = infer_dialect(config.url)
        logger.debug("Inferred dialect '%s' from the connection URL", name)
    return get_dialect(name)


def resolve_default_schemas(config: CodegenConfig, adapter: DialectAdapter) -> List[str]:
    """Configured default schemas, else the dialect's own defaults."""
    if config.default_schemas:
        return list(config.default_schemas)
    return adapter.default_schemas(config.url)


def introspect(
    config: CodegenConfig,
    connection: Optional[Any] = None,
    adapter: Optional[DialectAdapter] = None,
) -> DatabaseMetadata:
    """Read the database catalog into metadata.

    Without ``connection`` one is opened from ``config.url`` and closed
    again before returning, whether introspection succeeds or not.
    """
    adapter = adapter or resolve_adapter(config)
    introspector = Introspector(adapter, config)
    if connection is not None:
        return introspector.introspect(connection)

    if not config.url:
        raise ConfigError("A connection URL is required. Pass --url or set DATABASE_URL.", path=["url"])
    with adapter.connect(config.url) as opened:
        return introspector.introspect(opened)


def render(config: CodegenConfig, metadata: DatabaseMetadata, default_schemas: List[str]) -> str:
    """Turn metadata into declaration text."""
    transformed = NameTransformer(config, default_schemas).transform(metadata)
    return Serializer(config).serialize(transformed)


def generate(
    config: CodegenConfig,
    connection: Optional[Any] = None,
    adapter: Optional[DialectAdapter] = None,
) -> str:
    """Run the whole pipeline and return the declaration text.

    Args:
        config: Validated options for this run
        connection: Open driver connection to use instead of ``config.url``
        adapter: Dialect adapter to use instead of the configured dialect

    Returns:
        The generated TypeScript source
    """
    adapter = adapter or resolve_adapter(config)
    metadata = introspect(config, connection=connection, adapter=adapter)
    return render(config, metadata, resolve_default_schemas(config, adapter))


def write_output(output: str, path: Union[str, Path]) -> Path:
    """Write generated text, creating parent directories as needed."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(output, encoding="utf-8")
    logger.debug("Wrote %d bytes to %s", len(output), out_path)
    return out_path


def verify_output(output: str, path: Union[str, Path]) -> VerifyResult:
    """Compare generated text with the file at ``path``; never writes."""
    result = verify_file(output, path)
    if not result.matches:
        logger.debug("Generated output differs from %s", path)
    return result
