"""Declaration generation: naming rules, serialization and verification."""

from .singularize import SingularizationRule, Singularizer, build_singularizer, DEFAULT_RULES
from .transformer import (
    NameTransformer,
    TransformedColumn,
    TransformedTable,
    TransformedDatabase,
    to_camel_case,
    to_pascal_case,
    to_screaming_snake_case,
)
from .serializer import Serializer
from .verify import VerifyResult, normalize, verify, verify_file

__all__ = [
    # Singularization
    "SingularizationRule",
    "Singularizer",
    "build_singularizer",
    "DEFAULT_RULES",
    # Naming
    "NameTransformer",
    "TransformedColumn",
    "TransformedTable",
    "TransformedDatabase",
    "to_camel_case",
    "to_pascal_case",
    "to_screaming_snake_case",
    # Output
    "Serializer",
    "VerifyResult",
    "normalize",
    "verify",
    "verify_file",
]
