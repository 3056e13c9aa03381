"""Compare freshly generated declarations with a committed file."""

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class VerifyResult:
    matches: bool
    diff: str = ""


def normalize(text: str) -> str:
    """Line endings to LF, trailing whitespace at the end dropped."""
    return text.replace("\r\n", "\n").rstrip()


def verify(generated: str, existing: str) -> VerifyResult:
    """Diff ``generated`` against ``existing`` after normalizing both."""
    expected = normalize(existing)
    actual = normalize(generated)
    if expected == actual:
        return VerifyResult(matches=True)

    diff = difflib.unified_diff(
        expected.splitlines(keepends=True),
        actual.splitlines(keepends=True),
        fromfile="existing",
        tofile="generated",
    )
    return VerifyResult(matches=False, diff="".join(diff))


def verify_file(generated: str, path: Union[str, Path]) -> VerifyResult:
    """Verify against a file; a missing file is a mismatch against empty text."""
    file_path = Path(path)
    existing = file_path.read_text(encoding="utf-8") if file_path.exists() else ""
    return verify(generated, existing)
