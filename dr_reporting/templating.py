"""
Token substitution for the report skeleton.

A TokenTable maps literal tokens ("{{FailedCount}}") to resolved strings and applies
them to a fixed skeleton. There is no template language here: no loops, no
conditionals, no escaping of the token sigil. Values are inserted verbatim, so
callers must escape user data with escape_html() before adding it.
"""

import html
import re
from typing import Dict, Optional

from dr_reporting.errors import ValidationError

TOKEN_PATTERN = re.compile(r"\{\{[A-Za-z][A-Za-z0-9]*\}\}")


def token(name: str) -> str:
    return "{{" + name + "}}"


def escape_html(value: Optional[object]) -> str:
    """Entity-escape & < > " ' in a data value. None becomes an empty string."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


class TokenTable:
    """Ordered mapping of literal token -> replacement text for one render."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    def set(self, name: str, value: object) -> "TokenTable":
        if not re.fullmatch(r"[A-Za-z][A-Za-z0-9]*", name):
            raise ValidationError(f"Invalid token name: {name!r}")
        self._values[token(name)] = "" if value is None else str(value)
        return self

    def __contains__(self, name: str) -> bool:
        return token(name) in self._values

    def __len__(self) -> int:
        return len(self._values)

    def apply(self, skeleton: str, strict: bool = True) -> str:
        """
        Replace every token in the skeleton in a single left-to-right pass.

        Replacement text is never scanned again, so a value that itself reads like
        a token ("{{WarningSection}}" in an asset name) is inserted literally.

        Args:
            skeleton: Template text containing {{Name}} tokens
            strict: Fail when a token in the table is missing from the skeleton
                    or when the result still contains an unresolved token

        Raises:
            ValidationError: Token drift between the table and the skeleton (strict mode)
        """
        if strict:
            missing = [t for t in self._values if t not in skeleton]
            if missing:
                raise ValidationError(f"Tokens missing from template: {', '.join(missing)}")
            unknown = sorted(set(TOKEN_PATTERN.findall(skeleton)) - set(self._values))
            if unknown:
                raise ValidationError(f"Template tokens without a value: {', '.join(unknown)}")

        return TOKEN_PATTERN.sub(lambda m: self._values.get(m.group(0), m.group(0)), skeleton)
