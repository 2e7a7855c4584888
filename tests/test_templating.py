from __future__ import annotations

import pytest

from dr_reporting.errors import ValidationError
from dr_reporting.templating import TokenTable, escape_html


def test_tokens_replaced_globally() -> None:
    table = TokenTable({"Name": "DR", "Count": 3})
    assert table.apply("{{Name}}: {{Count}} / {{Name}}") == "DR: 3 / DR"


def test_strict_mode_rejects_token_missing_from_skeleton() -> None:
    table = TokenTable({"Name": "DR", "Renamed": "x"})
    with pytest.raises(ValidationError, match="Renamed"):
        table.apply("{{Name}}")


def test_strict_mode_rejects_unresolved_token() -> None:
    with pytest.raises(ValidationError, match="Other"):
        TokenTable({"Name": "DR"}).apply("{{Name}} {{Other}}")


def test_lenient_mode_leaves_unknown_tokens() -> None:
    assert TokenTable({"Name": "DR"}).apply("{{Name}} {{Other}}", strict=False) == "DR {{Other}}"


def test_replacement_text_is_not_rescanned() -> None:
    table = TokenTable({"First": "{{Second}}", "Second": "two"})
    assert table.apply("{{First}} {{Second}}") == "{{Second}} two"


def test_none_value_becomes_empty_string() -> None:
    assert TokenTable({"Section": None}).apply("[{{Section}}]") == "[]"


def test_invalid_token_name() -> None:
    with pytest.raises(ValidationError):
        TokenTable().set("bad name", "x")


def test_escape_html() -> None:
    assert escape_html("<script>alert('x')</script> & \"q\"") == (
        "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt; &amp; &quot;q&quot;"
    )
    assert escape_html(None) == ""
