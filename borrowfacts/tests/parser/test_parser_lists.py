# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from borrowfacts.parser import parse_input


@pytest.mark.parametrize(
	"with_comma, without_comma",
	[
		("universal_regions { 'a, 'b, }", "universal_regions { 'a, 'b }"),
		(
			"universal_regions { } var_uses_region { (V1, 'a), (V2, 'b), }",
			"universal_regions { } var_uses_region { (V1, 'a), (V2, 'b) }",
		),
		(
			"universal_regions { } var_drops_region { (V1, 'a), }",
			"universal_regions { } var_drops_region { (V1, 'a) }",
		),
		(
			"universal_regions { } block B0 { goto B1, B2,; }",
			"universal_regions { } block B0 { goto B1, B2; }",
		),
		(
			"universal_regions { } block B0 { kill(L0), invalidates(L0),; }",
			"universal_regions { } block B0 { kill(L0), invalidates(L0); }",
		),
		(
			"universal_regions { } block B0 { kill(L0), / var_used(V1),; }",
			"universal_regions { } block B0 { kill(L0) / var_used(V1); }",
		),
		(
			"universal_regions { } block B0 { use('a, 'b,); }",
			"universal_regions { } block B0 { use('a, 'b); }",
		),
	],
)
def test_trailing_comma_is_ignored(with_comma: str, without_comma: str) -> None:
	assert parse_input(with_comma) == parse_input(without_comma)


def test_empty_lists() -> None:
	prog = parse_input(
		"""
universal_regions { }
var_uses_region { }
var_drops_region { }
block B0 {
	use();
	goto;
}
"""
	)
	assert prog.universal_regions == ()
	assert prog.var_uses_region == ()
	assert prog.var_drops_region == ()
	(stmt,) = prog.blocks[0].statements
	assert stmt.effects[0].regions == ()
	assert prog.blocks[0].goto == ()


def test_empty_section_equals_missing_section() -> None:
	assert parse_input("universal_regions { } var_uses_region { }") == parse_input("universal_regions { }")


def test_single_element_lists() -> None:
	prog = parse_input("universal_regions { 'a } block B0 { goto B1; }")
	assert prog.universal_regions == ("'a",)
	assert prog.blocks[0].goto == ("B1",)
