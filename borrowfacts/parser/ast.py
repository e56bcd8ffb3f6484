# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for fact programs.

A fact program describes a control-flow graph of basic blocks whose statements
carry borrow-checking facts. Nodes are frozen dataclasses holding tuples, so a
parsed `Input` is immutable. Source locations are kept for diagnostics but do
not take part in equality: two texts that differ only in layout, comments or
trailing commas produce equal ASTs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, Optional, Tuple


# Identifiers
#
# Each family is a distinct str subclass so a Loan cannot be passed where a
# Region is expected without a visible conversion. Identity is the text.


class Region(str):
	"""Lifetime-like region name, e.g. `'a`."""

	__slots__ = ()

	def __repr__(self) -> str:
		return f"Region({str.__repr__(self)})"


class BlockName(str):
	"""Basic block name, e.g. `B0`."""

	__slots__ = ()

	def __repr__(self) -> str:
		return f"BlockName({str.__repr__(self)})"


class Loan(str):
	"""Loan (single borrow event) name, e.g. `L0`."""

	__slots__ = ()

	def __repr__(self) -> str:
		return f"Loan({str.__repr__(self)})"


class Variable(str):
	"""Program variable name, e.g. `V1`."""

	__slots__ = ()

	def __repr__(self) -> str:
		return f"Variable({str.__repr__(self)})"


@dataclass(frozen=True)
class Located:
	line: int
	column: int


# Facts


@dataclass(frozen=True)
class Outlives:
	"""`outlives('a: 'b)`: region `a` outlives region `b`."""

	a: Region
	b: Region


@dataclass(frozen=True)
class BorrowRegionAt:
	region: Region
	loan: Loan


@dataclass(frozen=True)
class Invalidates:
	loan: Loan


@dataclass(frozen=True)
class Kill:
	loan: Loan


@dataclass(frozen=True)
class RegionLiveAt:
	region: Region


@dataclass(frozen=True)
class DefineVariable:
	variable: Variable


@dataclass(frozen=True)
class UseVariable:
	"""
	Variable use. Both `var_used(V)` and `var_drop_used(V)` produce this fact;
	the drop form is a surface synonym.
	"""

	variable: Variable


Fact = Outlives | BorrowRegionAt | Invalidates | Kill | RegionLiveAt | DefineVariable | UseVariable


@dataclass(frozen=True)
class Use:
	"""`use('a, 'b, ...)`: the listed regions are used at this point."""

	regions: Tuple[Region, ...] = ()


Effect = Fact | Use


# Program structure


@dataclass(frozen=True)
class Statement:
	"""
	One statement: the effects at its mid point and, for the `start / mid;`
	form, the effects at its start point.

	`effects_start` is None when the statement has no `/`. An explicit empty
	start group (`/ kill(L0);`) is an empty tuple, which is a different AST.
	"""

	effects: Tuple[Effect, ...] = ()
	effects_start: Optional[Tuple[Effect, ...]] = None
	loc: Optional[Located] = field(default=None, compare=False)

	@property
	def partitioned(self) -> bool:
		return self.effects_start is not None

	def start_effects(self) -> Tuple[Effect, ...]:
		"""
		Effects emitted at the statement's start point.

		Without an explicit start group, anything live on entry to the mid
		point is also live on entry to the start point, so the region-liveness
		facts of the main group are repeated there.
		"""
		if self.effects_start is not None:
			return self.effects_start
		return tuple(effect for effect in self.effects if isinstance(effect, RegionLiveAt))


@dataclass(frozen=True)
class Block:
	name: BlockName
	statements: Tuple[Statement, ...] = ()
	goto: Tuple[BlockName, ...] = ()
	loc: Optional[Located] = field(default=None, compare=False)


VarRegion = Tuple[Variable, Region]


@dataclass(frozen=True)
class Input:
	"""
	A whole fact program.

	The variable/region mappings keep their textual order (and any duplicate
	entries) as a tuple of pairs; `uses_region_map`/`drops_region_map` give a
	dict view where later entries win.
	"""

	universal_regions: Tuple[Region, ...] = ()
	var_uses_region: Tuple[VarRegion, ...] = ()
	var_drops_region: Tuple[VarRegion, ...] = ()
	blocks: Tuple[Block, ...] = ()

	def uses_region_map(self) -> Dict[Variable, Region]:
		return dict(self.var_uses_region)

	def drops_region_map(self) -> Dict[Variable, Region]:
		return dict(self.var_drops_region)

	def block(self, name: str) -> Optional[Block]:
		"""First block declared with `name`, if any."""
		return next((b for b in self.blocks if b.name == name), None)


def to_jsonable(node: Any) -> Any:
	"""
	Convert an AST node into plain JSON-compatible data.

	Dataclass nodes become dicts tagged with `kind`; identifiers become plain
	strings; tuples become lists. Source locations are omitted.
	"""
	if is_dataclass(node) and not isinstance(node, type):
		out: Dict[str, Any] = {"kind": type(node).__name__}
		for f in fields(node):
			if f.name == "loc":
				continue
			out[f.name] = to_jsonable(getattr(node, f.name))
		return out
	if isinstance(node, (tuple, list)):
		return [to_jsonable(item) for item in node]
	if isinstance(node, str):
		return str(node)
	return node


__all__ = [
	"Region",
	"BlockName",
	"Loan",
	"Variable",
	"Located",
	"Outlives",
	"BorrowRegionAt",
	"Invalidates",
	"Kill",
	"RegionLiveAt",
	"DefineVariable",
	"UseVariable",
	"Fact",
	"Use",
	"Effect",
	"Statement",
	"Block",
	"VarRegion",
	"Input",
	"to_jsonable",
]
