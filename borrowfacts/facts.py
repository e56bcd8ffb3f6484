# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lowering of a parsed fact program into the input relations of the
borrow-checking analysis.

Every statement `i` of block `B` contributes two CFG points, `Start(B[i])` and
`Mid(B[i])`, joined by an edge. Start effects are emitted at the start point
and the main effects at the mid point. The mid point of a statement flows to
the start of the next one; the last statement of a block flows to the first
statement of every goto target, in goto order. A block without statements
contributes no points, so its gotos produce no edges.

Relations hold plain strings, in emission order, duplicates included.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Iterable, List, Tuple

from borrowfacts.parser import ast, parse_input

Point = str


@dataclass
class AllFacts:
	borrow_region: List[Tuple[str, str, Point]] = field(default_factory=list)
	universal_region: List[Tuple[str]] = field(default_factory=list)
	cfg_edge: List[Tuple[Point, Point]] = field(default_factory=list)
	killed: List[Tuple[str, Point]] = field(default_factory=list)
	outlives: List[Tuple[str, str, Point]] = field(default_factory=list)
	region_live_at: List[Tuple[str, Point]] = field(default_factory=list)
	invalidates: List[Tuple[Point, str]] = field(default_factory=list)
	var_used: List[Tuple[str, Point]] = field(default_factory=list)
	var_defined: List[Tuple[str, Point]] = field(default_factory=list)
	var_uses_region: List[Tuple[str, str]] = field(default_factory=list)
	var_drops_region: List[Tuple[str, str]] = field(default_factory=list)

	@classmethod
	def relation_names(cls) -> List[str]:
		return [f.name for f in fields(cls)]

	def relations(self) -> Dict[str, List[Tuple[str, ...]]]:
		"""Relation name -> rows, in declaration order."""
		return {name: getattr(self, name) for name in self.relation_names()}

	def points(self) -> List[Point]:
		"""All CFG points mentioned by an edge, in first-seen order."""
		seen: Dict[Point, None] = {}
		for p, q in self.cfg_edge:
			seen.setdefault(p, None)
			seen.setdefault(q, None)
		return list(seen)


def start_point(block: str, index: int) -> Point:
	return f"Start({block}[{index}])"


def mid_point(block: str, index: int) -> Point:
	return f"Mid({block}[{index}])"


def lower_input(program: ast.Input) -> AllFacts:
	"""Produce the analysis input relations for a parsed program."""
	facts = AllFacts()
	facts.universal_region.extend((str(region),) for region in program.universal_regions)
	facts.var_uses_region.extend((str(v), str(r)) for v, r in program.var_uses_region)
	facts.var_drops_region.extend((str(v), str(r)) for v, r in program.var_drops_region)

	for block in program.blocks:
		last = len(block.statements) - 1
		for idx, statement in enumerate(block.statements):
			start = start_point(block.name, idx)
			mid = mid_point(block.name, idx)
			facts.cfg_edge.append((start, mid))
			_emit_effects(facts, statement.start_effects(), start)
			_emit_effects(facts, statement.effects, mid)
			if idx < last:
				facts.cfg_edge.append((mid, start_point(block.name, idx + 1)))
			else:
				for target in block.goto:
					facts.cfg_edge.append((mid, start_point(target, 0)))
	return facts


def parse_from_program(source: str) -> AllFacts:
	"""Parse a fact program and lower it; parse errors propagate."""
	return lower_input(parse_input(source))


def _emit_effects(facts: AllFacts, effects: Iterable[ast.Effect], point: Point) -> None:
	for effect in effects:
		if isinstance(effect, ast.Outlives):
			facts.outlives.append((str(effect.a), str(effect.b), point))
		elif isinstance(effect, ast.BorrowRegionAt):
			facts.borrow_region.append((str(effect.region), str(effect.loan), point))
		elif isinstance(effect, ast.Invalidates):
			facts.invalidates.append((point, str(effect.loan)))
		elif isinstance(effect, ast.Kill):
			facts.killed.append((str(effect.loan), point))
		elif isinstance(effect, ast.RegionLiveAt):
			facts.region_live_at.append((str(effect.region), point))
		elif isinstance(effect, ast.DefineVariable):
			facts.var_defined.append((str(effect.variable), point))
		elif isinstance(effect, ast.UseVariable):
			facts.var_used.append((str(effect.variable), point))
		elif isinstance(effect, ast.Use):
			# Region uses are left to the analysis; they carry no base fact.
			continue
		else:
			raise TypeError(f"Unexpected effect: {type(effect)}")


__all__ = ["AllFacts", "Point", "start_point", "mid_point", "lower_input", "parse_from_program"]
