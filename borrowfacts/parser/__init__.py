# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fact program front-end: text in, immutable `Input` AST out.

Callers that want exceptions use `parse_input`; callers collecting findings
into a diagnostics sink use `try_parse_input`.
"""

from __future__ import annotations

from . import ast
from .ast import Input
from .parser import LexicalError, ParseError, ProgramSyntaxError, parse_input, try_parse_input

__all__ = [
	"ast",
	"Input",
	"ParseError",
	"LexicalError",
	"ProgramSyntaxError",
	"parse_input",
	"try_parse_input",
]
