# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
borrowfacts: parser for borrow-checking fact programs.

A fact program names universal regions, optional variable/region mappings and
a list of basic blocks whose statements carry facts (outlives, loans, variable
uses and definitions, region liveness). `parse_input` turns the text into an
immutable AST; `borrowfacts.facts` lowers that AST into the relations the
borrow-checking analysis consumes.
"""

from .parser import LexicalError, ParseError, ProgramSyntaxError, parse_input, try_parse_input

__all__ = ["LexicalError", "ParseError", "ProgramSyntaxError", "parse_input", "try_parse_input"]
