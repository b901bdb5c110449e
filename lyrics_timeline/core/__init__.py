"""Core parsing, IR, and timeline interaction modules.

WHY: The core package holds the algorithmic heart of the project: the IR
dataclasses, the TTML parser, and the timeline view-model. Everything else
(formatters, CLI) only consumes these.

HOW: ir.py defines the data structures, timing.py parses and formats clock
values, parser.py builds Lines from TTML, timeline.py holds zoom/pan/
selection state and derives geometry.

RULES:
- IR dataclasses are the contract: change with care
- timeline.py depends on ir.py only, never on parser.py
"""
