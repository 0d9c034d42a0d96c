"""Core alignment modules and intermediate representation.

WHY: The core package holds the algorithmic heart of the engine: the IR
dataclasses every stage exchanges, the word similarity scorer, the frame
quantizer, and the word aligner with its boundary-preserving variant.

HOW: ir.py defines the data structures, similarity.py and frames.py are
pure leaf helpers, aligner.py matches script words against the recognizer
stream and aggregates segment timings, realigner.py attaches word timings
to segments whose boundaries are already fixed.

RULES:
- IR dataclasses are the contract between stages
- Nothing in core performs I/O; config only supplies default frame rates
"""
