"""
Diffing

Line diff engine and the per-file diff assembler.
"""

from .line_diff import compute_line_diff, split_lines
from .assembler import DiffAssembler, DiffAssemblyResult, FetchOutcome

__all__ = ['compute_line_diff', 'split_lines', 'DiffAssembler', 'DiffAssemblyResult', 'FetchOutcome']
