"""
Conversion of edited parts back to archive content.
"""

from .fragment_compiler import FragmentCompiler, compile_fragments

__all__ = ["FragmentCompiler", "compile_fragments"]
