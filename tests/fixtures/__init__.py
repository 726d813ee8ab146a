"""
Fixture modules for ConceptForge tests.

Modules
-------
- fakes: Scripted tagger and LLM client used in place of spaCy and a
  live provider
"""

from tests.fixtures.fakes import FakeTagger, ScriptedLLM

__all__ = ["FakeTagger", "ScriptedLLM"]
