"""ConceptForge - Concept maps from study notes.

Extracts recurring concepts from study material, defines them with an
LLM, infers the relationships between them and lays the resulting graph
out for visualization.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
