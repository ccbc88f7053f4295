from __future__ import annotations

"""Strategy selection package.

This package encapsulates how a function picks one of several algorithms:
- Descriptor and registration models (dataclasses, Pydantic validators)
- Registry resolution and execution
- Legacy boolean flag mapping
- Built-in strategies for the bundled functions
- Reporting (Markdown)
"""
