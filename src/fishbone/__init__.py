"""
fishbone: versioned fishbone (root-cause) analysis documents.

Package root. Decodes ``.fba`` YAML documents, migrates them through every
known schema version, walks and rewrites their root-cause trees and resolves
imports of other documents. Nothing is configured at import time.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
