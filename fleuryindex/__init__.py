"""Tokens, a code index with Metadesk and C/C++ indexers, snippet slots and plot layout."""

__version__ = "0.1.0"

__all__ = ["tokens", "lang", "lego", "index", "metadesk", "lang_cpp", "plot"]