"""Bus Factor Analyzer — estimate how many contributors a repository can lose.

Reduces per-line git authorship to a bus factor using either the
authorship-based (ABF) or the time-weighted (JBF) method.
"""

__version__ = "0.1.0"
