"""
safety-core: guardian ranking, danger-zone clustering and
evidence fingerprinting for a personal-safety service.
"""

__version__ = "0.1.0"
