"""
STORMREP package
================

Storm Event Impact Report: which NOAA storm event types are most harmful
to population health and which carry the greatest economic cost.

- The CLI entry point is in `stormrep/cli.py`.
- The core engine (aggregation and ranking) is in `stormrep/engine.py`.
- Dataset loading is in `stormrep/loader.py`.
"""

__version__ = '0.3.0'
