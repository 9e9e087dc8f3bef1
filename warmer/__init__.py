"""Cache warming for large content catalogs.

Pages through a run-scoped snapshot of work keys and warms either the edge
cache (bounded concurrent HTTP requests) or the render cache (sequential
renders under an impersonated representative account).
"""

__version__ = "0.1.0"
