"""asini — git and npm command utilities for monorepo tooling."""

__version__ = "0.1.0"
