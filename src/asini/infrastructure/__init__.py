"""Infrastructure layer — process runner, file store, git and npm facades.

This layer may depend on config models, the domain parsers, and
third-party libs. It must never import from services, commands, or output.
"""
