"""Domain layer — pure parsing of specifiers and CLI output.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
