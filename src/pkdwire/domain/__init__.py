"""Domain layer: wire values, payload schemas and the action taxonomy.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
