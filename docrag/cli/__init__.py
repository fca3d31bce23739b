"""Command-line tools for docrag.

- ``python -m docrag.cli`` — register, ingest and query documents
  (see :mod:`docrag.cli.ingest`).
"""
