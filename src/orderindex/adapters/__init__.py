"""Remote index adapters — Connectors for the hosted search service.

Built-in adapters:
  - algolia: Algolia REST API over httpx
  - memory: in-process stand-in for tests and local development

Implement ``RemoteIndex`` to target another hosted index.
"""
