"""Pipelines as Code proposals, webhooks and branches on GitHub, with component and link helpers."""

__version__ = "0.1.0"