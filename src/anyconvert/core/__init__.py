"""Conversion core: classification, dispatch, workspaces and encoding."""
