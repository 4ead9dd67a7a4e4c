"""Optional HTTP surface (``pip install anyconvert[server]``)."""
from anyconvert.server.app import create_app

__all__ = ["create_app"]
