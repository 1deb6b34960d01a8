"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.weibo_connector import TIMELINE_PATHS, WeiboConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "TIMELINE_PATHS",
    "WeiboConnector",
]
