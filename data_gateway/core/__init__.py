"""
Core gateway components.

- DataGateway: model-level get / persist / delete over SQLAlchemy Core
- Join / JoinType: descriptors for additional tables in a read
- Factory function for creating gateways from configuration
"""

from .gateway import DataGateway, create_gateway
from .joins import Join, JoinType

__all__ = [
    "DataGateway",
    "create_gateway",
    "Join",
    "JoinType",
]
