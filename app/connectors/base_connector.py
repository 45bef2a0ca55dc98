"""
Base connector class for analytics data sources
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from datetime import datetime


class BaseConnector(ABC):
    """Base class for data source connectors"""

    def __init__(self, name: str):
        self.name = name
        self.last_query: Optional[datetime] = None
        self.query_count = 0
        self.error_count = 0

    @abstractmethod
    async def connect(self) -> bool:
        """Establish connection to data source"""
        pass

    @abstractmethod
    async def validate_connection(self) -> bool:
        """Validate connection is working"""
        pass

    def record_query(self, failed: bool = False):
        """Update query counters after a provider call settles."""
        self.last_query = datetime.utcnow()
        self.query_count += 1
        if failed:
            self.error_count += 1

    def get_status(self) -> Dict[str, Any]:
        """Get connector status"""
        return {
            "name": self.name,
            "last_query": self.last_query.isoformat() if self.last_query else None,
            "query_count": self.query_count,
            "error_count": self.error_count,
            "error_rate": self.error_count / max(self.query_count, 1),
        }
