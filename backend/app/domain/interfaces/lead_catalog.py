"""
Lead Catalog Interface
Read-only view of the RM's lead portfolio
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.lead import LeadRecord


class LeadCatalog(ABC):
    """Read-only lead catalog. Enumeration order is stable."""

    @abstractmethod
    def get(self, lead_id: str) -> Optional[LeadRecord]:
        """Point lookup by lead identifier"""
        pass

    @abstractmethod
    def all(self) -> List[LeadRecord]:
        """All leads in catalog order"""
        pass

    def __len__(self) -> int:
        return len(self.all())

    def __contains__(self, lead_id: str) -> bool:
        return self.get(lead_id) is not None
