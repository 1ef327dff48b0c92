"""
Static Lead Catalog
Loads the RM's lead portfolio from a bundled YAML file
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from app.domain.interfaces.lead_catalog import LeadCatalog
from app.domain.models.lead import LeadRecord

logger = logging.getLogger(__name__)

DEFAULT_LEADS_PATH = Path(__file__).resolve().parents[2] / "data" / "leads.yaml"


class StaticLeadCatalog(LeadCatalog):
    """In-memory catalog keyed by lead id, preserving file order"""

    def __init__(self, leads: Iterable[LeadRecord]):
        self._leads: Dict[str, LeadRecord] = {}
        for lead in leads:
            if lead.id in self._leads:
                raise ValueError(f"Duplicate lead id in catalog: {lead.id}")
            self._leads[lead.id] = lead

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "StaticLeadCatalog":
        """Load from a YAML file with a top-level `leads` list"""
        path = Path(path) if path else DEFAULT_LEADS_PATH
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}

        leads = [LeadRecord.model_validate(item) for item in document.get("leads", [])]
        logger.info(f"Loaded {len(leads)} leads from {path}")
        return cls(leads)

    def get(self, lead_id: str) -> Optional[LeadRecord]:
        if not lead_id:
            return None
        return self._leads.get(lead_id.upper())

    def all(self) -> List[LeadRecord]:
        return list(self._leads.values())

    def __len__(self) -> int:
        return len(self._leads)
