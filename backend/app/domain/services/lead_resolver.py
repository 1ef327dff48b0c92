"""
Lead Reference Resolver
Works out which lead a turn is about, and powers `#` lead lookup.
"""
import re
import logging
from typing import List, Optional

from app.domain.interfaces.lead_catalog import LeadCatalog
from app.domain.models.lead import LeadRecord

logger = logging.getLogger(__name__)


# Fixed-width lead code: L000 - L029
LEAD_ID_PATTERN = re.compile(r"\b(L0[0-2][0-9])\b", re.IGNORECASE)

LOOKUP_MARKER = "#"
MAX_SUGGESTIONS = 6


class LeadResolver:
    """
    Resolves explicit lead mentions against carried-over context.

    A named lead always wins over the prior context; no mention means
    the prior context is kept as-is.
    """

    def __init__(self, catalog: LeadCatalog, max_suggestions: int = MAX_SUGGESTIONS):
        self.catalog = catalog
        self.max_suggestions = max_suggestions

    def resolve(self, user_text: str, prior_lead_id: Optional[str] = None) -> Optional[str]:
        """
        Args:
            user_text: Raw user input
            prior_lead_id: Lead carried over from earlier turns

        Returns:
            Mentioned lead id (upper-cased), else prior_lead_id unchanged
        """
        match = LEAD_ID_PATTERN.search(user_text or "")
        if not match:
            return prior_lead_id

        lead_id = match.group(1).upper()
        if lead_id != prior_lead_id:
            logger.info(f"Lead context switched: {prior_lead_id} -> {lead_id}")
        return lead_id

    def _ranked_leads(self) -> List[LeadRecord]:
        # sorted() is stable, so catalog order survives within each group
        return sorted(self.catalog.all(), key=lambda lead: 0 if lead.needs_rm_action else 1)

    def suggest(self, partial_text: str) -> List[LeadRecord]:
        """
        Autocomplete suggestions for the text after the last `#`.

        Returns an empty list when the text has no marker. An empty query
        returns the top of the ranking as a browse list.
        """
        if not partial_text or LOOKUP_MARKER not in partial_text:
            return []

        query = partial_text[partial_text.rindex(LOOKUP_MARKER) + 1:].lower()
        leads = self._ranked_leads()

        if not query:
            return leads[:self.max_suggestions]

        matches = [
            lead for lead in leads
            if query in lead.id.lower()
            or query in lead.name.lower()
            or query in lead.stage.lower()
        ]
        return matches[:self.max_suggestions]

    def apply_suggestion(self, text: str, lead_id: str) -> str:
        """
        Replace the in-progress `#token` with the chosen lead id.

        The token runs from the last marker up to the next whitespace;
        everything after it is kept.
        """
        if LOOKUP_MARKER not in text:
            return text

        marker_index = text.rindex(LOOKUP_MARKER)
        before = text[:marker_index]
        token_match = re.match(r"\S*", text[marker_index:])
        token = token_match.group(0) if token_match else LOOKUP_MARKER
        rest = text[marker_index + len(token):]
        return f"{before}{LOOKUP_MARKER}{lead_id}{rest}"
