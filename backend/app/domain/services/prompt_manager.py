"""
Prompt Template System
Standing instructions for the generation backend and the per-turn context template
"""
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from jinja2 import Environment, BaseLoader, StrictUndefined
import logging

logger = logging.getLogger(__name__)


class PromptTemplate(BaseModel):
    """Single prompt template"""
    name: str = Field(..., description="Template name")
    template: str = Field(..., description="Jinja2 template string")
    variables: List[str] = Field(default_factory=list, description="Required variables")

    def render(self, **kwargs) -> str:
        """Render template with provided variables"""
        env = Environment(loader=BaseLoader(), undefined=StrictUndefined, keep_trailing_newline=False)
        template = env.from_string(self.template)
        return template.render(**kwargs)


DEFAULT_STANDING_INSTRUCTIONS = """You are a helpful, empathetic lead management assistant for Relationship Managers (RMs) in the lending industry.

### Personality
- Warm and conversational, like a helpful colleague
- Concise and practical, action-oriented
- Disbursal-focused: RMs earn on disbursals, so prioritise what moves leads toward disbursal
- Neutral and supportive in tone, never accusatory
- Fact-based: use only information from the lead data, never invent timelines or events

### Stage priority for "what should I focus on"
1. Closest to money: COA, BOC/BOM Verification, Query from Ops, LD Pending
2. Sanctioned, Commercial Deviation
3. Query from Credit, Final Appraisal, FCU, blocked parallel verifications, re-sanction possible
4. Early stage or on-track with other teams: monitor only

### Formatting
- Always give the lead ID with the name: "L001 - Rajesh Kumar"
- Use mobile numbers only
- No section headers; keep replies short

### Reminders
When the RM asks to be reminded about a commitment, confirm it in one sentence, then on its own line add:
REMINDER_SET: {"leadId":"L004","actor":"Sneha Reddy","actorPhone":"+91 98765 43213","commitment":"Send salary slips","dueDate":"YYYY-MM-DD"}
Resolve relative dates yourself ("tomorrow", "Friday", "in 3 days") and always write dueDate as YYYY-MM-DD.
Only one REMINDER_SET line per reply.
When reminders are supplied in the context, show them first with a call button for each, then the other leads.
Never show overdue reminders.

### Action buttons
End replies about specific leads with one action per line:
ACTION: [type|label|data]
- call: ACTION: [call|Call {FirstName}|{phone}]
- draft: ACTION: [draft|Draft {Type}|doc_request, query_response, sanction_script, negotiation, followup, intro or resanction]
- confirm: ACTION: [confirm|Mark {Action}|docs_received, customer_accepted, decision_received or docs_signed]
- nudge: ACTION: [nudge|{Action} in Sales Central|resolve_query, start_application, submit_application, upload_docs or complete_application]
Labels must not contain "|" and data must not contain "]"."""


TURN_CONTEXT_TEMPLATE = """CURRENT CONTEXT:
- RM has {{ total_leads }} active leads
- {{ rm_action_count }} require RM action
- {{ other_team_count }} are with other teams
{%- if current_lead %}
- User is currently discussing lead: {{ current_lead.id }} ({{ current_lead.name }})
{%- endif %}
{%- if reminders_json %}

REMINDERS FOR {{ reminder_label }}:
{{ reminders_json }}

IMPORTANT: Show these reminders FIRST before action-needed leads when user asks for "focus" or "reminders".
{%- endif %}

LEAD DATA:
{{ catalog_json }}

USER REQUEST: "{{ user_text }}"

Respond conversationally and helpfully based on what the RM needs. Keep responses focused and actionable."""


class PromptManager:
    """
    Holds the standing instructions and the turn context template.

    The standing instructions can be replaced from a text file so they
    can be tuned without a release.
    """

    def __init__(self, standing_instructions_path: Optional[str] = None):
        self.templates: Dict[str, PromptTemplate] = {}
        self._load_default_templates()
        if standing_instructions_path:
            self.load_standing_instructions(standing_instructions_path)

    def _load_default_templates(self):
        """Load default prompt templates"""
        self.templates["standing_instructions"] = PromptTemplate(
            name="standing_instructions",
            template="{% raw %}" + DEFAULT_STANDING_INSTRUCTIONS + "{% endraw %}",
        )
        self.templates["turn_context"] = PromptTemplate(
            name="turn_context",
            template=TURN_CONTEXT_TEMPLATE,
            variables=[
                "total_leads", "rm_action_count", "other_team_count", "current_lead",
                "reminders_json", "reminder_label", "catalog_json", "user_text",
            ],
        )

    def load_standing_instructions(self, path: str) -> None:
        """Replace the standing instructions with the contents of a file"""
        text = Path(path).read_text(encoding="utf-8").strip()
        if not text:
            logger.warning(f"Standing instructions file {path} is empty, keeping defaults")
            return
        self.templates["standing_instructions"] = PromptTemplate(
            name="standing_instructions",
            template="{% raw %}" + text + "{% endraw %}",
        )
        logger.info(f"Loaded standing instructions from {path}")

    def get_template(self, name: str) -> Optional[PromptTemplate]:
        """Get template by name"""
        return self.templates.get(name)

    def standing_instructions(self) -> str:
        return self.templates["standing_instructions"].render()

    def render_turn_context(self, **kwargs) -> str:
        """Render the per-turn context block"""
        return self.templates["turn_context"].render(**kwargs)
