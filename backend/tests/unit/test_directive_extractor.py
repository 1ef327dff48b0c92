"""
Unit tests for DirectiveExtractor
Tests REMINDER_SET / ACTION parsing and display text cleanup
"""
import json
import pytest
from datetime import date

from app.domain.models.assistant_action import ActionKind
from app.domain.services.directive_extractor import DirectiveExtractor


REMINDER = {
    "leadId": "L004",
    "actor": "Sneha Reddy",
    "actorPhone": "+91 98765 43213",
    "commitment": "Send salary slips",
    "dueDate": "2025-03-14",
}


def reminder_line(**overrides) -> str:
    return "REMINDER_SET: " + json.dumps({**REMINDER, **overrides})


@pytest.fixture
def extractor():
    return DirectiveExtractor()


class TestPlainText:
    """Text without directives"""

    def test_returned_unchanged(self, extractor):
        """Test plain text passes through untouched, whitespace included"""
        text = "  L001 - Rajesh Kumar needs documents.\n\n\n\nCall him today.  "
        result = extractor.extract(text)

        assert result.display_text == text
        assert result.actions == []
        assert result.reminder is None

    def test_empty_text(self, extractor):
        """Test empty input gives empty output"""
        assert extractor.extract("").display_text == ""


class TestActions:
    """ACTION directive parsing"""

    def test_single_action(self, extractor):
        """Test one action is parsed and removed from the text"""
        result = extractor.extract(
            "L004 - Sneha Reddy still owes salary slips.\nACTION: [call|Call Sneha|+91 98765 43213]"
        )

        assert result.display_text == "L004 - Sneha Reddy still owes salary slips."
        assert len(result.actions) == 1
        action = result.actions[0]
        assert action.kind == ActionKind.CALL
        assert action.label == "Call Sneha"
        assert action.payload == "+91 98765 43213"

    def test_actions_keep_order(self, extractor):
        """Test actions come back in text order"""
        result = extractor.extract(
            "Next steps:\n"
            "ACTION: [draft|Draft Doc Request|doc_request]\n"
            "ACTION: [confirm|Mark Docs Received|docs_received]\n"
            "ACTION: [nudge|Upload in Sales Central|upload_docs]"
        )

        assert [a.kind for a in result.actions] == [ActionKind.DRAFT, ActionKind.CONFIRM, ActionKind.NUDGE]
        assert result.display_text == "Next steps:"

    def test_unknown_kind_stays_visible(self, extractor):
        """Test a non-conforming ACTION is left in the text"""
        text = "Try this ACTION: [email|Send mail|x]"
        result = extractor.extract(text)

        assert result.actions == []
        assert result.display_text == text

    def test_blank_label_stays_visible(self, extractor):
        """Test an ACTION missing its label is not parsed"""
        result = extractor.extract(
            "ACTION: [call|Call Rajesh|+91 98765 43210]\nACTION: [call||+91 98765 43210]"
        )

        assert len(result.actions) == 1
        assert result.display_text == "ACTION: [call||+91 98765 43210]"

    def test_token_inside_word_is_text(self, extractor):
        """Test ACTION: at the end of a longer word is not a directive"""
        text = "Check the TRANSACTION: [call|Ref|123] line"
        result = extractor.extract(text)

        assert result.actions == []
        assert result.display_text == text

    def test_reminder_token_inside_word_is_text(self, extractor):
        text = "See PRE_REMINDER_SET: " + json.dumps(REMINDER)
        result = extractor.extract(text)

        assert result.reminder is None
        assert result.display_text == text

    def test_token_after_punctuation_is_parsed(self, extractor):
        """Test a directive glued to punctuation still counts"""
        result = extractor.extract("Call now.ACTION: [call|Call Sneha|+91 98765 43213]")

        assert len(result.actions) == 1
        assert result.display_text == "Call now."


class TestReminders:
    """REMINDER_SET directive parsing"""

    def test_reminder_and_two_actions(self, extractor):
        """Test a reply with one reminder and two actions"""
        raw = (
            "Done! I'll remind you on Friday to chase Sneha's salary slips.\n"
            f"{reminder_line()}\n"
            "\n"
            "You can also reach out now:\n"
            "ACTION: [call|Call Sneha|+91 98765 43213]\n"
            "ACTION: [draft|Draft Doc Request|doc_request]"
        )
        result = extractor.extract(raw)

        assert result.display_text == (
            "Done! I'll remind you on Friday to chase Sneha's salary slips.\n\n"
            "You can also reach out now:"
        )
        assert len(result.actions) == 2
        assert result.reminder is not None
        assert result.reminder.lead_id == "L004"
        assert result.reminder.commitment == "Send salary slips"
        assert result.reminder.due_date == date(2025, 3, 14)

    def test_extraction_does_not_persist(self, extractor):
        """Test the extractor only parses; storing is left to the caller"""
        result = extractor.extract("Ok.\n" + reminder_line())

        assert result.reminder is not None
        assert result.stored_reminder is None

    def test_invalid_json_dropped(self, extractor):
        """Test unparseable reminder JSON is stripped"""
        result = extractor.extract(
            "Noted.\nREMINDER_SET: {leadId: L004, oops}\nACTION: [call|Call Sneha|+91 98765 43213]"
        )

        assert result.reminder is None
        assert result.display_text == "Noted."
        assert len(result.actions) == 1

    def test_missing_fields_dropped(self, extractor):
        """Test a reminder missing required fields is dropped"""
        result = extractor.extract('Noted.\nREMINDER_SET: {"leadId": "L004"}')

        assert result.reminder is None
        assert result.display_text == "Noted."

    def test_relative_due_date_rejected(self, extractor):
        """Test dueDate must already be a calendar date"""
        result = extractor.extract("Noted.\n" + reminder_line(dueDate="tomorrow"))

        assert result.reminder is None

    def test_only_first_reminder_honoured(self, extractor):
        """Test a second REMINDER_SET is stripped and ignored"""
        raw = "\n".join([
            "Both noted.",
            reminder_line(),
            reminder_line(leadId="L013", commitment="Confirm acceptance"),
        ])
        result = extractor.extract(raw)

        assert result.display_text == "Both noted."
        assert result.reminder.lead_id == "L004"

    def test_bare_token_does_not_block_later_reminder(self, extractor):
        """Test a REMINDER_SET with no JSON object leaves the slot for a valid one"""
        result = extractor.extract("Ok.\nREMINDER_SET: pending\n" + reminder_line())

        assert result.reminder is not None
        assert result.reminder.lead_id == "L004"
        assert result.display_text == "Ok."

    def test_malformed_kept_when_configured(self):
        """Test malformed reminders can be left visible"""
        extractor = DirectiveExtractor(strip_malformed_reminders=False)
        raw = "Noted.\nREMINDER_SET: not-json"
        result = extractor.extract(raw)

        assert result.display_text == raw
        assert result.reminder is None
