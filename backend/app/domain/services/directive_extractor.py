"""
Directive Extractor
Pulls REMINDER_SET and ACTION directives out of generated text.

Grammar (one directive per occurrence, scanned line by line):

    reminder  := "REMINDER_SET:" ws json-object
    action    := "ACTION:" ws "[" kind "|" label "|" payload "]"
    kind      := "call" | "draft" | "confirm" | "nudge"
    label     := 1*(any char except "|")
    payload   := 1*(any char except "]")

Tokens only count at the start of a word. Only the first REMINDER_SET
that carries a JSON object is honoured. A malformed directive
affects only itself: a bad reminder is dropped and logged, a bad
ACTION stays in the text as written.
"""
import re
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from app.domain.models.assistant_action import ActionDirective, ActionKind
from app.domain.models.reminder import Reminder, ReminderDirective

logger = logging.getLogger(__name__)


REMINDER_TOKEN = "REMINDER_SET:"
ACTION_TOKEN = "ACTION:"
# Tokens only count at a word start, so "TRANSACTION:" is left alone
TOKEN_PATTERN = re.compile(r"(?<![A-Za-z_])(?:REMINDER_SET:|ACTION:)")

ACTION_GRAMMAR = re.compile(
    r"(?<![A-Za-z_])ACTION:\s*\[(?P<kind>call|draft|confirm|nudge)\|(?P<label>[^|\n]+)\|(?P<payload>[^\]\n]+)\]"
)


class ExtractionResult(BaseModel):
    """Display text plus the directives found in a reply"""
    display_text: str
    actions: List[ActionDirective] = Field(default_factory=list)
    reminder: Optional[ReminderDirective] = None
    stored_reminder: Optional[Reminder] = Field(
        None, description="Reminder as persisted, filled in by the caller that stores it"
    )


@dataclass
class _ScanState:
    actions: List[ActionDirective] = field(default_factory=list)
    reminder: Optional[ReminderDirective] = None
    reminder_seen: bool = False
    consumed: int = 0


class DirectiveExtractor:
    """
    Parses directives from generated text.

    Args:
        strip_malformed_reminders: Remove an unparseable REMINDER_SET line
            from the display text instead of showing it
    """

    def __init__(self, strip_malformed_reminders: bool = True):
        self.strip_malformed_reminders = strip_malformed_reminders
        self._decoder = json.JSONDecoder()

    def extract(self, raw_text: str) -> ExtractionResult:
        """
        Args:
            raw_text: Generated reply

        Returns:
            ExtractionResult. Text with no directives comes back unchanged.
        """
        if not raw_text:
            return ExtractionResult(display_text=raw_text or "")

        state = _ScanState()
        out_lines = []
        for line in raw_text.split("\n"):
            kept, had_directive = self._scan_line(line, state)
            if had_directive:
                if kept.strip():
                    out_lines.append(kept.rstrip())
                continue
            out_lines.append(line)

        if state.consumed == 0:
            return ExtractionResult(display_text=raw_text, actions=state.actions)

        display_text = "\n".join(out_lines).strip()
        # Removing directive lines can leave runs of blank lines behind
        display_text = re.sub(r"\n{3,}", "\n\n", display_text)

        return ExtractionResult(
            display_text=display_text,
            actions=state.actions,
            reminder=state.reminder,
        )

    def _scan_line(self, line: str, state: _ScanState) -> Tuple[str, bool]:
        """
        Remove every recognised directive from one line.

        Returns:
            (remaining text, whether anything was removed)
        """
        if REMINDER_TOKEN not in line and ACTION_TOKEN not in line:
            return line, False

        pieces = []
        pos = 0
        removed = False
        while True:
            match = TOKEN_PATTERN.search(line, pos)
            if not match:
                break

            start = match.start()
            if match.group(0) == ACTION_TOKEN:
                end = self._parse_action(line, start, state)
            else:
                end = self._parse_reminder(line, start, state)

            if end is None:
                # Not a directive; keep the token text and move past it
                pieces.append(line[pos:match.end()])
                pos = match.end()
                continue

            pieces.append(line[pos:start])
            pos = end
            removed = True
            state.consumed += 1

        pieces.append(line[pos:])
        return "".join(pieces), removed

    def _parse_action(self, line: str, start: int, state: _ScanState) -> Optional[int]:
        match = ACTION_GRAMMAR.match(line, start)
        if not match:
            logger.warning(f"Ignoring malformed action directive: {line[start:start + 80]!r}")
            return None

        label = match.group("label").strip()
        payload = match.group("payload").strip()
        if not label or not payload:
            logger.warning(f"Ignoring action directive with blank label or payload: {match.group(0)!r}")
            return None

        state.actions.append(
            ActionDirective(kind=ActionKind(match.group("kind")), label=label, payload=payload)
        )
        return match.end()

    def _parse_reminder(self, line: str, start: int, state: _ScanState) -> Optional[int]:
        body_start = start + len(REMINDER_TOKEN)
        while body_start < len(line) and line[body_start].isspace():
            body_start += 1

        end, data = self._decode_object(line, body_start)
        if end is None:
            logger.warning(f"Dropping malformed reminder directive: {line[start:start + 120]!r}")
            return len(line) if self.strip_malformed_reminders else None

        # Only a decodable object claims the one reminder slot per reply
        first = not state.reminder_seen
        state.reminder_seen = True

        if not first:
            logger.warning("Ignoring additional REMINDER_SET directive in the same reply")
            return end

        try:
            state.reminder = ReminderDirective.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Dropping reminder directive with invalid fields: {e.error_count()} errors")
            return end if self.strip_malformed_reminders else None

        return end

    def _decode_object(self, line: str, index: int):
        """Decode one JSON object starting at index; (None, None) if there isn't one"""
        if index >= len(line) or line[index] != "{":
            return None, None
        try:
            data, end = self._decoder.raw_decode(line, index)
        except json.JSONDecodeError:
            return None, None
        if not isinstance(data, dict):
            return None, None
        return end, data
