"""
Reveal the transcript panel on a video page.

The "Show transcript" button is often not reachable straight away: the live
chat panel can cover it, it can sit behind a collapsed description ("...more"),
or its engagement panel can be left hidden by the page itself. The state
machine below tries each of these in turn before giving up.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from tube2tldr.config import Settings
from tube2tldr.page import ElementLocator, PageNode, PageTree
from tube2tldr.transcript import TranscriptParser


class RevealState(Enum):
    START = "start"
    TRY_DIRECT = "try-direct"
    TRY_AFTER_CHAT_REMOVAL = "try-after-chat-removal"
    TRY_AFTER_EXPAND = "try-after-expand"
    TRY_AFTER_FORCE_SHOW = "try-after-force-show"
    FOUND = "found"
    NOT_FOUND = "not-found"


@dataclass
class RevealOutcome:
    state: RevealState
    trigger: Optional[PageNode] = None
    trace: List[RevealState] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.state is RevealState.FOUND


class TranscriptRevealStateMachine:
    """Find and click the transcript trigger, falling back step by step."""

    def __init__(
        self,
        page: PageTree,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
        status_fn: Optional[Callable[[str], None]] = None,
    ):
        self.page = page
        self.settings = settings or Settings()
        self.locator = ElementLocator(page, self.settings.selectors)
        self.sleep = sleep
        self.status_fn = status_fn

    def _status(self, message: str, always: bool = False) -> None:
        if not (always or self.settings.verbose):
            return
        if self.status_fn is not None:
            self.status_fn(message)
        else:
            print(f"    {message}")

    def _settle(self, reason: str) -> None:
        self._status(f"{reason} (waiting {self.settings.settle_seconds:.1f}s)")
        self.sleep(self.settings.settle_seconds)

    # ----------------------------
    # Side effects
    # ----------------------------

    def remove_chat_container(self) -> bool:
        """Remove the live chat panel. Best-effort: failures are reported, not raised."""
        try:
            chat = self.locator.find_chat_container()
            if chat is None:
                return False
            chat.remove()
            return True
        except Exception as e:
            self._status(f"Warning: could not remove the chat container: {e}", always=True)
            return False

    def force_show_transcript_panels(self) -> int:
        """Set display: block on every panel holding a show transcript control."""
        panels = self.locator.find_transcript_panels()
        for panel in panels:
            panel.set_style("display", "block")
        return len(panels)

    # ----------------------------
    # State machine
    # ----------------------------

    def reveal(self) -> RevealOutcome:
        """Walk the fallbacks until the trigger is located. Does not click it."""
        trace = [RevealState.START]

        def done(state: RevealState, trigger: Optional[PageNode] = None) -> RevealOutcome:
            trace.append(state)
            return RevealOutcome(state=state, trigger=trigger, trace=trace)

        trace.append(RevealState.TRY_DIRECT)
        trigger = self.locator.find_transcript_trigger()
        if trigger is not None:
            return done(RevealState.FOUND, trigger)

        # The chat panel hides the DIV holding the transcript button.
        trace.append(RevealState.TRY_AFTER_CHAT_REMOVAL)
        if self.remove_chat_container():
            self._status("Closed the chat messages window.")
            self.force_show_transcript_panels()
            self._settle("Making the transcript panel visible")
        else:
            self._status("The chat messages window was not visible or could not be closed.")
        trigger = self.locator.find_transcript_trigger()
        if trigger is not None:
            return done(RevealState.FOUND, trigger)

        # No expand controls means there is no hidden panel left to reveal.
        trace.append(RevealState.TRY_AFTER_EXPAND)
        expand_buttons = self.locator.find_expand_buttons()
        if not expand_buttons:
            self._status("No expand buttons that might be hiding the transcript button.")
            return done(RevealState.NOT_FOUND)

        self._status(f"Clicking {len(expand_buttons)} expand button(s).")
        for button in expand_buttons:
            button.click()
        self._settle("Expanding the description")
        trigger = self.locator.find_transcript_trigger()
        if trigger is not None:
            return done(RevealState.FOUND, trigger)

        # The page sometimes leaves the engagement panel hidden.
        trace.append(RevealState.TRY_AFTER_FORCE_SHOW)
        shown = self.force_show_transcript_panels()
        self._status(f"Forced {shown} engagement panel(s) visible.")
        trigger = self.locator.find_transcript_trigger()
        if trigger is not None:
            return done(RevealState.FOUND, trigger)

        return done(RevealState.NOT_FOUND)

    def run(self) -> RevealOutcome:
        """Reveal the trigger, click it and wait for the panel to fill in."""
        outcome = self.reveal()
        if not outcome.found:
            return outcome

        self._status("Clicking the transcript button.")
        outcome.trigger.click()
        self.wait_for_panel()
        return outcome

    def wait_for_panel(self) -> None:
        if self.settings.settle_strategy == "fixed":
            self._settle("Waiting for transcript")
            return

        # "poll": wait until the entry count is non-zero and stops changing
        parser = TranscriptParser(self.page, self.settings.selectors)
        last_count = -1
        stable = 0
        for _ in range(self.settings.max_settle_polls):
            self.sleep(self.settings.settle_seconds)
            count = parser.count_entries()
            if count > 0 and count == last_count:
                stable += 1
                if stable >= self.settings.stable_polls:
                    self._status(f"Transcript panel settled at {count} entries.")
                    return
            else:
                stable = 0
            last_count = count
        self._status(
            f"Warning: transcript panel still changing after "
            f"{self.settings.max_settle_polls} checks, parsing anyway.",
            always=True,
        )
