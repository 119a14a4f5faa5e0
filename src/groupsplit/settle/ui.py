"""Interactive UI components for picking a group member."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..models import Member

logger = logging.getLogger(__name__)


def member_label(member: Member) -> str:
    """Label shown in the picker, e.g. 'Alice <alice@example.com>'."""
    if member.name and member.email:
        return f"{member.name} <{member.email}>"
    return member.display_name or member.id


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="al" matches "Alice <alice@example.com>"
        query="bex" matches "Bob <bob@example.com>"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


class MemberCompleter(Completer):
    """Fuzzy search completer for group members."""

    def __init__(self, members: list[Member]):
        """Initialize the completer with the group roster."""
        self.members = members

        self.label_to_id = {}
        for member in members:
            self.label_to_id[member_label(member)] = member.id

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for label in self.label_to_id:
            if query and not fuzzy_match(query, label.lower()):
                continue
            yield Completion(
                text=label,
                start_position=-len(document.text),
                display=label,
            )


def select_member_interactive(members: list[Member]) -> str | None:
    """
    Interactive member selection with fuzzy search.

    Args:
        members: The group roster

    Returns:
        Selected member ID, or None to cancel
    """
    if not members:
        print("\nNo members in this group")
        return None

    print("\nWhose balance do you want to see?")
    print("   Type to search, press Enter to confirm, Ctrl+C to cancel\n")

    completer = MemberCompleter(members)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt(
                "Member: ",
                complete_while_typing=True,
            )

            if not result:
                return None

            # Accept a completed label or a raw member ID
            member_id = completer.label_to_id.get(result)
            if member_id is None and any(m.id == result for m in members):
                member_id = result

            if member_id is not None:
                logger.info(f"User selected member: {member_id}")
                return member_id

            print("Unknown member. Select from the list or press Tab to complete.")

    except (KeyboardInterrupt, EOFError):
        print("\nCancelled")
        return None
