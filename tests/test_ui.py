"""Tests for the interactive member picker."""

from unittest.mock import MagicMock, patch

import pytest
from prompt_toolkit.document import Document

from groupsplit.models import Member
from groupsplit.settle.ui import (
    MemberCompleter,
    fuzzy_match,
    member_label,
    select_member_interactive,
)


@pytest.fixture
def members():
    return [
        Member(id="u1", name="Alice", email="alice@example.com"),
        Member(id="u2", name="Bob", email="bob@example.com"),
        Member(id="u3", email="carol@example.com"),
    ]


class TestMemberLabel:
    def test_name_and_email(self, members):
        assert member_label(members[0]) == "Alice <alice@example.com>"

    def test_email_only(self, members):
        assert member_label(members[2]) == "carol@example.com"

    def test_id_only(self):
        assert member_label(Member(id="u9")) == "u9"


class TestFuzzyMatch:
    def test_in_order_characters(self):
        assert fuzzy_match("al", "alice <alice@example.com>")
        assert fuzzy_match("bex", "bob <bob@example.com>")

    def test_out_of_order(self):
        assert not fuzzy_match("la", "alice")

    def test_empty_query(self):
        assert fuzzy_match("", "anything")


class TestMemberCompleter:
    def _labels(self, completer, text):
        document = Document(text)
        return [c.text for c in completer.get_completions(document, None)]

    def test_all_members_without_query(self, members):
        completer = MemberCompleter(members)

        assert self._labels(completer, "") == [
            "Alice <alice@example.com>",
            "Bob <bob@example.com>",
            "carol@example.com",
        ]

    def test_filters_by_query(self, members):
        completer = MemberCompleter(members)

        assert self._labels(completer, "car") == ["carol@example.com"]

    def test_label_to_id(self, members):
        completer = MemberCompleter(members)

        assert completer.label_to_id["Bob <bob@example.com>"] == "u2"


class TestSelectMemberInteractive:
    @patch("groupsplit.settle.ui.PromptSession")
    def test_selects_by_label(self, mock_session_class, members):
        session = MagicMock()
        session.prompt.return_value = "Bob <bob@example.com>"
        mock_session_class.return_value = session

        assert select_member_interactive(members) == "u2"

    @patch("groupsplit.settle.ui.PromptSession")
    def test_selects_by_raw_id(self, mock_session_class, members):
        session = MagicMock()
        session.prompt.return_value = "u3"
        mock_session_class.return_value = session

        assert select_member_interactive(members) == "u3"

    @patch("groupsplit.settle.ui.PromptSession")
    def test_retries_after_invalid_input(self, mock_session_class, members):
        session = MagicMock()
        session.prompt.side_effect = ["nobody", "Alice <alice@example.com>"]
        mock_session_class.return_value = session

        assert select_member_interactive(members) == "u1"
        assert session.prompt.call_count == 2

    @patch("groupsplit.settle.ui.PromptSession")
    def test_empty_input_cancels(self, mock_session_class, members):
        session = MagicMock()
        session.prompt.return_value = ""
        mock_session_class.return_value = session

        assert select_member_interactive(members) is None

    @patch("groupsplit.settle.ui.PromptSession")
    def test_ctrl_c_cancels(self, mock_session_class, members):
        session = MagicMock()
        session.prompt.side_effect = KeyboardInterrupt
        mock_session_class.return_value = session

        assert select_member_interactive(members) is None

    def test_no_members(self):
        assert select_member_interactive([]) is None
