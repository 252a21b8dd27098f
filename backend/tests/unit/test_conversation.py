"""Tests for the conversation turn lifecycle."""

import pytest

from exam_prep.chat.models import ChatMessage
from exam_prep.core.exceptions import InvalidRequestError, TurnInProgressError
from exam_prep.session.conversation import Conversation, TurnState


class TestConversation:
    """Test cases for Conversation."""

    def test_successful_turn(self):
        """Test a turn that completes with a reply."""
        conversation = Conversation()

        history = conversation.begin_turn("  What is osmosis?  ")
        assert conversation.state is TurnState.SUBMITTING
        assert history == [ChatMessage("user", "What is osmosis?")]

        conversation.complete_turn("Diffusion of water.")
        assert conversation.state is TurnState.SUCCEEDED

        conversation.settle()
        assert conversation.state is TurnState.IDLE
        assert conversation.messages == (
            ChatMessage("user", "What is osmosis?"),
            ChatMessage("assistant", "Diffusion of water."),
        )

    def test_failed_turn_appends_error_message(self):
        """Test that a failed turn appends an Error: message."""
        conversation = Conversation()
        conversation.begin_turn("Hi")

        message = conversation.fail_turn("Chat failed: timeout")

        assert conversation.state is TurnState.FAILED
        assert message == ChatMessage("assistant", "Error: Chat failed: timeout")
        assert len(conversation) == 2

    def test_second_turn_while_submitting_is_rejected(self):
        """Test that only one turn can be outstanding."""
        conversation = Conversation()
        conversation.begin_turn("First")

        with pytest.raises(TurnInProgressError):
            conversation.begin_turn("Second")

        assert len(conversation) == 1

    def test_blank_message_rejected(self):
        """Test that whitespace-only input starts no turn."""
        conversation = Conversation()

        with pytest.raises(InvalidRequestError):
            conversation.begin_turn("   ")

        assert conversation.state is TurnState.IDLE
        assert len(conversation) == 0

    def test_finished_turn_settles_on_next_begin(self):
        """Test that a finished turn settles when the next one begins."""
        conversation = Conversation()
        conversation.begin_turn("One")
        conversation.complete_turn("Reply")

        conversation.begin_turn("Two")

        assert conversation.state is TurnState.SUBMITTING
        assert [m.role for m in conversation.messages] == ["user", "assistant", "user"]

    def test_reply_without_turn_is_invalid(self):
        """Test that completing without a turn is an invalid transition."""
        conversation = Conversation()

        with pytest.raises(RuntimeError):
            conversation.complete_turn("Orphan reply")

    def test_begin_returns_snapshot(self):
        """Test that begin_turn returns the history including the new message."""
        conversation = Conversation()
        history = conversation.begin_turn("Hi")
        history.append(ChatMessage("assistant", "tampered"))

        assert len(conversation) == 1

    def test_payload(self):
        """Test the wire form of the history."""
        conversation = Conversation()
        conversation.begin_turn("Hi")

        assert conversation.to_payload() == [{"role": "user", "content": "Hi"}]
