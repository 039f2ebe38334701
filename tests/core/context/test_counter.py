"""Tests for EstimatingCounter."""

from chatgbt.core.context.counter import EstimatingCounter, TokenCounter
from chatgbt.core.interface.models import ConversationHistory, Message


class TestEstimatingCounter:
    def test_conforms_to_protocol(self) -> None:
        assert isinstance(EstimatingCounter(), TokenCounter)

    def test_empty_is_zero(self) -> None:
        assert EstimatingCounter().count_messages([]) == 0

    def test_role_content_and_overhead(self) -> None:
        # "user" (4) + 12 chars + 20 overhead = 36 chars -> 9 tokens
        msg = Message.user("x" * 12)
        assert EstimatingCounter().count_messages([msg]) == 9

    def test_divides_after_summing(self) -> None:
        # 26 chars each: 52 // 4 = 13, where per-message flooring would give 12.
        msgs = [Message.user("ab"), Message.user("ab")]
        assert EstimatingCounter().count_messages(msgs) == 13

    def test_accepts_history(self) -> None:
        history = ConversationHistory(
            messages=[Message.system("You are helpful."), Message.assistant("hi")]
        )
        expected = (6 + 16 + 20 + 9 + 2 + 20) // 4
        assert EstimatingCounter().count_messages(history) == expected

    def test_deterministic(self) -> None:
        msgs = [Message.user("hello world"), Message.assistant("hi there")]
        counter = EstimatingCounter()
        assert counter.count_messages(msgs) == counter.count_messages(msgs)
