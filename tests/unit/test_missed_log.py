"""
Unit tests for the missed-question log.
"""

import json

from playquiz.scoring import MissedQuestionLog


class TestMissedQuestionLog:
    """Test ordering, dedup and serialization."""

    def test_records_in_first_miss_order(self):
        log = MissedQuestionLog()
        log.record("3+4=7")
        log.record("5 > 3")
        assert log.entries() == ["3+4=7", "5 > 3"]

    def test_duplicates_ignored(self):
        log = MissedQuestionLog()
        assert log.record("drinks") is True
        assert log.record("drinks") is False
        assert len(log) == 1

    def test_membership_and_iteration(self):
        log = MissedQuestionLog()
        log.record("a")
        log.record("b")
        assert "a" in log
        assert "c" not in log
        assert list(log) == ["a", "b"]

    def test_serialize_is_json_array(self):
        log = MissedQuestionLog()
        log.record("What color is the sky?")
        log.record("1, 2, _, 4")
        assert json.loads(log.serialize()) == ["What color is the sky?", "1, 2, _, 4"]

    def test_serialize_empty(self):
        assert MissedQuestionLog().serialize() == "[]"

    def test_serialize_keeps_unicode(self):
        log = MissedQuestionLog()
        log.record("café")
        assert log.serialize() == '["café"]'
