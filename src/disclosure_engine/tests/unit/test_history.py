"""Unit tests for History"""

import pytest

from disclosure_engine.models.answer import Answer
from disclosure_engine.models.history import History


FLOOR = Answer(question_id="floor", value="1", label="1F")
TYPE = Answer(question_id="type", value="a", label="A")


class TestHistoryTransitions:
    """Test append and truncate never mutate the receiver"""
    
    def test_empty_history(self):
        """Test a new history is empty"""
        history = History()
        
        assert len(history) == 0
        assert not history
        assert history.last is None
    
    def test_append_returns_new_history(self):
        """Test append leaves the receiver untouched"""
        empty = History()
        one = empty.append(FLOOR)
        two = one.append(TYPE)
        
        assert len(empty) == 0
        assert list(one) == [FLOOR]
        assert list(two) == [FLOOR, TYPE]
        assert two.last == TYPE
    
    def test_truncate_returns_new_history(self):
        """Test truncate keeps a prefix and leaves the receiver untouched"""
        history = History([FLOOR, TYPE])
        
        truncated = history.truncate(1)
        
        assert list(truncated) == [FLOOR]
        assert list(history) == [FLOOR, TYPE]
    
    def test_truncate_to_empty(self):
        """Test truncating to zero yields an empty history"""
        assert History([FLOOR]).truncate(0) == History()
    
    @pytest.mark.parametrize("length", [-1, 3])
    def test_truncate_out_of_range(self, length):
        """Test truncate rejects lengths outside the history"""
        with pytest.raises(ValueError):
            History([FLOOR, TYPE]).truncate(length)
    
    def test_rejects_non_answers(self):
        """Test only answers can be stored"""
        with pytest.raises(TypeError):
            History([{"question_id": "floor"}])


class TestHistoryAccess:
    """Test read helpers"""
    
    def test_value_equality_and_hash(self):
        """Test histories compare and hash by value"""
        first = History().append(FLOOR).append(TYPE)
        second = History([FLOOR, TYPE])
        
        assert first == second
        assert hash(first) == hash(second)
        assert first == [FLOOR, TYPE]
        assert first != History([FLOOR])
    
    def test_indexing_and_slicing(self):
        """Test sequence access"""
        history = History([FLOOR, TYPE])
        
        assert history[0] == FLOOR
        assert history[-1] == TYPE
        assert isinstance(history[:1], History)
        assert history[:1] == History([FLOOR])
        assert TYPE in history
    
    def test_lookup_helpers(self):
        """Test find and answer maps"""
        history = History([FLOOR, TYPE])
        
        assert history.find("type") == TYPE
        assert history.find("landmark") is None
        assert history.question_ids() == ["floor", "type"]
        assert history.answer_map() == {"floor": "1", "type": "a"}
        assert history.label_map() == {"floor": "1F", "type": "A"}
    
    def test_list_round_trip(self):
        """Test serialization to answer dicts"""
        history = History([FLOOR, TYPE])
        
        data = history.to_list()
        
        assert data[0] == {"question_id": "floor", "value": "1", "label": "1F"}
        assert History.from_list(data) == history
