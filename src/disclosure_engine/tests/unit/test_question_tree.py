"""Unit tests for the declarative question tree provider"""

import pytest

from disclosure_engine.exceptions import DefinitionError
from disclosure_engine.models.answer import Answer
from disclosure_engine.models.history import History
from disclosure_engine.models.outcome import TERMINAL
from disclosure_engine.providers.question_tree import QuestionTreeProvider


def _tree(**overrides):
    data = {
        "version": "1.0.0",
        "flow_id": "test",
        "initial": "first",
        "questions": {
            "first": {"id": "q1", "title": "First?", "options": [{"value": "x", "label": "X"}, {"value": "y", "label": "Y"}]},
            "second": {"id": "q2", "title": "Second?", "options": [{"value": "z", "label": "Z"}]},
        },
        "branches": [
            {"after": "q1", "next": "second"},
        ],
    }
    data.update(overrides)
    return data


class TestQuestionTreeLoading:
    """Test definition loading and validation"""
    
    def test_load_yaml_fixture(self, fixtures_dir):
        """Test the location tree fixture loads"""
        provider = QuestionTreeProvider.from_yaml(fixtures_dir / "location_tree.yaml")
        
        assert provider.definition.flow_id == "where-am-i"
        assert provider.initial_question.id == "location"
        assert len(provider.definition.questions) == 6
    
    def test_unsupported_version(self):
        """Test unknown definition versions are rejected"""
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_dict(_tree(version="2.0.0"))
        
        assert "Unsupported question tree version" in str(exc_info.value)
    
    def test_unknown_initial(self):
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_dict(_tree(initial="missing"))
        
        assert "Initial question 'missing'" in str(exc_info.value)
    
    def test_unknown_next_key(self):
        """Test rules must point at defined question keys"""
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_dict(_tree(branches=[{"after": "q1", "next": "third"}]))
        
        assert "unknown question key 'third'" in str(exc_info.value)
    
    def test_unknown_after_id(self):
        """Test rules must follow defined question ids"""
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_dict(_tree(branches=[{"after": "first", "next": "second"}]))
        
        assert "unknown question id 'first'" in str(exc_info.value)
    
    def test_duplicate_question_ids(self):
        """Test question ids must be unique across keys"""
        questions = _tree()["questions"]
        questions["again"] = dict(questions["first"])
        
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_dict(_tree(questions=questions))
        
        assert "Duplicate question ids" in str(exc_info.value)
    
    def test_missing_file(self, tmp_path):
        """Test missing files raise DefinitionError"""
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_yaml(tmp_path / "missing.yaml")
        
        assert "not found" in str(exc_info.value)
    
    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("version: [1.0.0\n")
        
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_yaml(path)
        
        assert "Malformed YAML" in str(exc_info.value)
    
    def test_top_level_list_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        
        with pytest.raises(DefinitionError) as exc_info:
            QuestionTreeProvider.from_yaml(path)
        
        assert "mapping" in str(exc_info.value)


class TestQuestionTreeDecisions:
    """Test branching over the location tree"""
    
    @pytest.fixture
    def provider(self, fixtures_dir):
        return QuestionTreeProvider.from_yaml(fixtures_dir / "location_tree.yaml")
    
    def test_empty_history_yields_initial(self, provider):
        assert provider.decide(History()) == provider.initial_question
    
    def test_branch_on_value(self, provider):
        """Test the first answer selects the detail question"""
        history = History([Answer("location", "entrance", "Entrance")])
        
        assert provider.decide(history).id == "entrance-type"
    
    def test_value_rule_wins_over_wildcard(self, provider):
        """Test a value rule takes precedence over the wildcard for the same question"""
        history = History([
            Answer("location", "restaurant", "Restaurant"),
            Answer("restaurant-detail", "queue", "Waiting line"),
        ])
        
        assert provider.decide(history).id == "queue-position"
    
    def test_wildcard_rule(self, provider):
        history = History([
            Answer("location", "restaurant", "Restaurant"),
            Answer("restaurant-detail", "inside", "Dining area"),
        ])
        
        assert provider.decide(history).id == "urgency"
    
    def test_rule_without_next_terminates(self, provider):
        """Test an explicit end rule"""
        history = History([
            Answer("location", "restroom", "Restroom"),
            Answer("restroom-detail", "mens", "Men's"),
            Answer("urgency", "low", "Not urgent"),
        ])
        
        assert provider.decide(history) is TERMINAL
    
    def test_unmatched_answer_terminates(self, provider):
        """Test answers without a matching rule end the flow"""
        history = History([Answer("location", "shop", "Shop")])
        
        assert provider.decide(history) is TERMINAL
    
    def test_decisions_are_deterministic(self, provider):
        """Test equal histories yield equal outcomes"""
        first = History([Answer("location", "entrance", "Entrance")])
        second = History().append(Answer("location", "entrance", "Entrance"))
        
        assert provider.decide(first) == provider.decide(second)
    
    def test_value_rule_defined_after_wildcard(self):
        """Test rule order does not let a wildcard shadow a value rule"""
        provider = QuestionTreeProvider.from_dict(_tree(branches=[
            {"after": "q1", "next": None},
            {"after": "q1", "when": "y", "next": "second"},
        ]))
        
        assert provider.decide(History([Answer("q1", "x", "X")])) is TERMINAL
        assert provider.decide(History([Answer("q1", "y", "Y")])).id == "q2"
