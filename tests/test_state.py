"""Tests for workflow state schemas and resume payloads."""

import pytest
from pydantic import ValidationError

from earn_agent.workflows import (
    DiscoveryState,
    ExecutionState,
    ReviewDecision,
    SelectionResume,
    normalize_telegram,
)
from earn_agent.workflows.execution import append_error


def test_execution_state_fields():
    """ExecutionState carries every field the graph nodes exchange."""
    annotations = ExecutionState.__annotations__

    required_fields = [
        "slug",
        "listing_id",
        "workspace_path",
        "artifacts",
        "repo_url",
        "approved",
        "submitted",
        "submission_id",
    ]

    for field in required_fields:
        assert field in annotations, f"Missing field: {field}"


def test_discovery_state_fields():
    """Test that discovery state accepts its fields."""
    for field in ["take", "deadline", "listings", "ranked_listings", "selected_slugs"]:
        assert field in DiscoveryState.__annotations__


def test_selection_resume_requires_slugs():
    """Test that a selection needs a slugs list."""
    assert SelectionResume(selected_slugs=["a"]).selected_slugs == ["a"]
    with pytest.raises(ValidationError):
        SelectionResume.model_validate({})


def test_review_decision_defaults():
    """Test that optional review fields default to None."""
    decision = ReviewDecision.model_validate({"approved": False})

    assert decision.link is None
    assert decision.eligibility_answers is None


def test_review_decision_validates_answers():
    """Test that eligibility answers are validated."""
    with pytest.raises(ValidationError):
        ReviewDecision.model_validate(
            {"approved": True, "eligibility_answers": [{"question": "Q"}]}
        )


class TestNormalizeTelegram:
    """Tests for contact handle normalization."""

    def test_at_handle(self):
        """Test that a leading @ is stripped."""
        assert normalize_telegram("@alice") == "http://t.me/alice"

    def test_full_url_is_unchanged_in_value(self):
        """Test that a full URL keeps its handle."""
        assert normalize_telegram("https://t.me/alice") == "http://t.me/alice"
        assert normalize_telegram("http://t.me/alice") == "http://t.me/alice"

    def test_bare_handle(self):
        """Test that a bare handle becomes a t.me URL."""
        assert normalize_telegram("alice") == "http://t.me/alice"

    def test_empty(self):
        """Test that an empty handle yields nothing."""
        assert normalize_telegram(None) is None
        assert normalize_telegram("  ") is None


def test_append_error_keeps_prior_context():
    """Test that appended errors keep the earlier text."""
    assert append_error(None, "b") == "b"
    assert append_error("a", "b") == "a\nb"
