"""
Unit Tests for Configuration

Tests for SyncConfig and ScoringConfig validation.
"""

import pytest

from ielts_toolkit.config import ScoringConfig, SyncConfig
from ielts_toolkit.core.models import GroupType


class TestSyncConfig:
    """Tests for SyncConfig."""

    def test_defaults_when_created_then_two_second_debounce(self):
        config = SyncConfig()

        assert config.debounce_ms == 2000
        assert config.grows(GroupType.TABLE_COMPLETION)
        assert not config.grows(GroupType.MULTIPLE_CHOICE)

    def test_create_when_negative_debounce_then_raises(self):
        with pytest.raises(ValueError, match="debounce_ms"):
            SyncConfig(debounce_ms=-1)

    def test_create_when_template_lacks_tag_then_raises(self):
        with pytest.raises(ValueError, match="tag"):
            SyncConfig(prompt_templates={GroupType.NOTE_COMPLETION: "Gap {number}"})

    def test_prompt_for_when_type_without_template_then_default(self):
        config = SyncConfig(prompt_templates={})

        assert config.prompt_for(GroupType.TABLE_COMPLETION, "[[4]]", 4) == "Gap 4: [[4]]"

    def test_prompt_for_when_table_then_table_wording(self):
        assert SyncConfig().prompt_for(GroupType.TABLE_COMPLETION, "[[2]]", 2) == "Gap 2 from table: [[2]]"


class TestScoringConfig:
    """Tests for ScoringConfig."""

    def test_create_when_same_separators_then_raises(self):
        with pytest.raises(ValueError, match="differ"):
            ScoringConfig(alternative_separator="|", gap_separator="|")

    def test_create_when_band_scale_zero_then_raises(self):
        with pytest.raises(ValueError, match="band_scale"):
            ScoringConfig(band_scale=0)
