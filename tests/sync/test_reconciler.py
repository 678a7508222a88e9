"""
Unit Tests for Question Reconciliation

Tests for pruning, growth, heading answer propagation and idempotence.
"""

from dataclasses import replace

import pytest

from ielts_toolkit.config import SyncConfig
from ielts_toolkit.core.models import (
    Flowchart,
    FlowchartStep,
    GroupType,
    Part,
    Question,
    QuestionGroup,
    Ref,
)
from ielts_toolkit.sync.reconciler import AUTO_REF_PREFIX, build_scope_index, reconcile


def _summary_part(text: str) -> Part:
    group = QuestionGroup(Ref.persisted("g1"), GroupType.SUMMARY_COMPLETION, group_text=text)
    return Part(Ref.persisted("p1"), groups=(group,))


def _summary_question(qid: str, number: int) -> Question:
    return Question(
        Ref.persisted(qid), Ref.persisted("p1"), Ref.persisted("g1"),
        prompt=f"Gap {number}: [[{number}]]", correct_answer="x", order_index=number,
    )


class TestReconcileNoop:
    """Tests for consistent snapshots."""

    def test_reconcile_when_already_consistent_then_unchanged(self, reading_part, reading_questions):
        """A consistent snapshot comes back untouched."""
        # Act
        result = reconcile([reading_part], reading_questions)

        # Assert
        assert not result.changed
        assert result.questions == reading_questions
        assert result.removed_persisted_ids == ()

    def test_reconcile_when_run_on_own_output_then_noop(self, reading_part):
        """reconcile(reconcile(s)) == reconcile(s)."""
        # Arrange
        first = reconcile([reading_part], [])

        # Act
        second = reconcile([reading_part], first.questions)

        # Assert
        assert first.changed
        assert not second.changed
        assert second.questions == first.questions

    def test_reconcile_when_tag_number_huge_then_no_error_and_nothing_created(self):
        """An overlong tag number is plain text, not a failure."""
        part = _summary_part("[[" + "1" * 5000 + "]]")

        result = reconcile([part], [])

        assert not result.changed


class TestReconcilePrune:
    """Tests for orphan pruning."""

    def test_prune_when_tag_missing_from_group_then_only_that_question_removed(self):
        """Group tags {1, 2} with questions on 1, 2, 3 removes only 3."""
        # Arrange
        part = _summary_part("A [[1]] and [[2]]")
        questions = [_summary_question(f"q{i}", i) for i in (1, 2, 3)]

        # Act
        result = reconcile([part], questions)

        # Assert
        assert [q.ref.value for q in result.questions] == ["q1", "q2"]
        assert result.removed_persisted_ids == ("q3",)

    def test_prune_when_pending_question_removed_then_not_reported(self):
        """Only persisted ids need deleting from the store."""
        # Arrange
        part = _summary_part("no gaps")
        question = replace(_summary_question("q1", 1), ref=Ref.pending("temp-q1"))

        # Act
        result = reconcile([part], [question])

        # Assert
        assert result.questions == ()
        assert len(result.removed) == 1
        assert result.removed_persisted_ids == ()

    def test_prune_when_part_deleted_then_questions_cascade(self, reading_part, reading_questions):
        result = reconcile([], reading_questions)

        assert result.questions == ()
        assert set(result.removed_persisted_ids) == {"q-h1", "q-h2", "q-n1", "q-n2"}

    def test_prune_when_group_deleted_then_its_questions_removed(self, reading_part, reading_questions):
        # Arrange
        part = replace(reading_part, groups=reading_part.groups[:1])

        # Act
        result = reconcile([part], reading_questions)

        # Assert
        assert result.removed_persisted_ids == ("q-n1", "q-n2")

    def test_prune_when_question_has_no_tag_then_kept(self):
        """Directly authored questions (multiple choice) have no backing tag."""
        # Arrange
        group = QuestionGroup(Ref.persisted("g1"), GroupType.MULTIPLE_CHOICE)
        part = Part(Ref.persisted("p1"), groups=(group,))
        question = Question(Ref.persisted("q1"), part.ref, group.ref, prompt="Which year?")

        # Act
        result = reconcile([part], [question])

        # Assert
        assert not result.changed

    def test_prune_when_ungrouped_tag_in_part_body_then_kept(self):
        part = Part(Ref.persisted("p1"), body="The [[1]] was built")
        question = Question(Ref.persisted("q1"), part.ref, prompt="Gap [[1]]")

        result = reconcile([part], [question])

        assert not result.changed

    def test_prune_when_heading_gap_removed_from_body_then_removed(self, reading_part, reading_questions):
        # Arrange
        part = replace(reading_part, body="<p>[H1] Paragraph A</p>")

        # Act
        result = reconcile([part], reading_questions)

        # Assert
        assert result.removed_persisted_ids == ("q-h2",)

    def test_prune_when_heading_question_has_no_gap_then_removed(self, reading_part):
        question = Question(Ref.persisted("q-x"), reading_part.ref, Ref.persisted("g-headings"),
                            prompt="Paragraph C")

        result = reconcile([reading_part], [question]).removed

        assert [q.ref.value for q in result] == ["q-x"]

    def test_prune_when_tag_in_wrong_dialect_then_removed(self, reading_part):
        """Note completion only recognises [[nN]]."""
        question = Question(Ref.persisted("q-x"), reading_part.ref, Ref.persisted("g-notes"),
                            prompt="Gap 1: [[1]]")

        result = reconcile([reading_part], [question])

        assert "q-x" in result.removed_persisted_ids


class TestReconcileGrow:
    """Tests for question synthesis in auto-growing groups."""

    def test_grow_when_note_group_has_two_gaps_then_two_questions_in_tag_order(self):
        # Arrange
        group = QuestionGroup(Ref.persisted("g1"), GroupType.NOTE_COMPLETION,
                              group_text="Item [[n2]] and [[n1]]")
        part = Part(Ref.persisted("p1"), groups=(group,))

        # Act
        result = reconcile([part], [])

        # Assert
        assert [q.prompt for q in result.questions] == ["Gap 1: [[n1]]", "Gap 2: [[n2]]"]
        assert [q.order_index for q in result.questions] == [1, 2]
        assert all(q.ref.is_pending for q in result.questions)
        assert all(q.ref.value.startswith(AUTO_REF_PREFIX) for q in result.questions)
        assert all(q.correct_answer == "" for q in result.questions)

    def test_grow_when_existing_question_covers_tag_then_only_missing_created(self):
        # Arrange
        part = _summary_part("[[1]] [[2]] [[3]]")
        existing = [_summary_question("q2", 2)]

        # Act
        result = reconcile([part], existing)

        # Assert
        assert [q.prompt for q in result.created] == ["Gap 1: [[1]]", "Gap 3: [[3]]"]
        assert result.questions[0] == existing[0]

    def test_grow_when_table_cells_then_table_prompt(self, table_group):
        part = Part(Ref.persisted("p1"), groups=(table_group,))

        result = reconcile([part], [])

        assert [q.prompt for q in result.questions] == [
            "Gap 1 from table: [[1]]", "Gap 2 from table: [[2]]",
        ]

    def test_grow_when_flowchart_then_prompt_is_tag(self):
        group = QuestionGroup(
            Ref.persisted("g1"), GroupType.FLOWCHART_COMPLETION,
            flowchart=Flowchart(steps=(FlowchartStep("s1", "Heat [f1] then [f2]"),)),
        )
        part = Part(Ref.persisted("p1"), groups=(group,))

        result = reconcile([part], [])

        assert [q.prompt for q in result.questions] == ["[f1]", "[f2]"]

    def test_grow_when_group_not_auto_growing_then_nothing_created(self):
        group = QuestionGroup(Ref.persisted("g1"), GroupType.SENTENCE_COMPLETION,
                              group_text="The [[1]] opened")
        part = Part(Ref.persisted("p1"), groups=(group,))

        assert not reconcile([part], []).changed

    def test_grow_when_config_disables_type_then_nothing_created(self):
        part = _summary_part("[[1]]")
        config = SyncConfig(auto_grow_types=frozenset({GroupType.NOTE_COMPLETION}))

        assert not reconcile([part], [], config).changed

    def test_grow_when_two_groups_then_refs_unique(self):
        # Arrange
        g1 = QuestionGroup(Ref.persisted("g1"), GroupType.SUMMARY_COMPLETION, group_text="[[1]]")
        g2 = QuestionGroup(Ref.persisted("g2"), GroupType.SUMMARY_COMPLETION, group_text="[[1]]")
        part = Part(Ref.persisted("p1"), groups=(g1, g2))

        # Act
        result = reconcile([part], [])

        # Assert
        refs = [q.ref for q in result.questions]
        assert len(refs) == len(set(refs)) == 2
        assert [q.group_ref for q in result.questions] == [g1.ref, g2.ref]


class TestReconcileHeadingAnswers:
    """Tests for inline heading answer propagation."""

    def test_propagate_when_inline_answer_differs_then_answer_overwritten(
        self, reading_part, reading_questions
    ):
        """The body's data-correct-answer is authoritative after one pass."""
        # Arrange
        questions = [replace(q, correct_answer="i") if q.ref.value == "q-h2" else q
                     for q in reading_questions]

        # Act
        result = reconcile([reading_part], questions)

        # Assert
        by_id = {q.ref.value: q for q in result.questions}
        assert by_id["q-h2"].correct_answer == "iii"
        assert [q.ref.value for q in result.updated] == ["q-h2"]

    def test_propagate_when_bracket_heading_then_stored_answer_kept(self, reading_part, reading_questions):
        result = reconcile([reading_part], reading_questions)

        assert result.questions[0].correct_answer == "ii"

    def test_propagate_when_gap_only_in_prompt_then_gap_number_backfilled(self, reading_part):
        # Arrange
        question = Question(Ref.persisted("q-h1"), reading_part.ref, Ref.persisted("g-headings"),
                            prompt="[H1]", correct_answer="ii")

        # Act
        result = reconcile([reading_part], [question])

        # Assert
        assert result.questions[0].gap_number == 1
        assert not reconcile([reading_part], result.questions).changed


class TestScopeIndex:
    """Tests for build_scope_index."""

    def test_index_when_reading_part_then_headings_and_group_tags(self, reading_part):
        index = build_scope_index([reading_part])

        assert set(index.part_headings[reading_part.ref]) == {1, 2}
        assert index.part_headings[reading_part.ref][2].inline_answer == "iii"
        assert [t.number for t in index.group_tags[Ref.persisted("g-notes")]] == [1, 2]
        assert index.group_tags[Ref.persisted("g-headings")] == ()

    @pytest.mark.parametrize("missing", [None, Ref.persisted("nope")])
    def test_group_of_when_unknown_then_none(self, reading_part, missing):
        assert build_scope_index([reading_part]).group_of(missing) is None
