"""Tests for the content hierarchy: subjects, chapters, questions."""

import pytest

from examdesk.core.content import (
    create_chapter,
    create_question,
    create_subject,
    list_chapters,
    list_questions,
    list_subjects,
)
from examdesk.core.errors import NotFoundError, ValidationError


class TestSubjects:
    """Tests for subject creation and listing."""

    def test_create_subject(self, db):
        subject = create_subject(db, "Math", "teach_t1", "Numbers")

        assert subject.id.startswith("subj_")
        assert subject.name == "Math"
        assert subject.description == "Numbers"
        assert subject.teacher_id == "teach_t1"
        assert subject.created_at

    def test_description_optional(self, db):
        subject = create_subject(db, "Math", "teach_t1")
        assert subject.description is None

    @pytest.mark.parametrize("name,teacher_id", [("", "teach_t1"), ("Math", None)])
    def test_missing_fields(self, db, name, teacher_id):
        with pytest.raises(ValidationError, match="Name and teacherId required"):
            create_subject(db, name, teacher_id)

    def test_list_newest_first_and_scoped_to_teacher(self, db):
        first = create_subject(db, "Math", "teach_t1")
        second = create_subject(db, "Physics", "teach_t1")
        create_subject(db, "Art", "teach_t2")

        subjects = list_subjects(db, "teach_t1")

        assert [s.id for s in subjects] == [second.id, first.id]

    def test_list_requires_teacher(self, db):
        with pytest.raises(ValidationError):
            list_subjects(db, None)


class TestChapters:
    """Tests for chapter ordering."""

    def test_order_index_starts_at_one_and_increments(self, math_content):
        assert math_content["algebra"].order_index == 1
        assert math_content["geometry"].order_index == 2

    def test_order_index_is_per_subject(self, db, math_content):
        other = create_subject(db, "Physics", "teach_t1")

        chapter = create_chapter(db, other.id, "Motion")

        assert chapter.order_index == 1

    def test_list_by_order_index(self, db, math_content):
        subject_id = math_content["subject"].id
        create_chapter(db, subject_id, "Calculus", "Limits and derivatives")

        chapters = list_chapters(db, subject_id)

        assert [c.name for c in chapters] == ["Algebra", "Geometry", "Calculus"]
        assert [c.order_index for c in chapters] == [1, 2, 3]
        assert chapters[2].description == "Limits and derivatives"

    def test_unknown_subject(self, db):
        with pytest.raises(NotFoundError, match="Subject not found"):
            create_chapter(db, "subj_missing", "Algebra")

    @pytest.mark.parametrize("subject_id,name", [(None, "Algebra"), ("subj_1", "")])
    def test_missing_fields(self, db, subject_id, name):
        with pytest.raises(ValidationError, match="Subject ID and name required"):
            create_chapter(db, subject_id, name)

    def test_list_requires_subject(self, db):
        with pytest.raises(ValidationError):
            list_chapters(db, "")


class TestQuestions:
    """Tests for question creation and listing."""

    def test_mcq_with_options_in_order(self, math_content):
        question = math_content["question"]

        assert question.id.startswith("ques_")
        assert question.question_type == "mcq"
        assert question.marks == 5
        assert question.correct_answer == "B"
        assert [o.option_text for o in question.options] == ["A", "B", "C"]
        assert [o.order_index for o in question.options] == [0, 1, 2]
        assert all(o.id.startswith("opt_") for o in question.options)

    def test_marks_default_to_one(self, db, math_content):
        question = create_question(
            db,
            chapter_id=math_content["algebra"].id,
            question_text="Name a prime",
            question_type="short_answer",
            correct_answer="2",
        )
        assert question.marks == 1
        assert question.options == []

    def test_mcq_answer_not_checked_against_options(self, db, math_content):
        """The caller is responsible for mcq answers matching an option."""
        question = create_question(
            db,
            chapter_id=math_content["algebra"].id,
            question_text="Pick one",
            question_type="mcq",
            correct_answer="Z",
            options=["A", "B"],
        )
        assert question.correct_answer == "Z"

    @pytest.mark.parametrize(
        "field",
        ["chapter_id", "question_text", "question_type", "correct_answer"],
    )
    def test_missing_required_field(self, db, math_content, field):
        kwargs = {
            "chapter_id": math_content["algebra"].id,
            "question_text": "Q?",
            "question_type": "essay",
            "correct_answer": "A",
        }
        kwargs[field] = None

        with pytest.raises(ValidationError, match="Missing required fields"):
            create_question(db, **kwargs)

    def test_invalid_type(self, db, math_content):
        with pytest.raises(ValidationError, match="Invalid question type"):
            create_question(
                db,
                chapter_id=math_content["algebra"].id,
                question_text="Q?",
                question_type="true_false",
                correct_answer="true",
            )

    @pytest.mark.parametrize("marks", [0, -3, "many"])
    def test_invalid_marks(self, db, math_content, marks):
        with pytest.raises(ValidationError, match="marks"):
            create_question(
                db,
                chapter_id=math_content["algebra"].id,
                question_text="Q?",
                question_type="essay",
                correct_answer="A",
                marks=marks,
            )

    def test_options_must_be_strings(self, db, math_content):
        with pytest.raises(ValidationError, match="options"):
            create_question(
                db,
                chapter_id=math_content["algebra"].id,
                question_text="Q?",
                question_type="mcq",
                correct_answer="1",
                options=[1, 2],
            )

    def test_unknown_chapter(self, db):
        with pytest.raises(NotFoundError, match="Chapter not found"):
            create_question(
                db,
                chapter_id="chap_missing",
                question_text="Q?",
                question_type="essay",
                correct_answer="A",
            )

    def test_failed_create_leaves_no_rows(self, db):
        with pytest.raises(NotFoundError):
            create_question(
                db,
                chapter_id="chap_missing",
                question_text="Q?",
                question_type="mcq",
                correct_answer="A",
                options=["A", "B"],
            )

        with db.snapshot() as conn:
            assert conn.execute("SELECT COUNT(*) FROM questions").fetchone()[0] == 0
            assert conn.execute("SELECT COUNT(*) FROM options").fetchone()[0] == 0

    def test_list_newest_first_with_options(self, db, math_content):
        chapter_id = math_content["algebra"].id
        newer = create_question(
            db,
            chapter_id=chapter_id,
            question_text="Newer",
            question_type="mcq",
            correct_answer="Y",
            options=["X", "Y"],
        )

        questions = list_questions(db, chapter_id)

        assert [q.id for q in questions] == [newer.id, math_content["question"].id]
        assert [o.option_text for o in questions[0].options] == ["X", "Y"]
        assert [o.option_text for o in questions[1].options] == ["A", "B", "C"]

    def test_list_empty_chapter(self, db, math_content):
        assert list_questions(db, math_content["geometry"].id) == []
