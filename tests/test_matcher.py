from vocabquiz.matcher import check_answer, find_matching_definition
from vocabquiz.models import QuestionType, QuizQuestion


class TestDefinitionQuestion:
    def test_single_definition_match(self, fleet_question):
        assert check_answer(fleet_question, "group of ships") is True
        assert fleet_question.matched_answers == ["group of ships"]
        assert fleet_question.completeness == 33
        assert fleet_question.is_correct is True

    def test_separate_answers_accumulate(self, fleet_question):
        check_answer(fleet_question, "group of ships")
        check_answer(fleet_question, "armada")
        assert fleet_question.matched_answers == ["group of ships", "armada"]
        assert fleet_question.completeness == 67

    def test_all_answers_matched(self, fleet_question):
        for answer in fleet_question.all_answers:
            check_answer(fleet_question, answer)
        assert fleet_question.completeness == 100

    def test_combined_answer_credits_longest_phrase(self, fleet_question):
        assert check_answer(fleet_question, "armada group of ships") is True
        assert fleet_question.matched_answers == ["group of ships"]
        assert fleet_question.is_correct is True

    def test_no_double_count_ignoring_case(self, fleet_question):
        check_answer(fleet_question, "armada")
        assert check_answer(fleet_question, "ARMADA") is True
        assert fleet_question.matched_answers == ["armada"]
        assert fleet_question.completeness == 33

    def test_article_insensitive(self, fleet_question):
        assert check_answer(fleet_question, "the armada") is True
        assert fleet_question.matched_answers == ["armada"]

    def test_wrong_answer(self, fleet_question):
        assert check_answer(fleet_question, "banana") is False
        assert fleet_question.matched_answers == []
        assert fleet_question.completeness == 0
        assert fleet_question.is_correct is False

    def test_correctness_is_sticky(self, fleet_question):
        check_answer(fleet_question, "armada")
        assert check_answer(fleet_question, "banana") is False
        assert fleet_question.is_correct is True
        assert fleet_question.completeness == 33

    def test_matches_stay_monotonic(self, fleet_question):
        answers = [
            "banana",
            "Armada",
            "navy",
            "armada",
            "a group of ships",
            "collection of naval vessels please",
            "",
        ]
        sizes = []
        for answer in answers:
            check_answer(fleet_question, answer)
            sizes.append(len(fleet_question.matched_answers))
        assert sizes == sorted(sizes)
        assert sizes[-1] == 3

    def test_matched_answers_come_from_all_answers(self, fleet_question):
        check_answer(fleet_question, "The Group of Ships!")
        assert fleet_question.matched_answers == ["group of ships"]


class TestSingleAnswerQuestion:
    def test_word_question(self):
        question = QuizQuestion(
            id=0, type=QuestionType.WORD, prompt="armada", answer="fleet", word_id="fleet"
        )
        assert check_answer(question, "The Fleet") is True
        assert check_answer(question, "ships") is False
        assert question.matched_answers is None
        assert question.completeness is None

    def test_article_insensitive(self):
        question = QuizQuestion(id=0, type=QuestionType.WORD, prompt="fruit", answer="apple")
        assert check_answer(question, "an apple") is True

    def test_definition_question_without_alternatives(self):
        question = QuizQuestion(
            id=0, type=QuestionType.DEFINITION, prompt="fleet", answer="armada"
        )
        assert check_answer(question, "Armada") is True
        assert question.matched_answers is None


def test_find_matching_definition_prefers_direct_match():
    definitions = ["ships", "group of ships"]
    assert find_matching_definition(definitions, "group of ships") == "group of ships"
    assert find_matching_definition(definitions, "many ships") == "ships"
    assert find_matching_definition(definitions, "boats") is None
