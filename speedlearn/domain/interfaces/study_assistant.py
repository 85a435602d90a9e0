"""Study assistant interface."""

from typing import Protocol, runtime_checkable

from ..entities.study_material import AnswerRecord, GenerationResult, GradedAnswer


@runtime_checkable
class StudyAssistant(Protocol):
    """Protocol for the language-model collaborator.

    Implementations wrap a concrete backend (a remote HTTP service, Amazon
    Bedrock, OpenAI, or a local stub). Malformed model output must degrade
    to empty collections instead of raising; transport failures propagate
    to the caller.
    """

    async def generate(self, text: str) -> GenerationResult:
        """Produce a short recap and a list of quiz questions for a text.

        Args:
            text: The full original text that was read.

        Returns:
            GenerationResult: The summary and the ordered questions.
        """
        ...

    async def grade(self, answers: list[AnswerRecord], original_text: str) -> list[GradedAnswer]:
        """Grade the user's answers against the original text.

        Args:
            answers: One record per question, in quiz order.
            original_text: The text the questions were generated from.

        Returns:
            list[GradedAnswer]: The graded answers.
        """
        ...
