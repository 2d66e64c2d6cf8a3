"""Answer aggregate — one quiz-taking event and the wand it was allocated.

The allocated wand is fixed when the answer is recorded and never changes
afterwards; re-taking the quiz produces a new answer.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer

from storefront.answer.events import AnswerRecorded
from storefront.domain import storefront


@storefront.aggregate
class Answer:
    score = Integer(required=True, min_value=1)
    quiz_id = Identifier()
    wizard_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    created_at = DateTime()

    @classmethod
    def record(cls, wizard_id, score, wand_id, quiz_id=None):
        now = datetime.now(UTC)
        answer = cls(
            score=score,
            quiz_id=quiz_id,
            wizard_id=wizard_id,
            wand_id=wand_id,
            created_at=now,
        )
        answer.raise_(
            AnswerRecorded(
                answer_id=str(answer.id),
                quiz_id=str(quiz_id) if quiz_id else None,
                wizard_id=str(wizard_id),
                wand_id=str(wand_id),
                score=score,
                recorded_at=now,
            )
        )
        return answer
