"""Domain events for the Answer aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Answer")
class AnswerRecorded:
    """A wizard finished a quiz and was allocated a wand from the score."""

    __version__ = 1

    answer_id = Identifier(required=True)
    quiz_id = Identifier()
    wizard_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    score = Integer(required=True)
    recorded_at = DateTime(required=True)
