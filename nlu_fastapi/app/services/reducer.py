"""Reduction of a raw NLU analysis into the simplified response shape."""

import logging

from nlu_fastapi.app.models import AnalysisResult, SimplifiedResult

logger = logging.getLogger(__name__)

LOCATION_TYPE = "Location"
NO_LOCATION = "none"


def reduce_analysis(raw: AnalysisResult) -> SimplifiedResult:
    """Reduce a raw analysis to ``{location, concepts, entities}``.

    The first entity typed ``Location`` becomes the location; later Location
    entities are dropped. Every other entity goes to ``entities`` and every
    concept to ``concepts``, both in provider order.

    Args:
        raw: The analysis returned by the NLU provider.

    Returns:
        The SimplifiedResult. ``location`` is ``"none"`` when no Location
        entity was detected.
    """
    location: str | None = None
    entities: list[str] = []
    concepts: list[str] = []

    for entity in raw.entities:
        if entity.type == LOCATION_TYPE:
            if location is None:
                location = entity.text
                logger.debug("Found location: %s", location)
        else:
            entities.append(entity.text)
            logger.debug("Found entity: %s (%s)", entity.text, entity.type)

    for concept in raw.concepts:
        concepts.append(concept.text)
        logger.debug("Found concept: %s", concept.text)

    return SimplifiedResult(
        location=location if location is not None else NO_LOCATION,
        concepts=concepts,
        entities=entities,
    )
