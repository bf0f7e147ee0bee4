"""Keyword matcher over the offline template table."""

import logging
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from shellsage.models.generation_models import OfflineTemplate
from shellsage.translator.offline_templates import OFFLINE_TEMPLATES

logger = logging.getLogger(__name__)


class OfflineMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    command: str
    explanation: str
    keyword: str


def match_offline(
    query: str, templates: Tuple[OfflineTemplate, ...] = OFFLINE_TEMPLATES
) -> Optional[OfflineMatch]:
    """
    Find the first template whose keywords appear in the query.

    Keywords are compared case-insensitively as plain substrings. There is no
    scoring; the first template in declaration order with any hit wins.

    Args:
        query (str): The user's natural-language request.
        templates: Ordered template table.

    Returns:
        Optional[OfflineMatch]: The template's static command and explanation,
        or None if nothing matched.
    """
    query_lc = (query or "").lower()
    for template in templates:
        # Sorted so the reported keyword is stable across runs.
        for keyword in sorted(template.keywords):
            if keyword.lower() in query_lc:
                logger.debug("Offline template matched on keyword %r", keyword)
                return OfflineMatch(
                    command=template.command_template,
                    explanation=template.explanation_template,
                    keyword=keyword,
                )

    logger.debug("No offline template matched the query")
    return None
