"""
Lead Signal Extractor for the Bizplan Assistant.

Infers lead-qualification signals from the conversation and any gathered
materials through guided JSON generation, validating the result and
retrying once on invalid output.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from llm.guided import guided_json_completion
from llm.providers.nim import ChatCompletionRequest
from .signals import LEAD_SIGNALS_JSON_SCHEMA, LeadSignals, parse_lead_signals

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You extract lead-qualification signals for SMB AI projects. Output JSON only."
)

USER_PROMPT_TEMPLATE = """Use all provided materials to infer lead-qualification signals for an SMB considering AI implementation.

Rules:
- If info is missing, choose "Unknown" or "Not specified" as appropriate.
- Return ONLY the JSON object matching the schema. No extra keys or commentary.

Materials:
- Conversation: {conversation}
- ContextSummary: {context_summary}
- WebsiteAnalysis: {website_analysis}
- FinancialsAnalysis: {financials_analysis}
- ResearchBrief: {research_brief}
- Hints: websiteFound={website_found}, docsCount={docs_count}, researchCoverage={research_coverage}
"""


@dataclass
class LeadSignalsInput:
    """Materials available for signal extraction."""
    conversation_text: str
    context_summary_json: Optional[str] = None
    website_analysis: Optional[str] = None
    financials_analysis: Optional[str] = None
    research_brief: Optional[str] = None
    docs_count: Optional[int] = None
    website_found: Optional[bool] = None
    research_coverage: Optional[float] = None


class LeadSignalsExtractor:
    """
    Extracts LeadSignals via guided generation.

    One call at low temperature; on invalid output, exactly one retry at
    temperature 0.0 with the identical prompt and schema. A second failure
    raises LeadSignalsValidationError. Provider errors are not caught.
    """

    TEMPERATURE = 0.1
    RETRY_TEMPERATURE = 0.0
    MAX_TOKENS = 400

    def __init__(self, provider: Any, model_id: str):
        """
        Args:
            provider: Generation provider exposing ``async chat_completion``
            model_id: Model identifier to invoke
        """
        self.provider = provider
        self.model_id = model_id

    def build_messages(self, data: LeadSignalsInput) -> List[Dict[str, str]]:
        """Assemble system + user messages; absent materials render as null."""
        prompt = USER_PROMPT_TEMPLATE.format(
            conversation=data.conversation_text,
            context_summary=_or_null(data.context_summary_json),
            website_analysis=_or_null(data.website_analysis),
            financials_analysis=_or_null(data.financials_analysis),
            research_brief=_or_null(data.research_brief),
            website_found=_bool_or_null(data.website_found),
            docs_count=data.docs_count if data.docs_count is not None else 0,
            research_coverage=data.research_coverage if data.research_coverage is not None else 0,
        )
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def build_request(self, data: LeadSignalsInput) -> ChatCompletionRequest:
        return ChatCompletionRequest(
            model=self.model_id,
            messages=self.build_messages(data),
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
            guided_json=LEAD_SIGNALS_JSON_SCHEMA,
        )

    async def extract(self, data: LeadSignalsInput) -> LeadSignals:
        """
        Extract validated lead signals.

        Args:
            data: Conversation and supporting materials

        Returns:
            Validated LeadSignals record

        Raises:
            LeadSignalsValidationError: output invalid on both attempts
        """
        if not data.conversation_text:
            raise ValueError("conversation_text is required")

        signals = await guided_json_completion(
            self.provider,
            self.build_request(data),
            parse_lead_signals,
            retry_temperature=self.RETRY_TEMPERATURE,
        )
        logger.info(
            f"Lead signals extracted: budget={signals.budget_band} "
            f"authority={signals.authority} urgency={signals.urgency}"
        )
        return signals


def _or_null(value: Optional[str]) -> str:
    return value if value is not None else "null"


def _bool_or_null(value: Optional[bool]) -> str:
    if value is None:
        return "null"
    return "true" if value else "false"
