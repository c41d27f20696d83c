"""
Strict schema for lead-qualification signals.

LeadSignals is the output contract of guided generation. A record is either
fully valid or rejected as a whole; there is no partial acceptance.
"""

import json
import re
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llm.guided import GuidedOutputError


BudgetBand = Literal["Not specified", "<$5k", "$5k–$20k", "$20k–$50k", ">$50k"]
Authority = Literal["Owner/Partner", "Director+", "Staff", "Unknown"]
Urgency = Literal["Now (0–30d)", "Soon (31–90d)", "Later (90+ d)", "Unknown"]
NeedClarity = Literal["Clear", "Vague", "Exploratory"]
DataReadiness = Literal["Low", "Medium", "High"]
StackMaturity = Literal["Manual/Spreadsheets", "Basic SaaS", "Integrated", "Unknown"]
Complexity = Literal["Low", "Med", "High"]


class LeadSignalsValidationError(GuidedOutputError):
    """Generated content is not a valid LeadSignals record."""


class LeadSignals(BaseModel):
    """Lead-qualification signals inferred from conversation and documents."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    budget_band: BudgetBand = Field(..., alias="budgetBand")
    authority: Authority
    urgency: Urgency
    need_clarity: NeedClarity = Field(..., alias="needClarity")
    data_readiness: DataReadiness = Field(..., alias="dataReadiness")
    stack_maturity: StackMaturity = Field(..., alias="stackMaturity")
    complexity: Complexity
    geography: Optional[str] = Field(None, strict=True)
    industry: Optional[str] = Field(None, strict=True)
    website_found: Optional[bool] = Field(None, alias="websiteFound", strict=True)
    docs_count: Optional[float] = Field(None, alias="docsCount", ge=0, strict=True)
    research_coverage: Optional[float] = Field(
        None, alias="researchCoverage", ge=0, le=100, strict=True
    )
    # Model's own estimate; the rule-based score is computed separately
    score: float = Field(..., ge=0, le=100, strict=True)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys, absent optionals omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Guided JSON constraint sent to the generation endpoint
LEAD_SIGNALS_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "budgetBand": {
            "type": "string",
            "enum": ["Not specified", "<$5k", "$5k–$20k", "$20k–$50k", ">$50k"],
        },
        "authority": {
            "type": "string",
            "enum": ["Owner/Partner", "Director+", "Staff", "Unknown"],
        },
        "urgency": {
            "type": "string",
            "enum": ["Now (0–30d)", "Soon (31–90d)", "Later (90+ d)", "Unknown"],
        },
        "needClarity": {"type": "string", "enum": ["Clear", "Vague", "Exploratory"]},
        "dataReadiness": {"type": "string", "enum": ["Low", "Medium", "High"]},
        "stackMaturity": {
            "type": "string",
            "enum": ["Manual/Spreadsheets", "Basic SaaS", "Integrated", "Unknown"],
        },
        "complexity": {"type": "string", "enum": ["Low", "Med", "High"]},
        "geography": {"type": "string"},
        "industry": {"type": "string"},
        "websiteFound": {"type": "boolean"},
        "docsCount": {"type": "number", "minimum": 0},
        "researchCoverage": {"type": "number", "minimum": 0, "maximum": 100},
        "score": {"type": "number", "minimum": 0, "maximum": 100},
    },
    "required": [
        "budgetBand",
        "authority",
        "urgency",
        "needClarity",
        "dataReadiness",
        "stackMaturity",
        "complexity",
        "score",
    ],
    "additionalProperties": False,
}


def parse_lead_signals(content: str) -> LeadSignals:
    """
    Parse generated text into a validated LeadSignals record.

    Raises:
        LeadSignalsValidationError: malformed JSON or schema mismatch
    """
    text = _strip_markdown_json(content or "")
    if not text:
        raise LeadSignalsValidationError("Empty response", raw_content=content or "")

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise LeadSignalsValidationError(f"Malformed JSON: {e}", raw_content=content) from e

    if not isinstance(data, dict):
        raise LeadSignalsValidationError(
            f"Expected a JSON object, got {type(data).__name__}", raw_content=content
        )

    try:
        return LeadSignals.model_validate(data)
    except ValidationError as e:
        raise LeadSignalsValidationError(
            f"Schema mismatch: {e.error_count()} error(s): {_summarize(e)}",
            raw_content=content,
        ) from e


def _reject_constant(name: str):
    # Python's json accepts NaN and Infinity; strict JSON does not
    raise ValueError(f"Invalid JSON constant: {name}")


def _strip_markdown_json(text: str) -> str:
    """Remove ```json ... ``` wrapper if present."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors()[:5]:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)
