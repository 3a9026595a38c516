"""
Text Analyzer Lambda.

Exposes a single endpoint behind an API Gateway HTTP API (payload format 2.0):
- POST / with body {"text": "..."}

The text is sent to the completion service three times, in order, to produce
a title, two interesting facts and a three-sentence summary. The combined
result is rendered as plain text and returned under the "summary" key.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from backend.lambdas.shared.completion import CompletionClient, build_client
from backend.lambdas.shared.exceptions import AnalysisError, ValidationError
from backend.lambdas.shared.logging import get_logger


LOGGER = get_logger(__name__)

MAX_TEXT_LENGTH = 10000
UNTITLED = "Untitled"
MISSING_FACT_PLACEHOLDER = "undefined"
UNKNOWN_ANALYSIS_ERROR = "Unknown error occurred"
UNKNOWN_REQUEST_ERROR = "An unknown error occurred"

TITLE_INSTRUCTION = (
    "You are a title generation expert. Create a concise, engaging title for the given text. "
    "Return only the title text."
)
FACTS_INSTRUCTION = (
    "You are a fact extraction expert. Extract exactly two of the most interesting facts "
    "from the given text. Return only the facts, each on a new line."
)
SUMMARY_INSTRUCTION = (
    "You are a text summarization expert. Provide a 3-sentence summary of the given text "
    "that captures the key points while maintaining readability and coherence. "
    "Return only the summary text."
)

_client: Optional[CompletionClient] = None


class Completer(Protocol):
    def complete(self, system: str, text: str) -> str:
        ...


@dataclass(frozen=True)
class AnalysisRequest:
    text: str


@dataclass(frozen=True)
class TextAnalysis:
    title: str
    interesting_facts: Tuple[str, ...]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "interestingFacts": list(self.interesting_facts),
            "summary": self.summary,
        }


def validate_request(payload: Any) -> AnalysisRequest:
    """Return the validated request or raise ``ValidationError`` for the first violation."""
    if not isinstance(payload, dict) or payload.get("text") is None:
        raise ValidationError("Text is required")
    text = payload["text"]
    if not isinstance(text, str):
        raise ValidationError("Text must be a string")
    if not text.strip():
        raise ValidationError("Text is required")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError("Text is too long")
    return AnalysisRequest(text=text)


def _split_facts(content: str) -> Tuple[str, ...]:
    return tuple(line for line in content.split("\n") if line)


def analyze_text(text: str, client: Completer) -> TextAnalysis:
    """Run the title, facts and summary steps one after another."""
    try:
        LOGGER.info("Generating title")
        title = client.complete(TITLE_INSTRUCTION, text) or UNTITLED

        LOGGER.info("Extracting facts")
        facts = _split_facts(client.complete(FACTS_INSTRUCTION, text) or "")

        LOGGER.info("Generating summary")
        summary = client.complete(SUMMARY_INSTRUCTION, text) or ""
    except Exception as exc:  # pylint: disable=broad-except
        message = str(exc) or UNKNOWN_ANALYSIS_ERROR
        raise AnalysisError(f"Failed to analyze text: {message}") from exc

    if len(facts) != 2:
        LOGGER.warning("Fact extraction returned %s facts instead of 2", len(facts))
    return TextAnalysis(title=title, interesting_facts=facts, summary=summary)


def _fact_at(facts: Tuple[str, ...], index: int) -> str:
    return facts[index] if index < len(facts) else MISSING_FACT_PLACEHOLDER


def format_analysis(analysis: TextAnalysis) -> str:
    facts = analysis.interesting_facts
    return (
        f"{analysis.title}\n\n"
        "Key Facts:\n"
        f"1. {_fact_at(facts, 0)}\n"
        f"2. {_fact_at(facts, 1)}\n\n"
        "Summary:\n"
        f"{analysis.summary}"
    )


def _response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps(body, ensure_ascii=False),
    }


def _decode_body(event: Dict[str, Any]) -> Any:
    body = event.get("body")
    if body is None or isinstance(body, (dict, list)):
        return body
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError("Request body is not valid base64") from exc
    if not str(body).strip():
        return None
    return json.loads(body)


def _get_client() -> CompletionClient:
    global _client

    if _client is None:
        _client = build_client()
    return _client


def handle(event: Dict[str, Any], _context: Any, client: Optional[Completer] = None) -> Dict[str, Any]:
    if not isinstance(event, dict):
        LOGGER.warning("Rejected event of type %s", type(event).__name__)
        return _response(400, {"message": "Invalid request event"})

    method = ((event.get("requestContext") or {}).get("http") or {}).get("method", "POST").upper()
    if method != "POST":
        return _response(405, {"message": "Method not allowed"})

    try:
        payload = _decode_body(event)
    except (TypeError, ValueError) as exc:
        LOGGER.warning("Rejected undecodable request body: %s", exc)
        return _response(400, {"message": "Request body must be valid JSON"})

    try:
        request = validate_request(payload)
        LOGGER.info("Received analysis request length=%s", len(request.text))
        analysis = analyze_text(request.text, client or _get_client())
    except ValidationError as exc:
        LOGGER.info("Rejected request: %s", exc)
        return _response(400, {"message": str(exc)})
    except Exception as exc:  # pylint: disable=broad-except
        LOGGER.exception("Text analysis request failed")
        return _response(500, {"message": str(exc) or UNKNOWN_REQUEST_ERROR})

    return _response(200, {"summary": format_analysis(analysis)})


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    if isinstance(event, str):
        try:
            event = json.loads(event)
        except ValueError:
            return _response(400, {"message": "Invalid request event"})
    return handle(event, context)
