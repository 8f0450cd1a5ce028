"""Study-plan generation through a remote text-generation endpoint.

The endpoint follows the Responses API wire format: the request carries a
model id, one ``input`` instruction string and an output-token ceiling, and
the reply nests the generated text under ``output[].content[]`` entries typed
``output_text``. The model is asked for ``{"blocks": [...]}`` JSON, but block
durations are always recomputed from the returned start/end times.
"""

from __future__ import annotations

from datetime import time
from typing import Any, Optional, Sequence

import requests
from pydantic import BaseModel, ValidationError

from studyplan.domain.constraints import RemotePlanConfig, validate_remote_config
from studyplan.domain.models import ScheduleBlock, Subject
from studyplan.domain.time_model import format_time_of_day, minutes_between, parse_time_or_default
from studyplan.utils.config import Settings, get_settings
from studyplan.utils.logger import get_logger


logger = get_logger(__name__)

OUTPUT_TEXT_TYPE = "output_text"
NO_FOCUS_SENTINEL = "none"

INSTRUCTION_TEMPLATE = """You are an expert study planner.
Build a detailed study routine FOR TODAY as time blocks.

Data:
- Total study hours: {total_hours:.2f}
- Start time: {start_time}
- Subjects (name, priority, minimum minutes):
{subjects}
- Main focus subject: {focus}

Rules:
- Respect the total study time.
- Give more time to higher-priority subjects and to the focus subject.
- Do not create blocks shorter than 20 minutes.
- Avoid more than 90 consecutive minutes on the same subject.
- You may include short breaks (subject "Break"), but count them inside the total study hours.
- Use coherent times starting from the start time.

Response format:
- Reply ONLY with one valid JSON object, with no text before or after it.
- Do NOT use ``` or any markdown.
- Exact structure:
{{
  "blocks": [
    {{ "start": "08:00", "end": "09:00", "subject": "Mathematics" }}
  ]
}}"""


class RemotePlanError(Exception):
    """Base failure of the remote generation path."""

    condition = "remote_failure"


class MissingCredentialError(RemotePlanError):
    """Raised when no API key is configured."""

    condition = "missing_credential"


class TransportFailureError(RemotePlanError):
    """Raised on connection errors, timeouts and non-2xx responses."""

    condition = "transport_failure"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedEnvelopeError(RemotePlanError):
    """Raised when the response lacks an output list or textual content."""

    condition = "malformed_envelope"


class UnparsableContentError(RemotePlanError):
    """Raised when the generated text is not the expected block JSON."""

    condition = "unparsable_content"

    def __init__(self, message: str, *, raw_text: str, diagnostic: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text
        self.diagnostic = diagnostic


class _ContentItem(BaseModel):
    type: str
    text: str | None = None


class _OutputItem(BaseModel):
    type: str | None = None
    content: list[_ContentItem] | None = None


class _ResponseEnvelope(BaseModel):
    output: list[_OutputItem]


class RemoteBlockPayload(BaseModel):
    start: str
    end: str
    subject: str


class RemotePlanPayload(BaseModel):
    blocks: list[RemoteBlockPayload]


def build_instruction(
    *,
    subjects: Sequence[Subject],
    total_hours: float,
    start_time: time,
    focus: Optional[str],
) -> str:
    subject_lines = "".join(
        f"- {subject.name} (priority {subject.priority}, minimum {subject.min_minutes} min)\n"
        for subject in subjects
    )
    return INSTRUCTION_TEMPLATE.format(
        total_hours=total_hours,
        start_time=format_time_of_day(start_time),
        subjects=subject_lines,
        focus=focus if focus is not None else NO_FOCUS_SENTINEL,
    )


def extract_output_text(body: str) -> str:
    """Return the text of the first ``output_text`` entry in a response body."""
    try:
        envelope = _ResponseEnvelope.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedEnvelopeError(f"Response has no usable 'output' list: {exc}") from exc

    if not envelope.output:
        raise MalformedEnvelopeError("Response 'output' list is empty")

    for item in envelope.output:
        for content in item.content or []:
            if content.type == OUTPUT_TEXT_TYPE and content.text is not None:
                return content.text
    raise MalformedEnvelopeError("Response contains no 'output_text' content")


def parse_plan_payload(text: str) -> RemotePlanPayload:
    try:
        return RemotePlanPayload.model_validate_json(text)
    except ValidationError as exc:
        raise UnparsableContentError(
            "Generated text is not a valid block plan",
            raw_text=text,
            diagnostic=str(exc),
        ) from exc


def normalize_blocks(payload: RemotePlanPayload, start_time: time) -> list[ScheduleBlock]:
    """Turn parsed blocks into schedule blocks, deriving minutes from the times."""
    blocks: list[ScheduleBlock] = []
    for item in payload.blocks:
        start = parse_time_or_default(item.start, start_time)
        end = parse_time_or_default(item.end, start)
        blocks.append(
            ScheduleBlock(
                start=start,
                end=end,
                subject_name=item.subject,
                minutes=minutes_between(start, end),
            )
        )
    return blocks


class RemotePlanAdapter:
    """Sends the planning instruction to the model endpoint and parses its answer."""

    def __init__(
        self,
        api_key: str | None,
        config: RemotePlanConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        validate_remote_config(config)
        self._api_key = api_key
        self._config = config
        self._session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> "RemotePlanAdapter":
        resolved = settings or get_settings()
        config = RemotePlanConfig(
            model=resolved.remote_model,
            endpoint=resolved.remote_endpoint,
            max_output_tokens=resolved.remote_max_output_tokens,
            timeout_seconds=resolved.remote_timeout_seconds,
        )
        return cls(api_key=resolved.openai_api_key, config=config, session=session)

    def request_plan(
        self,
        *,
        subjects: Sequence[Subject],
        total_hours: float,
        start_time: time,
        focus: Optional[str],
    ) -> list[ScheduleBlock]:
        if not self._api_key:
            raise MissingCredentialError(
                "OPENAI_API_KEY is not configured. Set it in .env or the environment."
            )

        instruction = build_instruction(
            subjects=subjects,
            total_hours=total_hours,
            start_time=start_time,
            focus=focus,
        )
        body = self._post(
            {
                "model": self._config.model,
                "input": instruction,
                "max_output_tokens": self._config.max_output_tokens,
            }
        )
        text = extract_output_text(body)
        blocks = normalize_blocks(parse_plan_payload(text), start_time)
        logger.info(
            "Remote plan parsed | model=%s | blocks=%s",
            self._config.model,
            len(blocks),
        )
        return blocks

    def _post(self, payload: dict[str, Any]) -> str:
        try:
            response = self._session.post(
                self._config.endpoint,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._config.timeout_seconds,
            )
        except requests.exceptions.Timeout as exc:
            raise TransportFailureError(
                f"Remote endpoint timed out after {self._config.timeout_seconds:g}s"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportFailureError(f"Remote endpoint unreachable: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise TransportFailureError(
                f"Remote endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.text
