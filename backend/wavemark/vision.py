"""Vision-model grader that looks at a drawing and replies with JSON feedback."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from agents import Agent, ModelSettings, RunConfig, Runner
from agents.exceptions import AgentsException
from openai import OpenAIError

from .config import Settings
from .errors import ConfigurationError, ExternalServiceError
from .images import EncodedImage

logger = logging.getLogger(__name__)

MARKER_INSTRUCTIONS = (
    "You are an experienced A-Level Music Technology examiner marking hand-drawn "
    "waveform and EQ sketches. Judge only what is visible in the images, apply the "
    "binary marking rules you are given exactly, and reply with a single JSON object "
    "and nothing else."
)


class VisionMarker(Protocol):
    async def mark(self, images: Sequence[EncodedImage], prompt: str) -> str:
        """Send the images and prompt to the grader and return its raw text reply."""
        ...


def build_marking_input(images: Sequence[EncodedImage], prompt: str) -> List[Dict[str, Any]]:
    """One user message: images first (student, then reference), prompt last."""
    content: List[Dict[str, Any]] = [
        {"type": "input_image", "image_url": image.as_data_url(), "detail": "auto"} for image in images
    ]
    content.append({"type": "input_text", "text": prompt})
    return [{"role": "user", "content": content}]


class AgentVisionMarker:
    def __init__(self, model: str, max_output_tokens: int) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        self._agent: Optional[Agent[Any]] = None

    @property
    def agent(self) -> Agent[Any]:
        if self._agent is None:
            self._agent = Agent(
                name="Wavemark Drawing Marker",
                instructions=MARKER_INSTRUCTIONS,
                model=self.model,
                tools=[],
                model_settings=ModelSettings(store=False),
            )
        return self._agent

    async def mark(self, images: Sequence[EncodedImage], prompt: str) -> str:
        try:
            result = await Runner.run(
                self.agent,
                build_marking_input(images, prompt),
                context=None,
                run_config=RunConfig(
                    model_settings=ModelSettings(max_tokens=self.max_output_tokens, store=False),
                ),
            )
        except (AgentsException, OpenAIError, httpx.HTTPError) as exc:
            logger.exception("Vision marking call failed")
            raise ExternalServiceError(f"Vision marking call failed: {exc}") from exc
        output = result.final_output
        return output if isinstance(output, str) else str(output or "")


_marker_cache: Dict[str, AgentVisionMarker] = {}


def get_vision_marker(settings: Settings) -> VisionMarker:
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY not configured. Add it to your environment variables.")
    key = f"{settings.marking_model}:{settings.marking_max_output_tokens}"
    if key not in _marker_cache:
        _marker_cache[key] = AgentVisionMarker(settings.marking_model, settings.marking_max_output_tokens)
    return _marker_cache[key]


__all__ = [
    "AgentVisionMarker",
    "MARKER_INSTRUCTIONS",
    "VisionMarker",
    "build_marking_input",
    "get_vision_marker",
]
