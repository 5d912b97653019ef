"""
Sign Interpreter — Vision Language Model (VLM) Integration
Uses Google Gemini to interpret a recorded sequence of sign language frames.
"""
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

import config
from modules.errors import EmptyBatchError, ServiceError, UnexpectedError

logger = logging.getLogger(__name__)

INTERPRETATION_PROMPT = """Analyze the provided sequence of images or video frames depicting sign language gestures. Your task is to:

1. Interpret the signs accurately, considering:
   - Hand shapes, movements, and positions
   - Facial expressions and body language
   - Any contextual clues within the images

2. Translate the signs into natural, conversational English that captures:
   - The literal meaning of the signs
   - The underlying emotion and tone
   - Any cultural nuances specific to the sign language being used

3. Formulate a response as if you're engaged in a real conversation:
   - Use a friendly, approachable tone
   - Reflect the emotion conveyed in the signs
   - Keep responses concise but natural-sounding

4. If the visual input is unclear or insufficient:
   - Politely mention which aspects are ambiguous
   - Suggest that additional images or video could help with a more accurate interpretation
   - Provide your best interpretation based on available information

5. Be aware of and respect:
   - Different sign language variants (e.g., ASL, BSL, Auslan)
   - The importance of non-manual markers in conveying meaning
   - The three-dimensional nature of sign language when interpreting 2D images

6. If you recognize specific signs or phrases, mention them in your explanation to demonstrate your reasoning.

7. If the signs seem to be part of a longer conversation, acknowledge this and provide context for your response.

Remember, the goal is to bridge communication effectively, ensuring the essence of the signed message is conveyed accurately and naturally in your response."""


class GeminiInterpreter:
    """Thin client around a Gemini GenerativeModel."""

    def __init__(
        self,
        api_key: str = config.GOOGLE_API_KEY,
        model_name: str = config.GEMINI_MODEL,
        timeout: float = config.REQUEST_TIMEOUT_SEC,
    ):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout
        self._model = genai.GenerativeModel(model_name)

    def generate(self, parts: list) -> str:
        response = self._model.generate_content(
            parts,
            request_options={"timeout": self.timeout},
        )
        return response.text


def build_request(frames) -> list:
    """
    Build the request parts for one batch.

    Returns:
        [INTERPRETATION_PROMPT, {"mime_type": "image/png", "data": b"..."}, ...]
        with image parts in capture order.
    """
    parts = [INTERPRETATION_PROMPT]
    for frame in frames:
        parts.append({"mime_type": frame.mime_type, "data": frame.png_bytes})
    return parts


def _service_message(exc: google_exceptions.GoogleAPICallError) -> str:
    message = getattr(exc, "message", "") or ""
    return message or str(exc)


class BatchSubmitter:
    def __init__(self, client):
        self.client = client

    def submit(self, frames) -> str:
        """
        Send one batch to the interpretation service.

        Raises:
            EmptyBatchError: no frames; no request is made
            ServiceError: the service returned a structured error
            UnexpectedError: anything else (network, malformed response, ...)
        """
        if not frames:
            logger.error("Frame sequence must be present to send to the API")
            raise EmptyBatchError()

        logger.info("Submitting %d frame(s) for interpretation", len(frames))
        try:
            parts = build_request(frames)
            text = self.client.generate(parts)
        except google_exceptions.GoogleAPICallError as e:
            logger.error("API Response Error: %s", e)
            raise ServiceError(_service_message(e)) from e
        except Exception as e:
            logger.exception("Error calling interpretation service")
            raise UnexpectedError(str(e) or type(e).__name__) from e

        if not isinstance(text, str):
            raise UnexpectedError("malformed response from interpretation service")

        logger.info("Interpretation received (%d chars)", len(text))
        return text
