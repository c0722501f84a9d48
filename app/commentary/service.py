"""
Async commentary service. Wraps the blocking client with a timeout and
deterministic fallbacks so commentary never affects match state.
"""
import asyncio
import logging
from typing import Optional, TYPE_CHECKING

from app.commentary.client import CommentaryError, GeminiClient
from app.commentary.prompts import BALL_MAX_OUTPUT_TOKENS, ball_prompt, summary_prompt
from app.config import settings

if TYPE_CHECKING:
    from app.engine.deliveries import DeliveryOutcomeKind

logger = logging.getLogger(__name__)

BALL_FAILURE_FALLBACK = "The crowd is roaring!"
BALL_EMPTY_FALLBACK = "What a delivery!"
TIE_LABEL = "Match Tied"


def summary_fallback(winner_label: str) -> str:
    if winner_label == TIE_LABEL:
        return f"Final Result: {TIE_LABEL}."
    return f"Final Result: {winner_label} wins."


class CommentaryService:
    """
    Produces ball commentary and result summaries.
    With no client (or a client without an API key) every call falls back.
    """

    def __init__(self, client: Optional[GeminiClient] = None, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout or settings.COMMENTARY_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls) -> "CommentaryService":
        client = GeminiClient()
        return cls(client if client.enabled else None)

    @property
    def is_online(self) -> bool:
        return self.client is not None and self.client.enabled

    async def _generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        if not self.is_online:
            raise CommentaryError("Commentary client disabled")
        text = await asyncio.wait_for(
            asyncio.to_thread(self.client.generate, prompt, max_output_tokens),
            timeout=self.timeout,
        )
        return (text or "").strip()

    async def ball_commentary(
        self,
        shot: int,
        opposing_value: int,
        is_wicket: bool,
        kind: "DeliveryOutcomeKind",
        runs: int,
        is_free_hit: bool,
    ) -> str:
        prompt = ball_prompt(shot, opposing_value, is_wicket, kind, runs, is_free_hit)
        try:
            text = await self._generate(prompt, BALL_MAX_OUTPUT_TOKENS)
        except asyncio.TimeoutError:
            logger.warning("Commentary generation timed out after %.1fs", self.timeout)
            return BALL_FAILURE_FALLBACK
        except CommentaryError as e:
            if self.is_online:
                logger.warning("Commentary generation failed: %s", e)
            return BALL_FAILURE_FALLBACK
        except Exception as e:
            logger.warning("Commentary client error: %r", e)
            return BALL_FAILURE_FALLBACK
        return text or BALL_EMPTY_FALLBACK

    async def result_summary(
        self,
        innings1_runs: int,
        innings1_wickets: int,
        innings2_runs: int,
        innings2_wickets: int,
        winner_label: str,
    ) -> str:
        prompt = summary_prompt(innings1_runs, innings1_wickets, innings2_runs, innings2_wickets, winner_label)
        try:
            text = await self._generate(prompt)
        except asyncio.TimeoutError:
            logger.warning("Result summary timed out after %.1fs", self.timeout)
            return summary_fallback(winner_label)
        except CommentaryError as e:
            if self.is_online:
                logger.warning("Result summary failed: %s", e)
            return summary_fallback(winner_label)
        except Exception as e:
            logger.warning("Result summary client error: %r", e)
            return summary_fallback(winner_label)
        return text or summary_fallback(winner_label)
