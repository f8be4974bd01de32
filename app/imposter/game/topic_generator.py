"""
Word and hint generation for the Imposter game.

Uses Google Gemini as the primary source and falls back to the curated
preset tables (then to fixed emergency values) when the API is
unavailable. None of the public methods ever raise: round initialization
downstream assumes materials always arrive.
"""

import json
import logging
import random
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from google import genai

from configs.config import get_config
from imposter.game import presets
from imposter.game.constants import Difficulty

logger = logging.getLogger(__name__)

cfg = get_config()

# ── Emergency fallbacks ──────────────────────────────────────────────────

FALLBACK_SECRET_WORD = "Banana"
FALLBACK_IMPOSTER_HINT = "It is a fruit"
FALLBACK_UNDERCOVER = ("Apple", "Orange")
FALLBACK_DISCUSSION_HINT = "Ask about the color or material."
EMPTY_DISCUSSION_HINT = "Ask about the size."
EMPTY_IMPOSTER_HINT = "It is a common item."

_DIFFICULTY_INSTRUCTIONS = {
    Difficulty.EASY: (
        "The word should be very common, simple, and widely known."
    ),
    Difficulty.MEDIUM: (
        "The word should be standard vocabulary. Common knowledge."
    ),
    Difficulty.HARD: (
        "The word should be challenging, specific, or abstract."
    ),
    Difficulty.INSANE: (
        "The word should be obscure, highly specific, or complex."
    ),
}


@dataclass
class GenerationResult:
    """Outcome of one model call; ``value`` is only set when ``ok``."""

    ok: bool
    value: Any = None


@dataclass
class ClassicContent:
    secret_word: str
    imposter_hint: Optional[str] = None


@dataclass
class UndercoverContent:
    secret_word: str
    imposter_word: str


# ── Helpers ──────────────────────────────────────────────────────────────


def sanitise_category(category: str) -> str:
    """Collapse whitespace and cap the length sent to the model."""
    return re.sub(r"\s+", " ", (category or "").strip())[:50]


def mentions_word(text: str, word: str) -> bool:
    """True if ``text`` names ``word`` (case-insensitive, whole word)."""
    if not text or not word:
        return False
    pattern = r"\b" + re.escape(word.strip().lower()) + r"s?\b"
    return re.search(pattern, text.lower()) is not None


def _randomness_footer() -> str:
    # Varies the prompt so repeated categories do not hit a cached answer
    return (
        f"\nRandomness Token: {random.randint(1, 10000)}"
        f"\nTimestamp: {int(time.time())}"
    )


class GeminiWordProvider:
    """AI-backed round materials provider with contained failures."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else cfg.GEMINI_API_KEY
        self.model_name = model_name or cfg.GEMINI_MODEL_NAME

    # ── Primary (Gemini) call ────────────────────────────────────────────

    def _call_model(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        temperature: float = 1.0,
    ) -> GenerationResult:
        """Run one generation; every failure becomes ``ok=False``."""
        config: Dict[str, Any] = {"temperature": temperature, "top_p": 0.95}
        if schema:
            config["response_mime_type"] = "application/json"
            config["response_schema"] = schema

        try:
            client = genai.Client(api_key=self.api_key)
            logger.debug("Gemini prompt: %s", prompt)
            response = client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
            if schema:
                value = response.parsed
                if not isinstance(value, dict):
                    value = json.loads(response.text or "{}")
                if not isinstance(value, dict):
                    logger.warning("Gemini returned non-object JSON")
                    return GenerationResult(ok=False)
            else:
                value = (response.text or "").strip()
            return GenerationResult(ok=True, value=value)
        except Exception as exc:
            logger.error("Gemini API error: %s", exc)
            return GenerationResult(ok=False)

    # ── Fallback generators ──────────────────────────────────────────────

    @staticmethod
    def _fallback_classic(
        category: str, difficulty: Difficulty, want_hint: bool
    ) -> ClassicContent:
        if presets.has_category(category):
            logger.info("Using preset fallback for category '%s'", category)
            pick = presets.pick_random(difficulty, category)
            hint = f"It relates to {pick.category}" if want_hint else None
            return ClassicContent(pick.word, hint)

        logger.info("Using emergency fallback word")
        return ClassicContent(
            FALLBACK_SECRET_WORD,
            FALLBACK_IMPOSTER_HINT if want_hint else None,
        )

    @staticmethod
    def _fallback_undercover(
        category: str, difficulty: Difficulty
    ) -> UndercoverContent:
        wanted = category.strip().lower()
        known = {name.lower() for name in presets.list_undercover_categories()}
        if wanted in known:
            logger.info(
                "Using undercover preset fallback for category '%s'", category
            )
            pick = presets.pick_random_undercover(difficulty, category)
            return UndercoverContent(pick.secret_word, pick.imposter_word)

        logger.info("Using emergency undercover fallback pair")
        return UndercoverContent(*FALLBACK_UNDERCOVER)

    # ── Provider contract ────────────────────────────────────────────────

    def generate_classic(
        self, category: str, difficulty: Difficulty, want_hint: bool
    ) -> ClassicContent:
        """One secret word, plus a subtle imposter hint if requested."""
        category = sanitise_category(category)
        difficulty = Difficulty(difficulty)
        hint_instruction = ""
        if want_hint:
            hint_instruction = (
                "Also generate a short, vague hint about the secret word "
                "that helps the imposter blend in without revealing the "
                'word explicitly (e.g. if word is "Apple", hint might be '
                '"It is a fruit" or "It is red").'
            )
        prompt = (
            f'Generate a secret word for the category "{category}".\n'
            f"{_DIFFICULTY_INSTRUCTIONS[difficulty]}\n"
            f"{hint_instruction}"
            f"{_randomness_footer()}"
        )
        schema = {
            "type": "OBJECT",
            "properties": {
                "secretWord": {"type": "STRING"},
                "imposterHint": {"type": "STRING"},
            },
            "required": (
                ["secretWord", "imposterHint"] if want_hint
                else ["secretWord"]
            ),
        }

        result = self._call_model(prompt, schema)
        if not result.ok:
            return self._fallback_classic(category, difficulty, want_hint)

        secret_word = str(result.value.get("secretWord") or "").strip()
        if not secret_word:
            return self._fallback_classic(category, difficulty, want_hint)

        hint = None
        if want_hint:
            hint = str(result.value.get("imposterHint") or "").strip()
            if not hint or mentions_word(hint, secret_word):
                hint = f"It relates to {category}"
        return ClassicContent(secret_word, hint)

    def generate_undercover(
        self, category: str, difficulty: Difficulty
    ) -> UndercoverContent:
        """Two related but distinct words: majority secret and decoy."""
        category = sanitise_category(category)
        difficulty = Difficulty(difficulty)
        prompt = (
            "Generate two distinct but related words for the category "
            f'"{category}".\n'
            '1. "secretWord": The main word for the majority.\n'
            '2. "imposterWord": A different word for the imposter.\n'
            "The words should be related enough to allow for a confusing "
            'conversation (e.g. "Apple" vs "Orange", "Guitar" vs "Violin", '
            '"Beach" vs "Pool").\n'
            f"Difficulty level: {difficulty.value}."
            f"{_randomness_footer()}"
        )
        schema = {
            "type": "OBJECT",
            "properties": {
                "secretWord": {"type": "STRING"},
                "imposterWord": {"type": "STRING"},
            },
            "required": ["secretWord", "imposterWord"],
        }

        result = self._call_model(prompt, schema)
        if not result.ok:
            return self._fallback_undercover(category, difficulty)

        secret_word = str(result.value.get("secretWord") or "").strip()
        imposter_word = str(result.value.get("imposterWord") or "").strip()
        if (
            not secret_word
            or not imposter_word
            or secret_word.lower() == imposter_word.lower()
        ):
            logger.warning(
                "Gemini returned an unusable undercover pair: %r / %r",
                secret_word, imposter_word,
            )
            return self._fallback_undercover(category, difficulty)
        return UndercoverContent(secret_word, imposter_word)

    def generate_hint(self, category: str, secret_word: str) -> str:
        """A vague discussion question that never names the secret."""
        prompt = (
            "Generate a single, short, vague discussion question about the "
            f'secret word "{secret_word}" in the category '
            f'"{sanitise_category(category)}" to help find the imposter.\n'
            f'CRITICAL RULE: Do NOT include the word "{secret_word}" itself '
            "or any close variations in the question. The goal is to "
            "discuss attributes without naming it."
        )
        result = self._call_model(prompt)
        if not result.ok:
            return FALLBACK_DISCUSSION_HINT
        if not result.value:
            return EMPTY_DISCUSSION_HINT
        if mentions_word(result.value, secret_word):
            logger.info("Discussion hint named the secret word; discarded")
            return FALLBACK_DISCUSSION_HINT
        return result.value

    def generate_imposter_hint(self, category: str, secret_word: str) -> str:
        """A subtle attribute hint for an imposter who lacks the word."""
        category = sanitise_category(category)
        prompt = (
            "Generate a short, subtle hint for an imposter who doesn't know "
            f'the secret word is "{secret_word}" in the category '
            f'"{category}".\n'
            "The hint should describe a general attribute (like color, "
            "usage, size, or category type) so they can blend in.\n"
            f'Do NOT mention the word "{secret_word}".'
        )
        result = self._call_model(prompt)
        if not result.ok or mentions_word(result.value or "", secret_word):
            return f"It relates to {category}"
        return result.value or EMPTY_IMPOSTER_HINT
