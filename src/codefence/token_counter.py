"""Line, character and token counts for rendered output.

Token counts use OpenAI's tiktoken library, which is an optional dependency.
A tokenizer is selected either by model name ("gpt-4", "gpt-4o") or directly
by encoding name ("cl100k_base", "o200k_base"). Counts from a tokenizer of a
different model family are approximations, but are usually close enough to
judge whether output fits a model's context window.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from codefence.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


class TokenCounter:
    """Accumulate line, character and token counts over pieces of text.

    Lines and characters are always counted. Tokens are counted only when a model
    is given, in which case tiktoken must be installed.

    Attributes:
        model (Optional[str]): Model or encoding name, or None if token counting is disabled.
        encoder (Optional[Any]): The tiktoken encoding in use, or None.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("Hello\\nworld!")
        CountResult(lines=1, tokens=None, characters=12)
        >>> counter.get_total_characters()
        12
    """

    def __init__(self, model: Optional[str] = None) -> None:
        """Initialize the counter.

        Args:
            model: Model or encoding name selecting the tokenizer, or None to count
                only lines and characters.

        Raises:
            TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
            ValueError: If tiktoken knows neither a model nor an encoding by that name.
        """
        self.model = model
        self.encoder: Optional[Any] = None

        if model is not None:
            if importlib.util.find_spec("tiktoken") is None:
                raise TokenizerNotAvailableError()
            self.encoder = self._get_encoder(model)

        self.reset_counts()

    @staticmethod
    def _get_encoder(model: str) -> Any:
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            pass
        try:
            return tiktoken.get_encoding(model)
        except ValueError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Use a model tiktoken knows, such as "
                "'gpt-4' or 'gpt-4o', or an encoding name such as 'cl100k_base'."
            )

    def count(self, text: str) -> CountResult:
        """Count a piece of text and add it to the running totals.

        Args:
            text: The text to count.

        Returns:
            CountResult with the newline count, the token count (None when token
            counting is disabled) and the character count of text.

        Raises:
            TokenizationError: If the tokenizer fails on text. Line and character
                totals are updated regardless.
        """
        lines = text.count("\n")
        characters = len(text)
        self._total_lines += lines
        self._total_characters += characters

        tokens = None
        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text, disallowed_special=()))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {e}") from e
            self._total_tokens = (self._total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=characters)

    def get_total_tokens(self) -> Optional[int]:
        """Get the number of tokens counted so far, or None if token counting is disabled."""
        return self._total_tokens

    def get_total_lines(self) -> int:
        """Get the number of newlines counted so far."""
        return self._total_lines

    def get_total_characters(self) -> int:
        """Get the number of characters counted so far."""
        return self._total_characters

    def reset_counts(self) -> None:
        """Reset all running totals, keeping the tokenizer."""
        self._total_tokens: Optional[int] = None if self.encoder is None else 0
        self._total_lines = 0
        self._total_characters = 0
