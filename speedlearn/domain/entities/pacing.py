"""Pacing state for the timed word presentation."""

from pydantic import BaseModel, ConfigDict, Field

from .session import DEFAULT_WORD_DELAY_MS, MAX_WORD_DELAY_MS, MIN_WORD_DELAY_MS


READING_TIME_BUDGET_SECONDS = 120


class PacingState(BaseModel):
    """Progress of one reading round."""

    model_config = ConfigDict(validate_assignment=True)

    words: list[str] = Field(default_factory=list)
    current_index: int = Field(default=0, ge=0)
    playing: bool = False
    budget_seconds: int = Field(default=READING_TIME_BUDGET_SECONDS, ge=1)
    per_word_delay_ms: int = Field(
        default=DEFAULT_WORD_DELAY_MS, ge=MIN_WORD_DELAY_MS, le=MAX_WORD_DELAY_MS
    )
    start_timestamp: float = 0.0

    @property
    def total_words(self) -> int:
        return len(self.words)

    @property
    def current_word(self) -> str:
        if self.current_index < len(self.words):
            return self.words[self.current_index]
        return ""

    @property
    def words_exhausted(self) -> bool:
        return self.current_index >= len(self.words)
