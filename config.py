"""
Configuration settings for the HTML Quest game.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a QUEST_ prefixed environment variable,
e.g. QUEST_NODE_COUNT=40 or QUEST_STATE_PATH=/tmp/quest.json.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.quest.layout import MapLayout
from src.quest.progression import ProgressionRules
from src.quest.session import Pacing


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Progression
    # ========================================
    node_count: int = Field(
        default=30,
        ge=1,
        description="Number of nodes on the map",
    )
    base_node_xp: int = Field(
        default=100,
        gt=0,
        description="XP required by the first node",
    )
    extra_xp_per_node: int = Field(
        default=25,
        gt=0,
        description="Additional XP required by each following node",
    )
    xp_per_correct: int = Field(
        default=25,
        gt=0,
        description="XP awarded for one correct answer",
    )
    tier_boundaries: tuple[int, int, int] | None = Field(
        default=None,
        description="First node index of the medium, hard and expert tiers (None = derived)",
    )

    # ========================================
    # Persistence
    # ========================================
    state_path: Path = Field(
        default=Path.home() / ".html_quest" / "state.json",
        description="JSON snapshot file holding learner progress",
    )

    # ========================================
    # Map Layout
    # ========================================
    layout_base_offset: int = Field(default=120, description="Y offset of the first node (px)")
    layout_vertical_gap: int = Field(default=120, gt=0, description="Vertical distance between nodes (px)")
    layout_trailing_margin: int = Field(default=300, description="Extra scroll space after the last node (px)")
    layout_day_rows: int = Field(default=15, ge=0, description="Rows rendered with the daytime biome")

    # ========================================
    # Quiz Pacing
    # ========================================
    correct_delay_seconds: float = Field(default=0.65, ge=0, description="Pause after a correct answer")
    incorrect_delay_seconds: float = Field(default=0.70, ge=0, description="Pause after a wrong answer")
    completion_delay_seconds: float = Field(default=0.90, ge=0, description="Pause before closing a completed node")

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @model_validator(mode="after")
    def _check_boundaries(self) -> "Settings":
        if self.tier_boundaries is not None:
            a, b, c = self.tier_boundaries
            if not 0 <= a <= b <= c <= self.node_count:
                raise ValueError(
                    f"tier_boundaries {self.tier_boundaries} must be ascending within 0..{self.node_count}"
                )
        return self

    def get_progression_rules(self) -> ProgressionRules:
        """Build the progression rules used by the game core."""
        return ProgressionRules(
            node_count=self.node_count,
            base_xp=self.base_node_xp,
            xp_increment_per_node=self.extra_xp_per_node,
            xp_per_correct=self.xp_per_correct,
            tier_boundaries=self.tier_boundaries,
        )

    def get_layout(self) -> MapLayout:
        """Build the map layout constants."""
        return MapLayout(
            base_offset=self.layout_base_offset,
            vertical_gap=self.layout_vertical_gap,
            trailing_margin=self.layout_trailing_margin,
            day_rows=self.layout_day_rows,
        )

    def get_pacing(self) -> Pacing:
        """Build the feedback delays for quiz sessions."""
        return Pacing(
            correct=self.correct_delay_seconds,
            incorrect=self.incorrect_delay_seconds,
            completion=self.completion_delay_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
