"""
Application Configuration - Environment-based settings

Uses Pydantic Settings for type-safe configuration.
Holds the process-wide defaults for Markdown tree indexing and the
per-call MarkdownOptions that md_to_tree resolves against them.
"""

from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


# Async text-generation function injected by the caller: prompt -> text
LLMFunction = Callable[[str], Awaitable[str]]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values (API keys) MUST come from .env or environment.
    """

    # ─────────────────────────────────────────────
    # Application
    # ─────────────────────────────────────────────
    service_name: str = "mdindex"
    environment: str = Field(default="development", alias="ENV")
    log_level: str = "INFO"
    debug: bool = False

    # ─────────────────────────────────────────────
    # LLM (Groq): only used by the CLI's default caller
    # ─────────────────────────────────────────────
    groq_api_key: Optional[str] = Field(
        default=None,
        alias="GROQ_API_KEY",
        description="Groq API key. Required only when the CLI generates summaries.",
    )
    summary_model: str = Field(
        default="llama-3.1-8b-instant",
        description="Model used for node summaries and document descriptions.",
    )

    # ─────────────────────────────────────────────
    # Tree construction
    # ─────────────────────────────────────────────
    thinning_threshold: int = Field(
        default=5000,
        ge=1,
        description="Subtrees below this many tokens are merged into their parent.",
    )
    summary_token_threshold: int = Field(
        default=200,
        ge=0,
        description="Nodes below this many tokens use their own text as summary.",
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


class MarkdownOptions(BaseModel):
    """
    Per-call options for Markdown → tree conversion.

    Attributes:
        llm: Async prompt → text function. Required for summaries/descriptions.
        if_thinning: Merge small subtrees into their parent.
        thinning_threshold: Token threshold used by thinning.
        summary_token_threshold: Below this, a node's text is its own summary.
        if_add_node_summary: Generate summary / prefix_summary per node.
        if_add_doc_description: Generate a one-sentence document description.
        if_add_node_text: Keep each node's owned text in the output.
        if_add_node_id: Assign sequential zero-padded node ids.
    """

    llm: Optional[Callable[..., Any]] = None
    if_thinning: bool = False
    thinning_threshold: int = Field(default_factory=lambda: settings.thinning_threshold, ge=1)
    summary_token_threshold: int = Field(
        default_factory=lambda: settings.summary_token_threshold, ge=0
    )
    if_add_node_summary: bool = True
    if_add_doc_description: bool = False
    if_add_node_text: bool = False
    if_add_node_id: bool = True

    model_config = {"arbitrary_types_allowed": True, "extra": "forbid"}

    @property
    def needs_llm(self) -> bool:
        """Whether the requested outputs require an LLM call."""
        return self.if_add_node_summary or self.if_add_doc_description


def load_markdown_config(
    options: Optional[MarkdownOptions] = None,
    **overrides: Any,
) -> MarkdownOptions:
    """
    Merge user options with the default Markdown configuration.

    Args:
        options: Base options, defaults used when omitted.
        **overrides: Individual option values taking precedence over options.

    Returns:
        Validated MarkdownOptions.

    Raises:
        ConfigurationError: If an option is unknown or out of range, or if
            summaries or a description are requested without an llm function.
    """
    base: dict[str, Any] = {}
    if options is not None:
        base = {name: getattr(options, name) for name in MarkdownOptions.model_fields}
    base.update(overrides)
    try:
        config = MarkdownOptions(**base)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid Markdown options: {exc}") from exc

    if config.needs_llm and config.llm is None:
        raise ConfigurationError(
            "LLM function is required when if_add_node_summary or "
            "if_add_doc_description is enabled. Pass llm=... or disable them."
        )
    return config
