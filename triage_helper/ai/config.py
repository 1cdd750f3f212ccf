"""Completion endpoint configuration."""

from pydantic import BaseModel, Field, field_validator

DEFAULT_COMPLETION_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "openai:gpt-4o-mini"


def validate_model_string(model: str) -> str:
    """Strip an optional provider prefix from a model identifier.

    Args:
        model: Model identifier (e.g., 'openai:gpt-4o-mini' or 'gpt-4o-mini')

    Returns:
        Bare model name sent to the endpoint

    Raises:
        ValueError: If the model name is empty
    """
    provider, separator, model_name = model.partition(":")
    if not separator:
        model_name = provider
    elif not provider:
        model_name = ""
    if not model_name:
        raise ValueError(
            f"Invalid model format '{model}'. Expected 'model' or 'provider:model'"
        )
    return model_name


class CompletionSettings(BaseModel):
    """Fixed sampling parameters for the triage completion request."""

    endpoint: str = Field(DEFAULT_COMPLETION_URL, description="Chat completions URL")
    model: str = Field(DEFAULT_MODEL, description="Model identifier")
    temperature: float = Field(0.2, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(400, gt=0, description="Upper bound on output length")
    timeout_s: float = Field(60.0, gt=0, description="Request deadline in seconds")

    @field_validator("model")
    @classmethod
    def check_model(cls, value: str) -> str:
        validate_model_string(value)
        return value

    @property
    def model_name(self) -> str:
        return validate_model_string(self.model)
