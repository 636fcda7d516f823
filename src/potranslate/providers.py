import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from potranslate.config import Config, ConfigError

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class UnsupportedProviderError(ConfigError):
    pass


class StructuredModel:
    """A chat model that answers with JSON validated against a pydantic schema."""

    def __init__(self, client: AsyncOpenAI, model: str, response_format: str):
        self.client = client
        self.model = model
        self.response_format = response_format

    def _response_format(self, schema: type[BaseModel]) -> dict:
        if self.response_format == "json_schema":
            return {
                "type": "json_schema",
                "json_schema": {
                    "name": schema.__name__,
                    "schema": schema.model_json_schema(),
                },
            }
        return {"type": "json_object"}

    async def generate_object(
        self, *, system: str, prompt: str, schema: type[SchemaT]
    ) -> SchemaT:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_format=self._response_format(schema),
        )

        choice = response.choices[0]
        if getattr(choice.message, "refusal", None):
            raise ValueError(f"Model refused to translate: {choice.message.refusal}")
        if choice.finish_reason == "length":
            raise ValueError("Response was truncated due to length limit")
        if not choice.message.content:
            raise ValueError("Model returned an empty response")

        return schema.model_validate_json(choice.message.content)


@dataclass
class Provider:
    name: str
    model: str
    client: AsyncOpenAI
    response_format: str = "json_schema"

    def get_model(self) -> StructuredModel:
        return StructuredModel(self.client, self.model, self.response_format)


def create_openai_provider(api_key: str, model: str, base_url: str = "") -> Provider:
    client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)
    return Provider("OpenAI", model, client)


def create_openrouter_provider(api_key: str, model: str, base_url: str = "") -> Provider:
    # Model IDs look like "anthropic/claude-sonnet-4" or "openai/gpt-4o"
    client = AsyncOpenAI(api_key=api_key, base_url=OPENROUTER_BASE_URL)
    return Provider("OpenRouter", model, client)


def create_openai_compat_provider(
    api_key: str, model: str, base_url: str = ""
) -> Provider:
    if not base_url:
        raise ConfigError('AI_BASE_URL is required for the "openai-compat" provider')
    client = AsyncOpenAI(api_key=api_key, base_url=base_url)
    return Provider("OpenAI-Compatible", model, client, response_format="json_object")


PROVIDERS: dict[str, Callable[..., Provider]] = {
    "openai": create_openai_provider,
    "openrouter": create_openrouter_provider,
    "openai-compat": create_openai_compat_provider,
}


def resolve_provider(config: Config) -> Provider:
    factory = PROVIDERS.get(config.ai_provider)
    if factory is None:
        valid = ", ".join(f'"{name}"' for name in PROVIDERS)
        raise UnsupportedProviderError(
            f'Unsupported AI_PROVIDER: "{config.ai_provider}". Valid options are: {valid}.'
        )
    provider = factory(config.ai_api_key, config.ai_model, config.ai_base_url)
    logger.info(f"Using {provider.name} provider with model {config.ai_model}")
    return provider
