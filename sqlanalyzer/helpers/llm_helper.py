"""
Language model client wrapper.

Thin boundary over the OpenAI chat completions API. Both the public OpenAI
service and Azure OpenAI deployments are supported.
"""

import logging
from typing import Optional, Union

from openai import AzureOpenAI, OpenAI

from .env_helper import EnvHelper

logger = logging.getLogger(__name__)


class LLMHelper:
    """
    Issues chat completion requests and returns the first completion's text.

    Example:
        ```python
        llm = LLMHelper()
        text = llm.complete(
            model="gpt-4o",
            messages=[{"role": "user", "content": "Hello"}],
            temperature=0.0,
        )
        ```
    """

    def __init__(
        self,
        client: Optional[Union[OpenAI, AzureOpenAI]] = None,
        env_helper: Optional[EnvHelper] = None,
    ):
        """
        Initialize the helper.

        Args:
            client: Optional pre-configured OpenAI or AzureOpenAI client
            env_helper: Optional configuration used to build a client on first use
        """
        self._client = client
        self._env_helper = env_helper

    @property
    def client(self) -> Union[OpenAI, AzureOpenAI]:
        """The underlying client, created on first access."""
        if self._client is None:
            if self._env_helper is None:
                self._env_helper = EnvHelper()
            self._client = self._create_client(self._env_helper)
        return self._client

    def _create_client(self, env_helper: EnvHelper) -> Union[OpenAI, AzureOpenAI]:
        """Create an Azure OpenAI client if an endpoint is configured, else OpenAI."""
        if env_helper.use_azure_openai():
            logger.info(f"Using Azure OpenAI endpoint {env_helper.AZURE_OPENAI_ENDPOINT}")
            return AzureOpenAI(
                api_key=env_helper.AZURE_OPENAI_API_KEY,
                api_version=env_helper.AZURE_OPENAI_API_VERSION,
                azure_endpoint=env_helper.AZURE_OPENAI_ENDPOINT,
            )
        logger.info("Using OpenAI API")
        return OpenAI(api_key=env_helper.OPENAI_API_KEY)

    def complete(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.0,
    ) -> Optional[str]:
        """
        Run one chat completion.

        Args:
            model: Model or deployment name
            messages: Ordered messages, each with ``role`` and ``content``
            temperature: Sampling temperature

        Returns:
            The first choice's message content, or None if there is none.
        """
        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
        )

        if not response.choices:
            return None

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(f"Completion used {getattr(usage, 'total_tokens', '?')} tokens")

        return response.choices[0].message.content
