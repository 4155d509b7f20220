"""Schema-constrained completions from Claude via Bedrock."""

import logging
from functools import lru_cache
from typing import TypeVar

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..errors import (
    CompletionAuthError,
    CompletionError,
    CompletionNetworkError,
    CompletionRateLimitError,
    CompletionResponseError,
    CompletionServiceError,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Bedrock error codes -> failure class
ERROR_CODE_MAP: dict[str, type[CompletionError]] = {
    "AccessDeniedException": CompletionAuthError,
    "UnrecognizedClientException": CompletionAuthError,
    "InvalidSignatureException": CompletionAuthError,
    "ExpiredTokenException": CompletionAuthError,
    "InvalidClientTokenId": CompletionAuthError,
    "ThrottlingException": CompletionRateLimitError,
    "ServiceQuotaExceededException": CompletionRateLimitError,
    "TooManyRequestsException": CompletionRateLimitError,
    "ModelTimeoutException": CompletionNetworkError,
    "ServiceUnavailableException": CompletionNetworkError,
    "ModelNotReadyException": CompletionNetworkError,
    "ModelErrorException": CompletionResponseError,
}

NETWORK_ERRORS = (
    EndpointConnectionError,
    ConnectTimeoutError,
    ReadTimeoutError,
    ConnectionClosedError,
)

FRIENDLY_DETAILS = {
    CompletionAuthError: "The AI service credential is invalid. Please contact the administrator.",
    CompletionRateLimitError: "The AI service is busy right now and cannot take more requests.",
    CompletionNetworkError: "Could not reach the AI service.",
}


def classify_client_error(error: ClientError) -> CompletionError:
    """Translate a Bedrock ClientError into the failure taxonomy."""
    code = error.response.get("Error", {}).get("Code", "")
    message = error.response.get("Error", {}).get("Message", str(error))
    error_class = ERROR_CODE_MAP.get(code, CompletionServiceError)
    details = FRIENDLY_DETAILS.get(error_class, f"{code or 'Error'}: {message}")
    return error_class(details)


def ensure_credentials() -> None:
    """Fail with a configuration error when no AWS credential is available."""
    if boto3.Session().get_credentials() is None:
        logger.error("No AWS credentials found for Bedrock")
        raise ConfigurationError("AI credentials are not configured. Please contact the administrator.")


class TokenUsage(BaseModel):
    """Token counts and estimated cost of one call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0


def estimate_usage(usage: dict) -> TokenUsage:
    """Build a TokenUsage from Bedrock's usage block."""
    input_tokens = usage.get("inputTokens", 0)
    output_tokens = usage.get("outputTokens", 0)
    cost = (
        input_tokens * settings.input_cost_per_1k_tokens
        + output_tokens * settings.output_cost_per_1k_tokens
    ) / 1000
    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=usage.get("totalTokens", input_tokens + output_tokens),
        estimated_cost_usd=round(cost, 6),
    )


class BedrockCompletionClient:
    """Structured completions through the Bedrock Converse API.

    The output schema is passed as the input schema of a single tool that
    the model is forced to call, so the tool input is the structured result.
    """

    def __init__(self, model_id: str, region_name: str):
        self.model_id = model_id
        self.region_name = region_name
        self._client = None

    @property
    def client(self):
        """Lazy-load the bedrock-runtime client."""
        if self._client is None:
            self._client = boto3.client("bedrock-runtime", region_name=self.region_name)
        return self._client

    def complete(
        self,
        prompt: str,
        output_model: type[ModelT],
        temperature: float,
        max_tokens: int,
        tool_name: str = "record_result",
    ) -> ModelT:
        """Send the prompt and return the validated structured result.

        Args:
            prompt: Full prompt text
            output_model: Pydantic model describing the expected output
            temperature: Sampling temperature
            max_tokens: Output token cap
            tool_name: Name of the forced output tool

        Returns:
            An instance of output_model

        Raises:
            CompletionError subclass on any provider or output failure
        """
        try:
            response = self.client.converse(
                modelId=self.model_id,
                messages=[{"role": "user", "content": [{"text": prompt}]}],
                inferenceConfig={"maxTokens": max_tokens, "temperature": temperature},
                toolConfig={
                    "tools": [
                        {
                            "toolSpec": {
                                "name": tool_name,
                                "description": output_model.__doc__ or "Structured result",
                                "inputSchema": {"json": output_model.model_json_schema()},
                            }
                        }
                    ],
                    "toolChoice": {"tool": {"name": tool_name}},
                },
            )
        except ClientError as e:
            error = classify_client_error(e)
            logger.error(f"Bedrock API error ({type(error).__name__}): {e}")
            raise error from e
        except (NoCredentialsError, PartialCredentialsError) as e:
            logger.error(f"Bedrock credentials missing: {e}")
            raise ConfigurationError("AI credentials are not configured. Please contact the administrator.") from e
        except NETWORK_ERRORS as e:
            logger.error(f"Bedrock connection error: {e}")
            raise CompletionNetworkError(FRIENDLY_DETAILS[CompletionNetworkError]) from e
        except BotoCoreError as e:
            logger.error(f"Bedrock client error: {e}")
            raise CompletionServiceError(str(e)) from e

        usage = estimate_usage(response.get("usage", {}))
        logger.info(
            f"Token usage: input={usage.input_tokens} output={usage.output_tokens} "
            f"total={usage.total_tokens} estimated_cost_usd=${usage.estimated_cost_usd:.6f}"
        )

        content = response.get("output", {}).get("message", {}).get("content", [])
        tool_input = next(
            (block["toolUse"].get("input") for block in content if "toolUse" in block),
            None,
        )
        if tool_input is None:
            logger.error(f"Bedrock response had no tool output (stopReason={response.get('stopReason')})")
            raise CompletionResponseError("The AI returned no structured data.")

        try:
            return output_model.model_validate(tool_input)
        except ValidationError as e:
            logger.error(f"Failed to validate AI response: {e}")
            raise CompletionResponseError("The AI returned data that could not be read.") from e


@lru_cache(maxsize=1)
def get_completion_client() -> BedrockCompletionClient:
    """Get or create the BedrockCompletionClient singleton."""
    return BedrockCompletionClient(
        model_id=settings.bedrock_model_id,
        region_name=settings.aws_region,
    )
