# DEPENDENCIES
import time
import anthropic
from typing import Any
from typing import Dict
from typing import Optional
from dataclasses import dataclass
from utils.logger import log_info
from utils.logger import log_error
from config.settings import settings
from utils.logger import ContractAnalyzerLogger
from services.exceptions import UsageLimitError
from services.exceptions import ConfigurationError
from services.exceptions import AnalysisServiceError
from services.exceptions import MalformedResponseError


@dataclass
class LLMResponse:
    """
    Standardized structured-extraction response
    """
    tool_input      : Dict[str, Any]
    tool_name       : str
    model           : str
    input_tokens    : int
    output_tokens   : int
    latency_seconds : float
    stop_reason     : Optional[str] = None

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens


    def to_dict(self) -> Dict[str, Any]:
        return {"tool_name"       : self.tool_name,
                "model"           : self.model,
                "input_tokens"    : self.input_tokens,
                "output_tokens"   : self.output_tokens,
                "latency_seconds" : round(self.latency_seconds, 3),
                "stop_reason"     : self.stop_reason,
               }


class LLMManager:
    """
    Structured extraction against the Anthropic Messages API : every request forces one tool call whose input is the result
    """
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, timeout: Optional[float] = None,
                 max_retries: Optional[int] = None, requests_per_minute: Optional[int] = None, client: Optional[anthropic.Anthropic] = None):
        """
        Initialize LLM Manager

        Arguments:
        ----------
            api_key             : Anthropic API key (default: settings.ANTHROPIC_API_KEY)

            model               : Model name (default: settings.LLM_MODEL)

            timeout             : Request timeout in seconds, handled by the SDK

            max_retries         : Transport-level retries, handled by the SDK

            requests_per_minute : Client-side pacing of requests

            client              : Pre-built Anthropic client (tests)

        Raises:
        -------
            ConfigurationError  : No API key available
        """
        self.api_key = api_key or settings.ANTHROPIC_API_KEY

        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is not set. Add your Anthropic API key to the environment or .env file.")

        self.model                   = model or settings.LLM_MODEL
        self.timeout                 = timeout or settings.LLM_TIMEOUT
        self.max_retries             = settings.LLM_MAX_RETRIES if max_retries is None else max_retries

        self.client                  = client or anthropic.Anthropic(api_key     = self.api_key,
                                                                     timeout     = self.timeout,
                                                                     max_retries = self.max_retries,
                                                                    )

        # Rate limiting (simple token bucket)
        self._bucket_capacity        = float(requests_per_minute or settings.LLM_REQUESTS_PER_MINUTE)
        self._rate_limit_tokens      = self._bucket_capacity
        self._rate_limit_refill_rate = self._bucket_capacity / 60.0
        self._rate_limit_last_refill = time.monotonic()

        log_info("LLMManager initialized",
                 model               = self.model,
                 timeout             = self.timeout,
                 max_retries         = self.max_retries,
                 requests_per_minute = self._bucket_capacity,
                )


    # RATE LIMITING
    def _check_rate_limit(self) -> bool:
        """
        Check if rate limit allows request (token bucket refilled continuously)
        """
        now                          = time.monotonic()
        time_passed                  = now - self._rate_limit_last_refill

        self._rate_limit_tokens      = min(self._bucket_capacity, self._rate_limit_tokens + time_passed * self._rate_limit_refill_rate)
        self._rate_limit_last_refill = now

        if (self._rate_limit_tokens >= 1):
            self._rate_limit_tokens -= 1
            return True

        return False


    def _wait_for_rate_limit(self):
        if self._check_rate_limit():
            return

        log_info("Rate limit hit, waiting...", tokens_remaining = round(self._rate_limit_tokens, 3))

        while not self._check_rate_limit():
            time.sleep(0.5)


    # STRUCTURED EXTRACTION
    @ContractAnalyzerLogger.log_execution_time("llm_extract_structured")
    def extract_structured(self, prompt: str, tool: Dict[str, Any], max_tokens: int = 8192, temperature: float = 0.0) -> LLMResponse:
        """
        Send a prompt and force the model to answer through `tool`

        Arguments:
        ----------
            prompt      : User prompt

            tool        : Tool definition (name, description, input_schema)

            max_tokens  : Maximum tokens to generate

            temperature : Sampling temperature

        Returns:
        --------
            { LLMResponse } : Response carrying the tool input

        Raises:
        -------
            ConfigurationError     : Credential rejected

            UsageLimitError        : Rate limit or quota exceeded

            AnalysisServiceError   : Service unreachable or failing

            MalformedResponseError : No tool call in the answer
        """
        tool_name  = tool["name"]

        log_info("LLM structured request",
                 model         = self.model,
                 tool          = tool_name,
                 prompt_length = len(prompt),
                 max_tokens    = max_tokens,
                )

        self._wait_for_rate_limit()

        start_time = time.time()

        try:
            message = self.client.messages.create(model       = self.model,
                                                  max_tokens  = max_tokens,
                                                  temperature = temperature,
                                                  tools       = [tool],
                                                  tool_choice = {"type": "tool", "name": tool_name},
                                                  messages    = [{"role": "user", "content": prompt}],
                                                 )

        except anthropic.AuthenticationError as e:
            raise ConfigurationError(f"Anthropic rejected the API key: {e}") from e

        except anthropic.PermissionDeniedError as e:
            raise ConfigurationError(f"Anthropic API key is not permitted to use {self.model}: {e}") from e

        except anthropic.RateLimitError as e:
            raise UsageLimitError(f"Anthropic rate limit or quota exceeded: {e}") from e

        except anthropic.APIError as e:
            log_error(e, context = {"component" : "LLMManager", "operation" : "extract_structured", "tool" : tool_name})
            raise AnalysisServiceError(f"Analysis service request failed: {e}") from e

        latency    = time.time() - start_time
        tool_input = self._find_tool_input(message, tool_name)
        usage      = getattr(message, "usage", None)

        response   = LLMResponse(tool_input      = tool_input,
                                 tool_name       = tool_name,
                                 model           = self.model,
                                 input_tokens    = getattr(usage, "input_tokens", 0) or 0,
                                 output_tokens   = getattr(usage, "output_tokens", 0) or 0,
                                 latency_seconds = latency,
                                 stop_reason     = getattr(message, "stop_reason", None),
                                )

        log_info("LLM structured request successful", **response.to_dict())

        return response


    @staticmethod
    def _find_tool_input(message: Any, tool_name: str) -> Dict[str, Any]:
        """
        Extract the input of the forced tool call from a Messages API response
        """
        for block in (getattr(message, "content", None) or []):
            if ((getattr(block, "type", None) == "tool_use") and (getattr(block, "name", tool_name) == tool_name)):
                return block.input

        stop_reason = getattr(message, "stop_reason", None)

        if (stop_reason == "max_tokens"):
            raise MalformedResponseError(f"Analysis response was truncated before the {tool_name} tool call completed")

        raise MalformedResponseError(f"No {tool_name} tool call received from the analysis service (stop_reason={stop_reason})")
