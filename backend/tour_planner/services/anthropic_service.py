# backend/tour_planner/services/anthropic_service.py

import asyncio
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from tour_planner.core.config_loader import settings
from tour_planner.core.exceptions import CommunicationError, CompletionTimeout
from tour_planner.core.logger import logger
from tour_planner.models.conversation_models import CompletionResult, ConversationMessage, StopReason


class AnthropicService:
    """Thin client for a Messages-API compatible completion endpoint."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.api_url = api_url or settings.completion_api_url
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.completion_model
        self.max_tokens = max_tokens or settings.completion_max_tokens
        self.timeout_ms = timeout_ms or settings.request_timeout_ms

    # -------------------------------------------------------
    # REQUEST BODY
    # -------------------------------------------------------
    def build_request(
        self,
        messages: List[ConversationMessage],
        mcp_servers: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [m.model_dump() for m in messages],
        }
        if mcp_servers:
            body["mcp_servers"] = mcp_servers
        return body

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": settings.anthropic_version,
        }
        if self.api_key:
            headers["x-api-key"] = self.api_key
        if settings.anthropic_beta:
            headers["anthropic-beta"] = settings.anthropic_beta
        return headers

    # -------------------------------------------------------
    # SEND (blocking)
    # -------------------------------------------------------
    def send_message_sync(
        self,
        messages: List[ConversationMessage],
        mcp_servers: Optional[List[Dict[str, str]]] = None,
        bypass_timeout: bool = False,
    ) -> CompletionResult:
        body = self.build_request(messages, mcp_servers)
        timeout = None if bypass_timeout else self.timeout_ms / 1000

        try:
            resp = requests.post(self.api_url, json=body, headers=self._headers(), timeout=timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"Completion API call timed out after {self.timeout_ms}ms")
            raise CompletionTimeout(f"API call timed out after {self.timeout_ms}ms") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Completion API request failed: {e}")
            raise CommunicationError(f"network error: {e}") from e

        if not resp.ok:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = None
            detail = error_data.get("error", resp.text) if isinstance(error_data, dict) else resp.text
            logger.error(f"Completion API error {resp.status_code}: {str(detail)[:500]}")
            raise CommunicationError(f"API Error: {detail or 'Unknown error occurred'}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise CommunicationError(f"API Error: unreadable response body ({e})", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise CommunicationError("API Error: unexpected response body", status_code=resp.status_code)

        try:
            result = CompletionResult.from_payload(data)
        except ValidationError as e:
            logger.error(f"Completion API returned an unexpected body: {e.error_count()} error(s)")
            raise CommunicationError("API Error: unexpected response body", status_code=resp.status_code) from e

        self._log_stop_reason(result)
        return result

    # -------------------------------------------------------
    # SEND (async)
    # -------------------------------------------------------
    async def send_message(
        self,
        messages: List[ConversationMessage],
        mcp_servers: Optional[List[Dict[str, str]]] = None,
        bypass_timeout: bool = False,
    ) -> CompletionResult:
        return await asyncio.to_thread(self.send_message_sync, messages, mcp_servers, bypass_timeout)

    @staticmethod
    def _log_stop_reason(result: CompletionResult) -> None:
        logger.info(f"API Response - Stop Reason: {result.raw_stop_reason}")

        if result.stop_reason == StopReason.MAX_TOKENS:
            logger.warning("Response was truncated due to max_tokens limit")
        elif result.stop_reason == StopReason.PAUSE_TURN:
            logger.info("Response paused - will be handled by retry logic")
        elif result.stop_reason == StopReason.TOOL_USE:
            logger.info("Tool use detected in response")
        elif result.stop_reason == StopReason.REFUSAL:
            logger.warning("Model refused to generate response")
        elif result.stop_reason == StopReason.OTHER:
            logger.info(f"Unknown stop reason: {result.raw_stop_reason}")
