# backend/tour_planner/agents/itinerary_agent.py

from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from tour_planner.agents.fallback_itinerary import FALLBACK_RAW_TEXT, load_fallback_itinerary
from tour_planner.core.config_loader import settings
from tour_planner.core.exceptions import CommunicationError, GenerationCancelled, MalformedDocument
from tour_planner.core.logger import logger
from tour_planner.core.retry import CancellationToken, RetryPolicy
from tour_planner.models.conversation_models import (
    CompletionResult,
    ContentSegment,
    ConversationMessage,
    OtherSegment,
    StopReason,
    TextSegment,
    ToolResultSegment,
    ToolUseSegment,
)
from tour_planner.models.itinerary_models import GenerationResult, ItineraryDocument
from tour_planner.models.planning_models import TravelerCounts
from tour_planner.services.anthropic_service import AnthropicService
from tour_planner.utils.json_extractor import extract_json, find_json_segment


ITINERARY_SCHEMA = """
REQUIRED JSON STRUCTURE:
{
  "itinerary": {
    "day1": {
      "morning": {
        "timeSlot": "HH:MM-HH:MM",
        "experienceId": number,
        "vendorId": "headout",
        "tourId": number,
        "variantId": number,
        "tourGroupName": "string",
        "variantName": "string",
        "duration": "Xh Ym",
        "location": "string",
        "notes": "string"
      },
      "afternoon": { same 10 fields as morning },
      "evening": { same 10 fields as morning }
    },
    "day2": { same structure as day1 },
    "optimizationNotes": {
      "crowdAvoidance": "string",
      "logistics": "string",
      "valueOptimization": "string",
      "experienceVariety": "string"
    }
  }
}

CRITICAL REQUIREMENTS:
- Each day must have exactly 3 time slots: morning, afternoon, evening
- Each time slot must include ALL 10 fields: timeSlot, experienceId, vendorId, tourId, variantId, tourGroupName, variantName, duration, location, notes
- experienceId, tourId, variantId must be actual numbers from MCP data
- optimizationNotes must include all 4 fields: crowdAvoidance, logistics, valueOptimization, experienceVariety
- Do not use price tools
- Return ONLY the JSON, no additional text
- Do not include any experience that is not mentioned by the user
- A slot you leave empty keeps all 10 fields with empty strings and 0 ids
"""


class ItineraryAgent:
    """
    Drives the completion endpoint until it stops pausing, then salvages the
    itinerary JSON from the final answer.

    - pause_turn responses are continued by replaying them as an assistant turn
    - the loop is bounded by the RetryPolicy (attempts + pacing delay)
    - each run gets its own CancellationToken; cancelling one run leaves the
      agent usable for the next
    - communication failures fall back to a canned itinerary
    """

    def __init__(
        self,
        client: Optional[AnthropicService] = None,
        retry_policy: Optional[RetryPolicy] = None,
        mcp_servers: Optional[List[Dict[str, str]]] = None,
    ):
        self.client = client or AnthropicService()
        self.retry_policy = retry_policy or RetryPolicy()
        if mcp_servers is None:
            mcp_servers = [{
                "type": "url",
                "url": settings.mcp_server_url,
                "name": settings.mcp_server_name,
            }]
        self.mcp_servers = mcp_servers

    # -----------------------------
    # 1. Prompt
    # -----------------------------
    def build_prompt(
        self,
        attractions: Sequence[str],
        duration: int,
        travelers: TravelerCounts,
        start_date: Union[date, str],
        end_date: Union[date, str],
    ) -> str:
        return f"""
You are an expert travel itinerary optimizer specializing in Headout experiences.
When users share their travel plans, you create data-driven, personalized itinerary
optimizations using the available MCP tools and real-time availability.

## Core Optimization Process
1. Extract destination, travel dates and group composition from the request.
2. Use 'analyze_itinerary_potential' to assess the destination's optimization opportunities.
3. Use 'optimize_itinerary' with the travel plan, group composition and preferences to
   generate bookable variants with optimal time slots.
4. Validate experience availability for the specified dates and fill any gaps.

## Key Optimization Factors
- Real-time availability data and seasonal crowd patterns
- Group eligibility and age restrictions
- Geographic clustering for efficient routing
- Experience duration and schedule optimization

## Output format
You MUST return a JSON response with the EXACT structure below. Do not include any text before or after the JSON.
{ITINERARY_SCHEMA}
Now generate a {duration} day optimised itinerary for {travelers.describe()},
traveling from {start_date} to {end_date}. They are visiting {", ".join(attractions)}."""

    # -----------------------------
    # 2. Continuation turn
    # -----------------------------
    @staticmethod
    def format_response_content(content: Sequence[ContentSegment]) -> str:
        parts = []
        for item in content:
            if isinstance(item, TextSegment):
                if item.text:
                    parts.append(item.text)
            elif isinstance(item, ToolUseSegment):
                parts.append(f"[Tool: {item.name}]")
            elif isinstance(item, ToolResultSegment):
                parts.append(f"[Tool Result: {item.tool_use_id}]")
            elif isinstance(item, OtherSegment):
                parts.append(f"[{item.type}]")
            else:
                raise TypeError(f"Unsupported content segment: {type(item).__name__}")
        return " ".join(parts)

    # -----------------------------
    # 3. pause_turn loop
    # -----------------------------
    async def handle_pause_turn_conversation(
        self,
        messages: List[ConversationMessage],
        bypass_timeout: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CompletionResult:
        token = cancel_token or self.retry_policy.token()
        current_messages = list(messages)
        max_attempts = self.retry_policy.max_attempts
        response: Optional[CompletionResult] = None

        for attempt in range(1, max_attempts + 1):
            token.raise_if_cancelled()
            logger.info(f"Making API call (attempt {attempt}/{max_attempts})")

            response = await self.client.send_message(
                current_messages,
                mcp_servers=self.mcp_servers,
                bypass_timeout=bypass_timeout,
            )

            if response.stop_reason != StopReason.PAUSE_TURN:
                logger.info(f"Conversation completed with stop_reason: {response.stop_reason.value}")
                return response

            logger.info(f"Handling pause_turn (attempt {attempt}/{max_attempts}), {len(response.content)} content items")
            current_messages.append(ConversationMessage(
                role="assistant",
                content=self.format_response_content(response.content),
            ))

            if attempt < max_attempts:
                await self.retry_policy.wait(token)

        logger.warning(f"Maximum retries ({max_attempts}) exceeded for pause_turn handling")
        return response

    # -----------------------------
    # 4. Extraction
    # -----------------------------
    @staticmethod
    def extract_itinerary(response: CompletionResult) -> GenerationResult:
        json_text = find_json_segment(response.text_segments)
        payload = extract_json(json_text)
        try:
            itinerary = ItineraryDocument.from_payload(payload)
        except ValueError as e:
            raise MalformedDocument(str(e), raw_text=json_text) from e

        logger.info(f"Extracted itinerary with {len(itinerary.days)} days")
        return GenerationResult(success=True, itinerary=itinerary, raw_text=json_text)

    # -----------------------------
    # 5. Public entry point
    # -----------------------------
    async def generate_itinerary(
        self,
        attractions: Sequence[str],
        duration: int,
        travelers: TravelerCounts,
        start_date: Union[date, str],
        end_date: Union[date, str],
        bypass_timeout: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> GenerationResult:
        prompt = self.build_prompt(attractions, duration, travelers, start_date, end_date)
        response: Optional[CompletionResult] = None

        try:
            response = await self.handle_pause_turn_conversation(
                [ConversationMessage(role="user", content=prompt)],
                bypass_timeout=bypass_timeout,
                cancel_token=cancel_token,
            )
            return self.extract_itinerary(response)

        except CommunicationError as e:
            logger.error(f"Itinerary generation failed: {e}")
            logger.info("Using backup itinerary response due to API timeout or failure")
            return GenerationResult(
                success=True,
                itinerary=load_fallback_itinerary(),
                raw_text=FALLBACK_RAW_TEXT,
                used_fallback=True,
            )

        except MalformedDocument as e:
            logger.error(f"Failed to extract JSON from response: {e}")
            segments = response.text_segments if response else []
            raw_text = e.raw_text or (segments[0] if segments else "No response text available")
            return GenerationResult(success=False, error=str(e), raw_text=raw_text)

        except GenerationCancelled as e:
            logger.warning(str(e))
            return GenerationResult(success=False, error=str(e), raw_text="")
