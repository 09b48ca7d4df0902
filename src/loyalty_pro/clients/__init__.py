"""LLM client implementations for Loyalty Pro."""

from loyalty_pro.clients.gemini import GeminiClient, GeminiResponse

__all__ = ["GeminiClient", "GeminiResponse"]
