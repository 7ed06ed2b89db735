from ai.service import AIService
from ai.factory import get_generation_service
from ai.response_parser import parse_llm_json

__all__ = [
    "AIService",
    "get_generation_service",
    "parse_llm_json",
]
