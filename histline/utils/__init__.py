"""
Common utilities package for the Histline application.

Logging, HTTP client construction, LLM response JSON parsing and year
extraction from free-form date labels.
"""

from histline.utils.http_client import create_provider_http_client
from histline.utils.json_parser import extract_json_array_from_llm_response
from histline.utils.logger import setup_logger
from histline.utils.year_parser import extract_year

__all__ = [
    "create_provider_http_client",
    "extract_json_array_from_llm_response",
    "setup_logger",
    "extract_year",
]
