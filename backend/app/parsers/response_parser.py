"""Parsers that turn free-text optimizer output into metric records."""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Pattern, Tuple


LOGGER = logging.getLogger(__name__)


class InvalidOptimizationResponse(RuntimeError):
    """Raised when the model output does not satisfy the acceptance check."""


class BaseResponseParser(ABC):
    """Extract tagged comment metrics from optimized Move code.

    Subclasses declare their tag vocabulary as regular expressions whose
    first group captures the rest of the tagged line.
    """

    gas_pattern: Pattern[str]
    security_pattern: Pattern[str]
    performance_pattern: Pattern[str]

    gas_placeholder = "0%"
    performance_placeholder = "No improvement"

    #: ``(marker substring, advisory text)`` pairs checked in order.
    warning_markers: Tuple[Tuple[str, str], ...] = ()

    invalid_message = "Invalid optimization response"

    @abstractmethod
    def is_acceptable(self, text: str) -> bool:
        """Return True when the model output can be turned into a response."""
        raise NotImplementedError

    def accept(self, raw_text: Optional[str]) -> str:
        """Return the trimmed output or raise ``InvalidOptimizationResponse``."""

        text = (raw_text or "").strip()
        if not text or not self.is_acceptable(text):
            LOGGER.debug(
                "Rejected optimizer output (length=%s, parser=%s)",
                len(text),
                type(self).__name__,
            )
            raise InvalidOptimizationResponse(self.invalid_message)
        return text

    @staticmethod
    def _first_match(pattern: Pattern[str], text: str, default: str) -> str:
        match = pattern.search(text)
        if match is None:
            return default
        value = match.group(1).strip()
        return value or default

    def extract_gas(self, text: str) -> str:
        return self._first_match(self.gas_pattern, text, self.gas_placeholder)

    def extract_security(self, text: str) -> List[str]:
        """Collect every security finding, always as a list."""
        findings = [match.group(1).strip() for match in self.security_pattern.finditer(text)]
        return [finding for finding in findings if finding]

    def extract_performance(self, text: str) -> str:
        return self._first_match(self.performance_pattern, text, self.performance_placeholder)

    def extract_warnings(self, text: str) -> Optional[List[str]]:
        """Return advisories for every marker found, or None when there are none."""
        warnings = [advisory for marker, advisory in self.warning_markers if marker in text]
        return warnings or None

    def parse(self, raw_text: Optional[str]) -> Dict[str, object]:
        """Validate the output and return code, metric fields and warnings."""

        text = self.accept(raw_text)
        return {
            "optimized_code": text,
            "gas": self.extract_gas(text),
            "security": self.extract_security(text),
            "performance": self.extract_performance(text),
            "warnings": self.extract_warnings(text),
        }


class TaggedResponseParser(BaseResponseParser):
    """Upper-case ``// GAS:`` vocabulary used by the v1 endpoint."""

    gas_pattern = re.compile(r"// GAS: (.+?)(?:\n|$)")
    security_pattern = re.compile(r"// SECURITY: (.+?)(?:\n|$)")
    performance_pattern = re.compile(r"// PERFORMANCE: (.+?)(?:\n|$)")

    warning_markers = (
        ("UNSAFE", "Contains unsafe operations"),
        ("WARNING", "Contains compiler warnings"),
    )

    def is_acceptable(self, text: str) -> bool:
        return self.gas_pattern.search(text) is not None


class LegacyResponseParser(BaseResponseParser):
    """Sentence-case ``// Gas savings:`` vocabulary used by the legacy endpoint."""

    gas_pattern = re.compile(r"// Gas savings: (.+?)(?:\n|$)")
    security_pattern = re.compile(r"// Security: (.+?)(?:\n|$)")
    performance_pattern = re.compile(r"// Performance: (.+?)(?:\n|$)")

    performance_placeholder = "Not quantified"

    warning_markers = (
        ("unsafe", "Contains unsafe operations"),
        ("TODO", "Contains unresolved TODO items"),
    )

    invalid_message = "Invalid optimization response format"

    _module_keyword = re.compile(r"\bmodule\b")
    _function_keyword = re.compile(r"\bfun\b")

    def is_acceptable(self, text: str) -> bool:
        return bool(self._module_keyword.search(text) and self._function_keyword.search(text))


__all__ = [
    "BaseResponseParser",
    "InvalidOptimizationResponse",
    "LegacyResponseParser",
    "TaggedResponseParser",
]
