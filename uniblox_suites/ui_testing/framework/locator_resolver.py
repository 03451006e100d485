"""
================================================================================
Locator Resolver with Fallback Chains
================================================================================

Resolves a logical UI role ("page heading", "submit button") to a concrete
element by walking an ordered chain of lookup strategies:
    - Strategies are tried in declared order
    - The first strategy that resolves wins, later ones are never consulted
    - Markup variations (missing tags, alternate structure) are absorbed
    - Fallback usage is recorded for maintenance insights

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from .interaction_waiter import InteractionError, InteractionWaiter


STRATEGY_KINDS = ("tag", "css", "role", "class")


@dataclass(frozen=True)
class LocatorStrategy:
    """
    One named rule for finding an element.

    Attributes:
        name: Human-readable strategy name used in logs
        kind: "tag", "css", "role" (ARIA role) or "class" (class-name heuristic)
        value: Tag name, selector, role or class fragment
        role_name: Optional accessible name, only used with kind="role"
    """
    name: str
    kind: str
    value: str
    role_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in STRATEGY_KINDS:
            raise ValueError(f"Unknown locator strategy kind: {self.kind}")

    def build(self, page: Page) -> Locator:
        """Build the Playwright locator for this strategy."""
        if self.kind == "role":
            if self.role_name:
                return page.get_by_role(self.value, name=self.role_name)
            return page.get_by_role(self.value)
        if self.kind == "class":
            return page.locator(f"[class*='{self.value}']")
        return page.locator(self.value)


def by_tag(tag: str) -> LocatorStrategy:
    return LocatorStrategy(name=f"tag:{tag}", kind="tag", value=tag)


def by_css(selector: str) -> LocatorStrategy:
    return LocatorStrategy(name=f"css:{selector}", kind="css", value=selector)


def by_role(role: str, name: Optional[str] = None) -> LocatorStrategy:
    label = f"role:{role}" if name is None else f"role:{role}[{name}]"
    return LocatorStrategy(name=label, kind="role", value=role, role_name=name)


def by_class_hint(fragment: str) -> LocatorStrategy:
    return LocatorStrategy(name=f"class*={fragment}", kind="class", value=fragment)


@dataclass(frozen=True)
class LocatorChain:
    """
    Ordered strategies for one logical UI role.

    Attributes:
        role: Logical role name, e.g. "header"
        strategies: Strategies in priority order (most specific first)
        title_fallback: Use the document title when no strategy yields text
    """
    role: str
    strategies: Tuple[LocatorStrategy, ...]
    title_fallback: bool = False

    @classmethod
    def of(cls, role: str, *strategies: LocatorStrategy, title_fallback: bool = False) -> "LocatorChain":
        return cls(role=role, strategies=tuple(strategies), title_fallback=title_fallback)


@dataclass(frozen=True)
class LocatorResult:
    """Outcome of a chain or single-strategy lookup."""
    found: bool
    locator: Optional[Locator] = None
    strategy: Optional[LocatorStrategy] = None
    text: str = ""

    def __bool__(self) -> bool:
        return self.found


NOT_FOUND = LocatorResult(found=False)


@dataclass
class FallbackRecord:
    """A role that was resolved by a non-primary strategy."""
    role: str
    primary: str
    used: str
    position: int = field(default=0)


class LocatorResolver:
    """
    Resolves LocatorChains against a Playwright page.

    Usage:
        >>> resolver = LocatorResolver(page, waiter, lookup_timeout_seconds=5)
        >>> header = LocatorChain.of("header", by_tag("h1"), by_role("heading"),
        ...                          title_fallback=True)
        >>> resolver.resolve_text(header)
        'Choose your app'
    """

    def __init__(
        self,
        page: Page,
        waiter: InteractionWaiter,
        lookup_timeout_seconds: float = 5,
    ):
        """
        Args:
            page: Playwright Page object
            waiter: Waiter used for visibility-gated reads
            lookup_timeout_seconds: Budget per strategy for the node to attach
        """
        self.page = page
        self.waiter = waiter
        self.lookup_timeout_seconds = lookup_timeout_seconds
        self._fallback_used: Dict[str, FallbackRecord] = {}

    # =========================================================================
    # Single strategy
    # =========================================================================

    def find(self, strategy: LocatorStrategy) -> LocatorResult:
        """
        Look up the first element matched by one strategy.

        Returns NOT_FOUND when nothing attaches within the lookup budget or the
        lookup itself errors.
        """
        try:
            locator = strategy.build(self.page).first
            locator.wait_for(state="attached", timeout=self.lookup_timeout_seconds * 1000)
        except PlaywrightError as e:
            logger.debug(f"Strategy {strategy.name} found nothing: {str(e)[:80]}")
            return NOT_FOUND
        return LocatorResult(found=True, locator=locator, strategy=strategy)

    def read(self, strategy: LocatorStrategy) -> LocatorResult:
        """Look up one strategy and read its text. Blank text counts as a miss."""
        result = self.find(strategy)
        if not result:
            return NOT_FOUND
        try:
            text = self.waiter.read_text(result.locator, description=strategy.name)
        except InteractionError as e:
            logger.debug(f"Strategy {strategy.name} not readable: {e}")
            return NOT_FOUND
        text = (text or "").strip()
        if not text:
            return NOT_FOUND
        return LocatorResult(found=True, locator=result.locator, strategy=strategy, text=text)

    # =========================================================================
    # Chains
    # =========================================================================

    def resolve_element(self, chain: LocatorChain) -> LocatorResult:
        """
        Return the first resolvable element of the chain, or NOT_FOUND.
        """
        result = self._first(chain, self.find)
        if not result:
            logger.debug(f"No element resolved for '{chain.role}'")
        return result

    def resolve_text(self, chain: LocatorChain) -> str:
        """
        Return the text of the first strategy that yields visible, non-blank
        text. Falls back to the document title (when the chain allows it) and
        finally to an empty string. Never raises.
        """
        result = self._first(chain, self.read)
        if result:
            return result.text

        if chain.title_fallback:
            title = self._document_title()
            if title:
                logger.warning(f"'{chain.role}' resolved from document title: '{title}'")
                return title

        logger.debug(f"No text resolved for '{chain.role}'")
        return ""

    def _first(self, chain: LocatorChain, attempt) -> LocatorResult:
        for position, strategy in enumerate(chain.strategies):
            try:
                result = attempt(strategy)
            except Exception as e:
                logger.debug(f"Strategy {strategy.name} errored: {e}")
                result = NOT_FOUND
            if result:
                self._record(chain, position, strategy)
                return result
        return NOT_FOUND

    def _document_title(self) -> str:
        try:
            return (self.page.title() or "").strip()
        except Exception as e:
            logger.debug(f"Document title unavailable: {e}")
            return ""

    # =========================================================================
    # Health tracking
    # =========================================================================

    def _record(self, chain: LocatorChain, position: int, strategy: LocatorStrategy) -> None:
        if position == 0:
            logger.debug(f"'{chain.role}' found: {strategy.name}")
            return
        logger.warning(f"'{chain.role}' used fallback #{position}: {strategy.name}")
        self._fallback_used[chain.role] = FallbackRecord(
            role=chain.role,
            primary=chain.strategies[0].name,
            used=strategy.name,
            position=position,
        )

    @property
    def fallbacks_used(self) -> List[FallbackRecord]:
        return list(self._fallback_used.values())

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists roles that needed a fallback strategy (maintenance candidates).
        """
        if not self._fallback_used:
            return "All roles resolved with their primary strategy."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
        ]
        for role, record in self._fallback_used.items():
            report_lines.extend([
                f"  [{role}]",
                f"    Failed primary: {record.primary}",
                f"    Used: #{record.position} {record.used}",
                "",
            ])
        return "\n".join(report_lines)


__all__ = [
    "LocatorStrategy",
    "LocatorChain",
    "LocatorResult",
    "LocatorResolver",
    "NOT_FOUND",
    "by_tag",
    "by_css",
    "by_role",
    "by_class_hint",
]
