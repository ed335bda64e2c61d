from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from models import GoldStandard

MIN_CONTROLS = 3
MAX_CONTROLS = 5


@dataclass(frozen=True)
class GuidanceTemplate:
    """Immutable three-layer guidance: principle, practical controls, example wording."""
    principle: str
    controls: Tuple[str, ...]
    example_wording: str
    family: str

    def render(self, requirement_id: str, extra_controls: Sequence[str] = ()) -> GoldStandard:
        controls = list(self.controls)
        for extra in extra_controls:
            if len(controls) >= MAX_CONTROLS:
                break
            if extra not in controls:
                controls.append(extra)
        return GoldStandard(
            requirement_id=requirement_id,
            principle=self.principle,
            practical_controls=controls,
            example_wording=self.example_wording,
            template_family=self.family,
        )


ThemePredicate = Callable[[str], bool]


class ThemeRegistry:
    """Ordered (predicate, template) pairs; the first predicate that accepts the text wins."""
    _themes: List[Tuple[str, ThemePredicate, GuidanceTemplate]] = []

    @classmethod
    def register(cls, name: str, predicate: ThemePredicate, template: GuidanceTemplate) -> None:
        cls._themes.append((name, predicate, template))

    @classmethod
    def match(cls, text: str) -> Optional[Tuple[str, GuidanceTemplate]]:
        lowered = (text or '').lower()
        if not lowered.strip():
            return None
        for name, predicate, template in cls._themes:
            if predicate(lowered):
                return name, template
        return None

    @classmethod
    def names(cls) -> List[str]:
        return [name for name, _, _ in cls._themes]


def mentions_any(*words: str) -> ThemePredicate:
    return lambda text: any(w in text for w in words)


def mentions_word(*words: str) -> ThemePredicate:
    """Whole-word match, so 'safe.' counts but 'safeguard' does not."""
    pattern = re.compile(r'\b(?:' + '|'.join(re.escape(w) for w in words) + r')\b')
    return lambda text: pattern.search(text) is not None


def any_of(*predicates: ThemePredicate) -> ThemePredicate:
    return lambda text: any(p(text) for p in predicates)


def all_of(*predicates: ThemePredicate) -> ThemePredicate:
    return lambda text: all(p(text) for p in predicates)
