import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List

KIND_QUESTION = 'QUESTION'
KIND_REQUIREMENT = 'REQUIREMENT'

# 'Q1', 'Q 12', 'Question 3' followed by optional ':' '.' '-'
QUESTION_HEADER_RE = re.compile(r'\b(?:Q[ \t]*(\d{1,2})|Question[ \t]*(\d{1,2}))\b[ \t]*[:.\-]?', re.IGNORECASE)
# 'Requirement 7', 'Requirement 7:'
REQUIREMENT_HEADER_RE = re.compile(r'\bRequirement[ \t]*(\d{1,2})\b[ \t]*[:.\-]?', re.IGNORECASE)

MAX_STEM_CHARS = 240


@dataclass
class HeaderMarker:
    uid: str          # 'Q3' | 'R12'
    kind: str         # KIND_QUESTION | KIND_REQUIREMENT
    number: int
    raw: str          # matched header text
    start: int        # offset of the marker token
    end: int          # offset just past the marker and its punctuation


@dataclass
class HeaderBlock:
    marker: HeaderMarker
    stem: str         # same-line label after a question header ('' for requirements)
    body: str         # text up to the next kept header


class HeaderIndex:
    """Discovery of question / requirement headers in normalised submission text.

    Scanning is two-pass: every header candidate is collected with its
    position, then candidates outside the configured id ranges are dropped
    and only the earliest occurrence of each id is kept. Kept headers of
    both families bound each other's bodies.
    """
    def __init__(self, question_count: int, requirement_count: int):
        self.question_count = question_count
        self.requirement_count = requirement_count
        self.text = ''
        self.candidates: List[HeaderMarker] = []
        self.markers: List[HeaderMarker] = []

    def scan(self, text: str) -> 'HeaderIndex':
        self.text = text or ''
        self.candidates = self._collect(self.text)
        self.markers = self._keep_earliest(self.candidates)
        return self

    # --- pass 1 ----------------------------------------------------------------
    @staticmethod
    def _collect(text: str) -> List[HeaderMarker]:
        found = []
        for m in QUESTION_HEADER_RE.finditer(text):
            num = int(m.group(1) or m.group(2))
            found.append(HeaderMarker(uid=f"Q{num}", kind=KIND_QUESTION, number=num, raw=m.group(0),
                                      start=m.start(), end=m.end()))
        for m in REQUIREMENT_HEADER_RE.finditer(text):
            num = int(m.group(1))
            found.append(HeaderMarker(uid=f"R{num}", kind=KIND_REQUIREMENT, number=num, raw=m.group(0),
                                      start=m.start(), end=m.end()))
        found.sort(key=lambda mk: mk.start)
        return found

    # --- pass 2 ----------------------------------------------------------------
    def _in_range(self, marker: HeaderMarker) -> bool:
        limit = self.question_count if marker.kind == KIND_QUESTION else self.requirement_count
        return 1 <= marker.number <= limit

    def _keep_earliest(self, candidates: List[HeaderMarker]) -> List[HeaderMarker]:
        earliest: Dict[str, HeaderMarker] = OrderedDict()
        for mk in candidates:
            if not self._in_range(mk):
                continue
            if mk.uid not in earliest:
                earliest[mk.uid] = mk
        return sorted(earliest.values(), key=lambda mk: mk.start)

    # --- block construction ------------------------------------------------------
    def blocks(self) -> List[HeaderBlock]:
        out = []
        text = self.text
        for i, mk in enumerate(self.markers):
            next_start = self.markers[i + 1].start if i + 1 < len(self.markers) else len(text)
            body_start = mk.end
            stem = ''
            if mk.kind == KIND_QUESTION:
                # Skip inline spacing, then take the rest of the line (bounded by the next header)
                while body_start < next_start and text[body_start] in ' \t':
                    body_start += 1
                line_end = text.find('\n', body_start)
                if line_end == -1:
                    line_end = len(text)
                stem_end = min(line_end, next_start, body_start + MAX_STEM_CHARS)
                stem = text[body_start:stem_end].strip()
                body_start = stem_end
            out.append(HeaderBlock(marker=mk, stem=stem, body=text[body_start:next_start].strip()))
        return out

    def by_uid(self) -> Dict[str, HeaderBlock]:
        return {b.marker.uid: b for b in self.blocks()}


def build_header_index(text: str, question_count: int, requirement_count: int) -> HeaderIndex:
    return HeaderIndex(question_count, requirement_count).scan(text)
