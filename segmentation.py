import re
from typing import List, Optional

from models import Sentence

# A boundary is terminal punctuation, whitespace, then an uppercase letter or digit.
# The punctuation is matched (not looked behind) and the split lands after it.
_BOUNDARY_RE = re.compile(r"([.?!])\s+(?=[A-Z0-9])")


def segment(text: Optional[str]) -> List[Sentence]:
    """Split text into sentences numbered 1..N.

    Splits after '.', '?' or '!' when followed by whitespace and an uppercase
    letter or digit. Pieces are trimmed and empty pieces dropped before
    numbering, so ordinals are always contiguous.
    """
    if not text or not text.strip():
        return []
    text = text.replace("\r\n", "\n")

    pieces = []
    start = 0
    for m in _BOUNDARY_RE.finditer(text):
        pieces.append(text[start:m.end(1)])
        start = m.end()
    pieces.append(text[start:])

    sentences = []
    for piece in pieces:
        piece = piece.strip()
        if not piece:
            continue
        sentences.append(Sentence(text=piece, ordinal=len(sentences) + 1))
    return sentences
