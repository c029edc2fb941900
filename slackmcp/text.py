"""Text clean-up applied to message bodies before they are returned."""

from __future__ import annotations

import html
import itertools
import re
import unicodedata

_TAG = re.compile(r"<[^>]*>")
_SPACE_RUN = re.compile(r"[\t\n\f\r ]{2,}")

_ENGLISH_STOPWORDS = frozenset("""
a about above after again against all am an and any are aren't as at be because been before
being below between both but by can can't cannot could couldn't did didn't do does doesn't
doing don't down during each few for from further had hadn't has hasn't have haven't having
he he'd he'll he's her here here's hers herself him himself his how how's i i'd i'll i'm i've
if in into is isn't it it's its itself let's me more most mustn't my myself no nor not of off
on once only or other ought our ours ourselves out over own same shan't she she'd she'll she's
should shouldn't so some such than that that's the their theirs them themselves then there
there's these they they'd they'll they're they've this those through to too under until up
very was wasn't we we'd we'll we're we've were weren't what what's when when's where where's
which while who who's whom why why's with won't would wouldn't you you'd you'll you're you've
your yours yourself yourselves also just will
""".split())


def _is_word_char(char: str) -> bool:
    category = unicodedata.category(char)
    return category[0] == "L" or category in ("Mc", "Mn") or "-" <= char <= "_" or char == "'"


def stopwords_filter(s: str) -> str:
    """Strip HTML, lower-case the text and drop English stop words."""
    s = unicodedata.normalize("NFC", html.unescape(_TAG.sub(" ", s))).lower()
    pieces = (
        " " if word in _ENGLISH_STOPWORDS else word + " "
        for word in ("".join(chars) for is_word, chars in itertools.groupby(s, key=_is_word_char) if is_word)
    )
    return _SPACE_RUN.sub(" ", "".join(pieces))


def process_text(s: str) -> str:
    """Prepare a message text for output."""
    return stopwords_filter(s)