import re

from rapidfuzz import fuzz
from typing    import Iterable

WORD_DELIMITERS = '+*/= ,:¡!.;()¿?"\'[]{}<>\\|'

HYPHENATION_PATTERN  = re.compile(r'-\s*[,.]?\s*')
PUNCTUATION_PATTERN  = re.compile(r'[?¿,;.:!+*/=<>\'\\(){}\[\]|]+')
INVERTED_EXCLAMATION = re.compile(r'¡+')
WHITESPACE_PATTERN   = re.compile(r'\s+')
WORD_PATTERN         = re.compile(f'[^{re.escape(WORD_DELIMITERS)}]+')

class Text:
    """
    Ordered run of recognized characters.
    Each character is a single code point taking at most two bytes in UTF-8.
    """

    def __init__(self, data: str = ''):
        self.data = ''
        for character in data:
            self.append(character)

    def append(self, character: str):
        """
        Appends one character; an empty string (a blank classification) is ignored.

        Raises:
            ValueError: If the string is not a single character of at most two UTF-8 bytes
        """
        if character == '':
            return
        if len(character) != 1 or len(character.encode('utf-8')) > 2:
            raise ValueError(f"'{character}' is not a one or two byte character")
        self.data += character

    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.data

    def __repr__(self) -> str:
        return f"Text({self.data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return self.data == other.data
        if isinstance(other, str):
            return self.data == other
        return NotImplemented

    __hash__ = None

    def at(self, index: int) -> str:
        if not 0 <= index < len(self.data):
            raise IndexError(f"Character {index} is outside a text of {len(self.data)} characters")
        return self.data[index]

    def words(self) -> list[str]:
        return WORD_PATTERN.findall(self.data)

    def n_words(self) -> int:
        return len(self.words())

    def average_word_size(self) -> float:
        words = self.words()
        return sum(len(word) for word in words) / len(words) if words else 0.0

    def similarity(self, reference: str) -> float:
        """
        Similarity with an expected text, from 0.0 (unrelated) to 1.0 (identical).
        """
        return fuzz.ratio(self.data, reference) / 100.0

def postprocess(characters: Iterable[str], space_locations: Iterable[int]) -> Text:
    """
    Assembles recognized characters into text.

    Word breaks are inserted at their positions, then hyphenation is undone, stray punctuation
    is stripped and runs of whitespace are collapsed.

    Args:
        characters      : Recognized characters in reading order, '' for blanks
        space_locations : Number of characters preceding each word break

    Returns:
        Text: Cleaned text
    """
    pieces = list(characters)
    for location in sorted(space_locations, reverse = True):
        pieces.insert(location, ' ')

    data = HYPHENATION_PATTERN.sub('', ''.join(pieces))
    data = PUNCTUATION_PATTERN.sub('', data)
    data = INVERTED_EXCLAMATION.sub('', data)
    data = WHITESPACE_PATTERN.sub(' ', data)
    return Text(data)
