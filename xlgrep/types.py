import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Pattern, Union


class SearchMode(Enum):
    FUZZY = "FUZZY"        # substring containment
    STRICTLY = "STRICTLY"  # exact equality


@dataclass(frozen=True)
class SearchConfig:
    word: str
    mode: SearchMode
    replacement: Optional[str] = None
    verbose: bool = False
    pattern: Optional[Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        # FUZZY replacement substitutes every occurrence of the word read as a regex
        if self.mode is SearchMode.FUZZY and self.replacement is not None:
            object.__setattr__(self, 'pattern', re.compile(self.word))

    @property
    def replacing(self) -> bool:
        return self.replacement is not None


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Number:
    number: float


@dataclass(frozen=True)
class Other:
    pass


CellValue = Union[Text, Number, Other]


@dataclass(frozen=True)
class MatchOutcome:
    value: str                          # rendered original value
    replacement: Optional[str] = None   # new cell text, when replacing


@dataclass(frozen=True)
class MatchRecord:
    file_path: str
    sheet_name: str
    address: str  # like 'B2'
    value: str

    def to_line(self) -> str:
        return '\t'.join((self.file_path, self.sheet_name, self.address, self.value))
