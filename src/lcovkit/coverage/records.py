"""LCOV record model.

One immutable value type per detail record of an LCOV trace. Each type
decodes itself from exactly one trimmed trace line (tag included) and
encodes itself back to that line:

- DA:<line>,<hits>                          -> LineRecord
- FN:<line>,<name>                          -> FunctionDefinition
- FNDA:<hits>,<name>                        -> FunctionHit
- BRDA:<line>,<block>,<branch>,<hits or ->  -> BranchRecord

FunctionRecord is the joined form of a definition and its hit count.
"""

from __future__ import annotations

from dataclasses import dataclass

from lcovkit.core.errors import MalformedRecordError

LINE_TAG = "DA:"
FUNCTION_DEFINITION_TAG = "FN:"
FUNCTION_HIT_TAG = "FNDA:"
BRANCH_TAG = "BRDA:"

# Hit-count token for a branch whose condition was never evaluated
BRANCH_NOT_EVALUATED = "-"


def _fields(text: str, tag: str, count: int, expected: str) -> list[str]:
    """Strip *tag* and split the payload into exactly *count* fields."""
    if not text.startswith(tag):
        raise MalformedRecordError.for_record(text, expected)
    parts = text[len(tag) :].split(",")
    if len(parts) != count:
        raise MalformedRecordError.for_record(text, expected)
    return parts


def _non_negative(value: str, text: str, expected: str) -> int:
    # int() accepts "+5", " 5" and "1_0"; trace fields are plain digits only
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecordError.for_record(text, expected)
    return int(value)


def _line_number(value: str, text: str, expected: str) -> int:
    number = _non_negative(value, text, expected)
    if number < 1:
        raise MalformedRecordError.for_record(text, expected)
    return number


def _name(value: str, text: str, expected: str) -> str:
    if not value:
        raise MalformedRecordError.for_record(text, expected)
    return value


def _require_line_number(value: int) -> None:
    if value < 1:
        raise ValueError(f"line_number must be >= 1, got {value}")


def _require_non_negative(field: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{field} must be >= 0, got {value}")


def _require_name(value: str) -> None:
    # Names are the last comma-separated field of a single trace line
    if not value or "," in value or "\n" in value:
        raise ValueError(
            f"function name must be non-empty without commas or newlines: {value!r}"
        )


def parse_count(tag: str, text: str) -> int:
    """Decode a declared-total line such as ``LF:12`` into its count."""
    expected = f"{tag}<count>"
    if not text.startswith(tag):
        raise MalformedRecordError.for_record(text, expected)
    return _non_negative(text[len(tag) :], text, expected)


@dataclass(frozen=True, slots=True)
class LineRecord:
    """Execution count of one source line."""

    line_number: int
    hit_count: int

    _SHAPE = "DA:<line>,<hits>"

    def __post_init__(self) -> None:
        _require_line_number(self.line_number)
        _require_non_negative("hit_count", self.hit_count)

    @property
    def is_covered(self) -> bool:
        return self.hit_count > 0

    @classmethod
    def from_lcov(cls, text: str) -> LineRecord:
        line, hits = _fields(text, LINE_TAG, 2, cls._SHAPE)
        return cls(
            line_number=_line_number(line, text, cls._SHAPE),
            hit_count=_non_negative(hits, text, cls._SHAPE),
        )

    def to_lcov(self) -> str:
        return f"{LINE_TAG}{self.line_number},{self.hit_count}"


@dataclass(frozen=True, slots=True)
class FunctionDefinition:
    """Where a function starts; hit counts arrive separately in FNDA records."""

    line_number: int
    name: str

    _SHAPE = "FN:<line>,<name>"

    def __post_init__(self) -> None:
        _require_line_number(self.line_number)
        _require_name(self.name)

    @classmethod
    def from_lcov(cls, text: str) -> FunctionDefinition:
        line, name = _fields(text, FUNCTION_DEFINITION_TAG, 2, cls._SHAPE)
        return cls(
            line_number=_line_number(line, text, cls._SHAPE),
            name=_name(name, text, cls._SHAPE),
        )

    def to_lcov(self) -> str:
        return f"{FUNCTION_DEFINITION_TAG}{self.line_number},{self.name}"


@dataclass(frozen=True, slots=True)
class FunctionHit:
    """How often a named function was called."""

    hit_count: int
    name: str

    _SHAPE = "FNDA:<hits>,<name>"

    def __post_init__(self) -> None:
        _require_non_negative("hit_count", self.hit_count)
        _require_name(self.name)

    @classmethod
    def from_lcov(cls, text: str) -> FunctionHit:
        hits, name = _fields(text, FUNCTION_HIT_TAG, 2, cls._SHAPE)
        return cls(
            hit_count=_non_negative(hits, text, cls._SHAPE),
            name=_name(name, text, cls._SHAPE),
        )

    def to_lcov(self) -> str:
        return f"{FUNCTION_HIT_TAG}{self.hit_count},{self.name}"


@dataclass(frozen=True, slots=True)
class FunctionRecord:
    """A function definition joined with its hit count."""

    line_number: int
    name: str
    hit_count: int

    def __post_init__(self) -> None:
        _require_line_number(self.line_number)
        _require_name(self.name)
        _require_non_negative("hit_count", self.hit_count)

    @property
    def is_covered(self) -> bool:
        return self.hit_count > 0

    @classmethod
    def from_lcov(cls, fn_text: str, fnda_text: str) -> FunctionRecord:
        """Join an FN line with the FNDA line for the same function.

        Raises:
            MalformedRecordError: If either line is malformed or the two
                lines name different functions.
        """
        definition = FunctionDefinition.from_lcov(fn_text)
        hit = FunctionHit.from_lcov(fnda_text)
        if definition.name != hit.name:
            raise MalformedRecordError.for_record(
                fnda_text, f"FNDA:<hits>,{definition.name} to match {fn_text!r}"
            )
        return cls.join(definition, hit.hit_count)

    @classmethod
    def join(cls, definition: FunctionDefinition, hit_count: int) -> FunctionRecord:
        return cls(line_number=definition.line_number, name=definition.name, hit_count=hit_count)

    @property
    def definition(self) -> FunctionDefinition:
        return FunctionDefinition(line_number=self.line_number, name=self.name)

    def to_lcov(self) -> tuple[str, str]:
        """Encode as the ``(FN, FNDA)`` line pair."""
        hit = FunctionHit(hit_count=self.hit_count, name=self.name)
        return self.definition.to_lcov(), hit.to_lcov()


@dataclass(frozen=True, slots=True)
class BranchRecord:
    """Outcome of one branch of one conditional block.

    A ``-`` hit token (branch never evaluated) decodes to ``hit_count=0``,
    and a zero hit count encodes back to ``-``. An evaluated-but-never-taken
    branch written as ``0`` therefore re-encodes as ``-``.
    """

    line_number: int
    block_number: int
    branch_number: int
    hit_count: int

    _SHAPE = "BRDA:<line>,<block>,<branch>,<hits or ->"

    def __post_init__(self) -> None:
        _require_line_number(self.line_number)
        _require_non_negative("block_number", self.block_number)
        _require_non_negative("branch_number", self.branch_number)
        _require_non_negative("hit_count", self.hit_count)

    @property
    def is_covered(self) -> bool:
        return self.hit_count > 0

    @classmethod
    def from_lcov(cls, text: str) -> BranchRecord:
        line, block, branch, hits = _fields(text, BRANCH_TAG, 4, cls._SHAPE)
        return cls(
            line_number=_line_number(line, text, cls._SHAPE),
            block_number=_non_negative(block, text, cls._SHAPE),
            branch_number=_non_negative(branch, text, cls._SHAPE),
            hit_count=0 if hits == BRANCH_NOT_EVALUATED else _non_negative(hits, text, cls._SHAPE),
        )

    def to_lcov(self) -> str:
        hits = BRANCH_NOT_EVALUATED if self.hit_count == 0 else str(self.hit_count)
        return f"{BRANCH_TAG}{self.line_number},{self.block_number},{self.branch_number},{hits}"
