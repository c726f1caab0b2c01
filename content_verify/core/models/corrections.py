"""
Correction item models for the two annotation schemas.

Correction is the legacy ``checkresultjson`` item; ChecklistItem is the
revised ``checklist`` item. Both expose the same patch view through
``position``, ``expected`` and ``replacement``.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class Correction(BaseModel):
    """
    Legacy correction item.

    Attributes:
        error_type: Error type code (errtype)
        error_word: Erroneous text as found in the marked source (errword)
        description: Reviewer description (errdesc)
        position: Byte offset of error_word in the marked-source text (pos)
        level: Severity level (level)
        candidates: Replacement candidates, first non-empty one wins (corword)
    """

    error_type: int = Field(0, alias="errtype")
    error_word: str = Field("", alias="errword")
    description: str = Field("", alias="errdesc")
    position: int = Field(-1, alias="pos")
    level: int = Field(0, alias="level")
    candidates: list[str] = Field(default_factory=list, alias="corword")

    @field_validator("candidates", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return _none_to_list(v)

    @field_validator("error_word", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def expected(self) -> str:
        return self.error_word

    @property
    def replacement(self) -> str | None:
        """First non-empty candidate, or None when nothing usable was suggested."""
        for candidate in self.candidates:
            if candidate:
                return candidate
        return None

    class Config:
        populate_by_name = True
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "errtype": 1,
                "errword": "bad",
                "errdesc": "wrong word",
                "pos": 0,
                "level": 2,
                "corword": ["good"],
            }
        }


class ChecklistItem(BaseModel):
    """
    Revised checklist item.

    Position and length are codepoint offsets into the marked-result text
    after the wrapper spans have been stripped. Only position, length, word
    and suggestions drive reconstruction; the other fields are advisory and
    kept as sent, whatever their shape.
    """

    position: int = Field(-1, validation_alias=AliasChoices("pos", "position", "start"))
    length: int = Field(0, validation_alias=AliasChoices("len", "length"))
    word: str = Field("", validation_alias=AliasChoices("word", "origin_word", "original"))
    suggestions: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("suggest", "suggestions", "replace_words"),
    )

    # advisory
    html_word: Any = Field(None, validation_alias=AliasChoices("html_word", "htmlWord"))
    html_words: Any = Field(None, validation_alias=AliasChoices("html_words", "htmlWords"))
    explanation: Any = Field(None, validation_alias=AliasChoices("explain", "explanation"))
    error_type: Any = Field(None, validation_alias=AliasChoices("error_type", "errorType"))
    context: Any = None
    source: Any = None
    level: Any = None

    @field_validator("suggestions", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return _none_to_list(v)

    @field_validator("word", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def expected(self) -> str:
        return self.word

    @property
    def replacement(self) -> str | None:
        """The first suggestion is authoritative; an empty one means no usable fix."""
        if self.suggestions and self.suggestions[0]:
            return self.suggestions[0]
        return None

    class Config:
        extra = "ignore"
