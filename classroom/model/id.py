from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid


class ShortUUIDKey(str):
    """A shortuuid behind a fixed prefix, e.g. `asmt$JavaScriptQuiz22222222`.

    Subclasses declare the prefix:

        class AssessmentID(ShortUUIDKey, prefix="asmt"): ...

    `AssessmentID()` draws a fresh key, `AssessmentID("asmt$...")` checks a
    prefixed string and `AssessmentID(key="...")` trusts a bare key as read
    back from storage.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str]
    length: t.ClassVar[int] = 22

    @p.validate_call
    def __init_subclass__(cls, prefix: t.Annotated[str, ant.Len(4)], separator: t.Annotated[str, ant.Len(1)] = "$"):
        super().__init_subclass__()
        cls.prefix = prefix
        cls.separator = separator

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        if key is None:
            key = shortuuid.uuid() if s is None else cls.parse(s)
        return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

    @classmethod
    def parse(cls, s: str) -> str:
        """Return the key part of the prefixed string `s`, or raise ValueError."""
        head, sep, key = s.partition(cls.separator)
        if not sep or head != cls.prefix:
            raise ValueError(f"invalid {cls.__name__}: key must begin with {cls.prefix}{cls.separator}")
        if len(key) != cls.length:
            raise ValueError(f"invalid {cls.__name__}: key must have length {cls.length}")
        if stray := set(key).difference(shortuuid.get_alphabet()):
            raise ValueError(f"invalid {cls.__name__}: {''.join(sorted(stray))!r} not in the shortuuid alphabet")
        return key

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        # instances pass through; strings go through parse() in __new__
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.to_string_ser_schema(when_used="always"),
        )

    @property
    def key(self) -> str:
        return self[len(self.prefix) + len(self.separator) :]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.key}>"


# fmt: off
class AssessmentID(ShortUUIDKey, prefix="asmt"): ...
class QuestionID(ShortUUIDKey, prefix="ques"): ...
# fmt: on
