"""Enumerations shared by the config schema, the sectionizer and the generator."""

import enum


class TemplateType(str, enum.Enum):
    """Kind of raw template, selecting the front end that annotates it."""

    TEXT = "text"
    XML = "xml"


class RepetitionType(str, enum.Enum):
    """Position of a repetition literal relative to the repeated section."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


class RepetitionStyle(str, enum.Enum):
    """Which repeated instances a prefix or suffix literal applies to.

    The sectionizer never interprets the style; it is passed through to the
    assembler unchanged.
    """

    FIRST_ONLY = "firstOnly"
    LAST_ONLY = "lastOnly"
    ALL_BUT_FIRST = "allButFirst"
    ALL_BUT_LAST = "allButLast"
    ALL = "all"


class RepetitionAction(str, enum.Enum):
    """What the assembler does with the literal on the selected instances."""

    ADD = "add"
    REMOVE = "remove"


class GenerationStatus(str, enum.Enum):
    """Outcome of one generation step."""

    OK = "OK"
    ERROR = "ERROR"
