"""Shared constant values for the vt front end."""

import os

SOURCE_SUFFIX = ".vt"
IMAGE_SUFFIX = ".vt.json"
SOURCE_ENCODING = "utf-8"
IMAGE_VERSION = "0.1"

ENTRY_METHOD = 0

EXTEND_PREFIX = ";e"
USE_PREFIX = ";u"

LITERAL_CATEGORY = "literal"

CATEGORIES = [
    "control",
    "addressing",
    "quote",
    "io",
    "stack",
    "variable",
    "math",
    "call",
    "system",
    "literal",
]

CATEGORY_COLORS = {
    "control": "#90CAF9",
    "addressing": "#80CBC4",
    "quote": "#FFE082",
    "io": "#FF7043",
    "stack": "#C5E1A5",
    "variable": "#F8BBD0",
    "math": "#8BC34A",
    "call": "#B39DDB",
    "system": "#9575CD",
    "literal": "#FFAB91",
}

# Order matters: the first entry for a character wins when decoding.
OPCODES = [
    (")", "IF_NOT", "control"),
    ("(", "IF", "control"),
    ("[", "BEGIN_BLOCK", "control"),
    ("]", "END_BLOCK", "control"),
    ("\\", "REPEAT", "control"),
    (";", "END", "control"),
    ("x", "EXIT", "control"),
    ("#", "TELEPORT", "addressing"),
    ("<", "MOVE_LEFT", "addressing"),
    (">", "MOVE_RIGHT", "addressing"),
    ('"', "DOUBLE_QUOTE", "quote"),
    ("'", "SINGLE_QUOTE", "quote"),
    ("m", "CALL_METHOD", "call"),
    ("i", "INPUT", "io"),
    ("I", "INPUT_LENGTH", "io"),
    ("l", "LENGTH", "io"),
    ("z", "GET_ALL_INPUT", "io"),
    ("Z", "OUTPUT_ALL", "io"),
    ("O", "OUTPUT_CHAR", "io"),
    ("N", "OUTPUT_NUMERIC", "io"),
    ("W", "GET_LINE", "io"),
    ("$", "SWITCH", "control"),
    ("%", "MULTI_SWITCH", "control"),
    ("}", "ROTATE_RIGHT", "stack"),
    ("{", "ROTATE_LEFT", "stack"),
    ("r", "REVERSE", "stack"),
    ("@", "PART", "stack"),
    ("D", "DUPLICATE", "stack"),
    ("X", "REMOVE", "stack"),
    ("o", "OBJECT", "stack"),
    ("&", "NEW_STACK", "stack"),
    ("Y", "REMOVE_STACK", "stack"),
    (":", "CLONE_STACK", "stack"),
    ("?", "RIGHT_STACK", "stack"),
    ("|", "LEFT_STACK", "stack"),
    ("u", "FLATTEN", "stack"),
    ("y", "STACK_COUNT", "stack"),
    ("v", "TEMPORARY_VARIABLE", "variable"),
    ("V", "FINAL_VARIABLE", "variable"),
    ("S", "SINE", "math"),
    ("s", "ARCSINE", "math"),
    ("T", "TANGENT", "math"),
    ("t", "ARCTANGENT", "math"),
    ("C", "COSINE", "math"),
    ("s", "ARCCOSINE", "math"),
    ("P", "PI", "math"),
    ("E", "E", "math"),
    ("L", "LOG", "math"),
    ("R", "RANDOM", "math"),
    ("+", "ADD", "math"),
    ("-", "SUBTRACT", "math"),
    ("*", "MULTIPLY", "math"),
    ("/", "DIVIDE", "math"),
    ("^", "POWER", "math"),
    ("=", "EQUALS", "math"),
    ("M", "MODULO", "math"),
    ("_", "TRUNCATE", "math"),
    ("h", "FACTORIZE", "math"),
    ("p", "PRIME", "math"),
    ("H", "RANGE", "math"),
    ("k", "CALL_PROGRAM_METHOD", "call"),
    ("K", "CALL_SHORT_PROGRAM_METHOD", "call"),
    ("g", "USE_COUNT", "call"),
    ("G", "USE_NAME", "call"),
    ("w", "WAIT", "system"),
    ("`", "FILE", "system"),
    (".", "WRITE", "system"),
    (",", "SHELL", "system"),
    ("n", "EVAL", "system"),
]

HEX_DIGITS = "0123456789abcdef"
VALUE_RANGE = range(16)

FILENAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    ".-_/" + os.sep
)

__all__ = [
    "SOURCE_SUFFIX",
    "IMAGE_SUFFIX",
    "SOURCE_ENCODING",
    "IMAGE_VERSION",
    "ENTRY_METHOD",
    "EXTEND_PREFIX",
    "USE_PREFIX",
    "LITERAL_CATEGORY",
    "CATEGORIES",
    "CATEGORY_COLORS",
    "OPCODES",
    "HEX_DIGITS",
    "VALUE_RANGE",
    "FILENAME_CHARS",
]
