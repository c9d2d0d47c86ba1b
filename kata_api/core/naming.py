"""Naming conventions for the kata client.

Provides directory slugs for downloaded katas, the language -> file
extension table used when writing sources, and the language -> search path
segment mapping used in search URLs.
"""
from __future__ import annotations

import re

# Search path segments that do not follow the lowercase-and-hyphenate rule
LANGUAGE_PATH_EXCEPTIONS = {
    "All": "",
    "C++": "cpp",
    "C#": "csharp",
    "F#": "fsharp",
    "Objective-C": "objc",
    "λ Calculus": "lambdacalc",
    "RISC-V": "riscv",
}

# Keyed by the catalog's language identifiers (data-language values)
LANGUAGE_EXTENSIONS = {
    "agda": ".agda",
    "bf": ".b",
    "c": ".c",
    "cfml": ".cfc",
    "clojure": ".clj",
    "cobol": ".cob",
    "coffeescript": ".coffee",
    "commonlisp": ".lisp",
    "coq": ".v",
    "cpp": ".cpp",
    "crystal": ".cr",
    "csharp": ".cs",
    "d": ".d",
    "dart": ".dart",
    "elixir": ".ex",
    "elm": ".elm",
    "erlang": ".erl",
    "factor": ".factor",
    "forth": ".fth",
    "fortran": ".f90",
    "fsharp": ".fs",
    "go": ".go",
    "groovy": ".groovy",
    "haskell": ".hs",
    "haxe": ".hx",
    "idris": ".idr",
    "java": ".java",
    "javascript": ".js",
    "julia": ".jl",
    "kotlin": ".kt",
    "lambdacalc": ".lc",
    "lean": ".lean",
    "lua": ".lua",
    "nasm": ".asm",
    "nim": ".nim",
    "objc": ".m",
    "ocaml": ".ml",
    "pascal": ".pas",
    "perl": ".pl",
    "php": ".php",
    "powershell": ".ps1",
    "prolog": ".pl",
    "purescript": ".purs",
    "python": ".py",
    "r": ".r",
    "racket": ".rkt",
    "raku": ".raku",
    "reason": ".re",
    "riscv": ".s",
    "ruby": ".rb",
    "rust": ".rs",
    "scala": ".scala",
    "shell": ".sh",
    "solidity": ".sol",
    "sql": ".sql",
    "swift": ".swift",
    "typescript": ".ts",
    "vb": ".vb",
}


def slugify(name: str) -> str:
    """Build a directory name from a display name.

    Letters are kept, spaces become hyphens, everything else is dropped.

    Args:
        name: Kata display name

    Returns:
        Filesystem-safe slug (may be empty for names without letters)
    """
    if not name:
        return ""
    out = []
    for ch in str(name):
        if ch == " ":
            out.append("-")
        elif ch.isalpha():
            out.append(ch)
    return "".join(out)


def to_snake_case(value: str) -> str:
    """Convert arbitrary string to snake_case: lowercase, alnum + underscores only."""
    if value is None:
        return ""
    s = re.sub(r"[^0-9A-Za-z]+", "_", str(value))
    s = re.sub(r"_+", "_", s)
    return s.strip("_").lower()


def get_extension(language: str) -> str:
    """Return the source file extension for a language, or "" when unknown."""
    if not language:
        return ""
    return LANGUAGE_EXTENSIONS.get(language.strip().lower(), "")


def language_path_segment(label: str) -> str:
    """Map a language option label to its search URL path segment.

    Args:
        label: Entry from the language option table (e.g., "C++", "Common Lisp")

    Returns:
        Path segment ("" for "All")
    """
    if label in LANGUAGE_PATH_EXCEPTIONS:
        return LANGUAGE_PATH_EXCEPTIONS[label]
    return label.lower().strip().replace(" ", "-")


__all__ = [
    "LANGUAGE_EXTENSIONS",
    "LANGUAGE_PATH_EXCEPTIONS",
    "get_extension",
    "language_path_segment",
    "slugify",
    "to_snake_case",
]
