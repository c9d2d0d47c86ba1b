"""Fixed option tables for the search filters.

Index 0 of every table is the "no filter" entry; the search URL omits the
corresponding parameter while a field sits at index 0.
"""
from __future__ import annotations

from typing import Optional, Tuple

SORT_BY = (
    "Newest",
    "Oldest",
    "Popularity",
    "Positive Feedback",
    "Most Completed",
    "Least Completed",
    "Recently Published",
    "Hardest",
    "Easiest",
    "Name",
    "Low Satisfaction",
)

# (field, direction) per SORT_BY entry; "Newest" is the catalog default
SORT_KEYS: Tuple[Optional[Tuple[str, str]], ...] = (
    None,
    ("published_at", "asc"),
    ("popularity", "desc"),
    ("satisfaction_percent", "desc"),
    ("total_completed", "desc"),
    ("total_completed", "asc"),
    ("published_at", "desc"),
    ("rank_id", "desc"),
    ("rank_id", "asc"),
    ("name", "asc"),
    ("satisfaction_percent", "asc"),
)

LANGUAGES = (
    "All",
    "My Languages",
    "Agda",
    "BF",
    "C",
    "CFML",
    "Clojure",
    "COBOL",
    "CoffeeScript",
    "CommonLisp",
    "Coq",
    "C++",
    "Crystal",
    "C#",
    "D",
    "Dart",
    "Elixir",
    "Elm",
    "Erlang",
    "Factor",
    "Forth",
    "Fortran",
    "F#",
    "Go",
    "Groovy",
    "Haskell",
    "Haxe",
    "Idris",
    "Java",
    "JavaScript",
    "Julia",
    "Kotlin",
    "λ Calculus",
    "Lean",
    "Lua",
    "NASM",
    "Nim",
    "Objective-C",
    "OCaml",
    "Pascal",
    "Perl",
    "PHP",
    "PowerShell",
    "Prolog",
    "PureScript",
    "Python",
    "R",
    "Racket",
    "Raku",
    "Reason",
    "RISC-V",
    "Ruby",
    "Rust",
    "Scala",
    "Shell",
    "Solidity",
    "SQL",
    "Swift",
    "TypeScript",
    "VB",
)

# Stored as the raw index: index N is "N kyu"
DIFFICULTY = (
    "Select Ranks",
    "1 kyu",
    "2 kyu",
    "3 kyu",
    "4 kyu",
    "5 kyu",
    "6 kyu",
    "7 kyu",
    "8 kyu",
)

TAGS = (
    "Select Tags",
    "ASCII Art",
    "Algebra",
    "Algorithms",
    "Angular",
    "Arrays",
    "Artificial Intelligence",
    "Asynchronous",
    "Backend",
    "Big Integers",
    "Binary",
    "Binary Search Trees",
    "Binary Trees",
    "Bits",
    "Cellular Automata",
    "Ciphers",
    "Combinatorics",
    "Compilers",
    "Concurrency",
    "Cryptography",
    "Data Frames",
    "Data Science",
    "Data Structures",
    "Databases",
    "Date Time",
    "Debugging",
    "Decorator",
    "Design Patterns",
    "Discrete Mathematics",
    "Domain Specific Languages",
    "Dynamic Programming",
    "Esoteric Languages",
    "Event Handling",
    "Express",
    "Filtering",
    "Flask",
    "Functional Programming",
    "Fundamentals",
    "Game Solvers",
    "Games",
    "Genetic Algorithms",
    "Geometry",
    "Graph Theory",
    "Graphics",
    "Graphs",
    "Heaps",
    "Image Processing",
    "Interpreters",
    "Iterators",
    "JSON",
    "Language Features",
    "Linear Algebra",
    "Linked Lists",
    "Lists",
    "Logic",
    "Logic Programming",
    "Machine Learning",
    "Macros",
    "Mathematics",
    "Matrix",
    "Memoization",
    "Metaprogramming",
    "Monads",
    "MongoDB",
    "Networks",
    "Neural Networks",
    "NumPy",
    "Number Theory",
    "Object-oriented Programming",
    "Parsing",
    "Performance",
    "Permutations",
    "Physics",
    "Priority Queues",
    "Probability",
    "Promises",
    "Puzzles",
    "Queues",
    "React",
    "Reactive Programming",
    "Recursion",
    "Refactoring",
    "Reflection",
    "Regular Expressions",
    "Restricted",
    "Reverse Engineering",
    "Riddles",
    "RxJS",
    "SQL",
    "Scheduling",
    "Searching",
    "Security",
    "Set Theory",
    "Sets",
    "Simulation",
    "Singleton",
    "Sorting",
    "Stacks",
    "State Machines",
    "Statistics",
    "Streams",
    "Strings",
    "Theorem Proving",
    "Threads",
    "Trees",
    "Tutorials",
    "Unicode",
    "Web Scraping",
    "Web3",
)


def option_label(table: Tuple[str, ...], index: int) -> str:
    """Return the label at index, or the table's default entry when out of range."""
    if 0 <= index < len(table):
        return table[index]
    return table[0]


__all__ = ["SORT_BY", "SORT_KEYS", "LANGUAGES", "DIFFICULTY", "TAGS", "option_label"]
