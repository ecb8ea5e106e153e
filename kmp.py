#!/usr/bin/env python3
"""
kmp: cherche la première occurrence de <target> dans l'entrée standard avec
l'algorithme de Knuth-Morris-Pratt et indique où elle se trouve.

Référence: Knuth, D.E., J.H. Morris, and V.R. Pratt, "Fast pattern matching
in strings", SIAM J. Computing, 6:2, 323-350.
"""
import io
import codecs
import os
import sys
import argparse
from typing import List, Optional, TextIO

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from algoKMP import (
    KMP,
    EmptyPattern,
    KMPError,
    NOT_FOUND,
    SourceTooLong,
    UnknownEncoding,
    format_failure_function,
    highlight,
    locate,
    shortest_repeating_prefix,
)

load_dotenv()

VERSION = "1.1"
PROGNAME = "kmp"
DEFAULT_MAX_SOURCE = 16384
DEFAULT_ENCODING = "utf-8"


# =======================
#   MODELS
# =======================
class MatchSpan(BaseModel):
    start: int
    end: int
    text: str


class SearchReport(BaseModel):
    target: str
    engine: str = Field(..., description="'kmp' ou 'library' (str.find)")
    found: bool
    index: int = Field(NOT_FOUND, description="Indice de la première occurrence, -1 si absente")
    line: Optional[int] = Field(None, description="Numéro de ligne (à partir de 1)")
    column: Optional[int] = None
    line_text: Optional[str] = None
    matches: List[MatchSpan] = Field(default_factory=list)


class CountReport(BaseModel):
    target: str
    engine: str
    count: int = Field(..., description="Occurrences, chevauchements compris")


class FailureReport(BaseModel):
    target: str
    failure: List[int] = Field(..., description="f[1..m]")


class RepeatReport(BaseModel):
    target: str
    prefix: str
    repetitions: int


# =======================
#   MOTEURS
# =======================
class LibrarySearch:
    """Même interface que KMP, mais avec str.find (utile pour comparer les temps)."""

    def __init__(self, pattern: str):
        if not pattern:
            raise EmptyPattern()
        self.pattern = pattern

    def find(self, text: str, start: int = 0) -> int:
        return text.find(self.pattern, start)

    def search_all(self, text: str) -> List[int]:
        out = []
        p = self.find(text)
        while p != NOT_FOUND:
            out.append(p)
            p = self.find(text, p + 1)
        return out

    def count(self, text: str) -> int:
        return len(self.search_all(text))


def make_engine(target: str, library: bool):
    return LibrarySearch(target) if library else KMP(target)


# =======================
#   CLI
# =======================
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog=PROGNAME,
        description="Lit l'entrée standard et cherche la première occurrence de target "
                    "(Knuth-Morris-Pratt). Affiche où elle a été trouvée.",
    )
    p.add_argument("target", help="Chaîne à chercher")
    p.add_argument("-v", "--version", action="version", version=VERSION)
    p.add_argument("-l", dest="library", action="store_true",
                   help="Utilise str.find au lieu de KMP (utile pour les benchmarks)")
    p.add_argument("-f", dest="failure", action="store_true",
                   help="Affiche la fonction d'échec de target et termine")
    p.add_argument("-r", dest="repeat", action="store_true",
                   help="Affiche le plus court préfixe répété de target et termine")
    p.add_argument("-n", dest="count", action="store_true",
                   help="Compte les occurrences (chevauchantes) de target dans la source")
    p.add_argument("-a", dest="all", action="store_true",
                   help="Liste toutes les occurrences et affiche la source surlignée")
    p.add_argument("--json", action="store_true", help="Sortie JSON")
    p.add_argument(
        "--max-source",
        type=int,
        default=int(os.getenv("KMP_MAX_SOURCE", str(DEFAULT_MAX_SOURCE))),
        help=f"Taille maximale de la source, 0 = illimitée (def: {DEFAULT_MAX_SOURCE}) [env: KMP_MAX_SOURCE]",
    )
    p.add_argument(
        "--encoding",
        default=os.getenv("KMP_ENCODING", DEFAULT_ENCODING),
        help=f"Encodage de l'entrée standard (def: {DEFAULT_ENCODING}) [env: KMP_ENCODING]",
    )
    p.add_argument("--verbose", action="store_true", help="Messages de progression sur stderr")
    return p.parse_args(argv)


def read_source(stream: TextIO, max_source: int, encoding: str = DEFAULT_ENCODING) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise UnknownEncoding(encoding) from None
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding=encoding, errors="ignore")
    source = stream.read()
    if max_source > 0 and len(source) >= max_source:
        raise SourceTooLong(max_source)
    return source


def _emit(report: BaseModel, as_json: bool, text: str) -> None:
    print(report.model_dump_json(indent=2) if as_json else text)


def run_failure(target: str, as_json: bool) -> int:
    engine = KMP(target)
    report = FailureReport(target=target, failure=list(engine.failure[1:]))
    _emit(report, as_json, format_failure_function(target, engine.failure))
    return 0


def run_repeat(target: str, as_json: bool) -> int:
    prefix = shortest_repeating_prefix(target)
    report = RepeatReport(target=target, prefix=prefix, repetitions=len(target) // len(prefix))
    _emit(report, as_json, prefix)
    return 0


def run_count(engine, source: str, target: str, engine_name: str, as_json: bool) -> int:
    c = engine.count(source)
    report = CountReport(target=target, engine=engine_name, count=c)
    _emit(report, as_json, f"Target '{target}' found {c} times in source.")
    return 0


def run_all(engine, source: str, target: str, engine_name: str, as_json: bool) -> int:
    starts = engine.search_all(source)
    m = len(target)
    report = SearchReport(
        target=target,
        engine=engine_name,
        found=bool(starts),
        index=starts[0] if starts else NOT_FOUND,
        matches=[MatchSpan(start=s, end=s + m, text=source[s:s + m]) for s in starts],
    )
    if starts:
        text = f"target = {target}\nfound at {starts}\n{highlight(source, starts, m)}"
    else:
        text = f"target = {target}\nNot found in source"
    _emit(report, as_json, text)
    return 0 if starts else 1


def run_search(engine, source: str, target: str, engine_name: str, as_json: bool) -> int:
    p = engine.find(source)
    if p == NOT_FOUND:
        report = SearchReport(target=target, engine=engine_name, found=False)
        _emit(report, as_json, f"target = {target}\nNot found in source")
        return 1

    line_no, col, line = locate(source, p)
    m = len(target)
    report = SearchReport(
        target=target,
        engine=engine_name,
        found=True,
        index=p,
        line=line_no,
        column=col,
        line_text=line,
        matches=[MatchSpan(start=p, end=p + m, text=source[p:p + m])],
    )
    out = [f"target = {target}"]
    # on n'affiche pas les lignes qui précèdent celle de l'occurrence
    if line_no > 1:
        out.append(f"...line {line_no}:")
    out.append(line)
    out.append(" " * col + "^" * m)
    _emit(report, as_json, "\n".join(out))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    target = args.target

    try:
        if args.repeat:
            return run_repeat(target, args.json)
        if args.failure:
            return run_failure(target, args.json)

        engine_name = "library" if args.library else "kmp"
        engine = make_engine(target, args.library)

        source = read_source(sys.stdin, args.max_source, args.encoding)
        if args.verbose:
            print(f"[{PROGNAME}] source lue: {len(source)} symboles, moteur {engine_name}", file=sys.stderr)

        if args.count:
            return run_count(engine, source, target, engine_name, args.json)
        if args.all:
            return run_all(engine, source, target, engine_name, args.json)
        return run_search(engine, source, target, engine_name, args.json)
    except KMPError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
