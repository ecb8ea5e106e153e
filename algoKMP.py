# algoKMP.py

from typing import Iterator, List, Sequence, Tuple, TypeVar

S = TypeVar("S", bound=Sequence)

NOT_FOUND = -1


# =======================
#   ERREURS
# =======================
class KMPError(ValueError):
    """Erreur d'entrée des opérations KMP."""


class EmptyPattern(KMPError):
    def __init__(self, message: str = "Motif vide: un motif non vide est requis"):
        super().__init__(message)


class EmptyInput(KMPError):
    def __init__(self, message: str = "Entrée vide: la chaîne doit être non vide"):
        super().__init__(message)


class SourceTooLong(KMPError):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Source too long. Must be < {limit}")


class UnknownEncoding(KMPError):
    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Encodage inconnu: {encoding}")


# =======================
#   FONCTION D'ÉCHEC
# =======================
def build_failure_function(pattern: Sequence) -> List[int]:
    """
    Calcule la fonction d'échec du motif b_1...b_m.

    f[i] (1 <= i <= m) est la longueur du plus long préfixe propre de
    pattern[:i] qui en est aussi un suffixe. La liste a m + 1 cases,
    f[0] n'est jamais utilisé (vaut 0).

    Après un caractère faux, on ne repart pas de zéro: les derniers
    caractères reçus peuvent encore former un début du motif, et f dit
    exactement de combien d'avance on dispose.
    """
    m = len(pattern)
    if m == 0:
        raise EmptyPattern()

    f = [0] * (m + 1)
    t = 0  # longueur du préfixe valide courant

    for s in range(1, m):
        # Seules les longueurs f(t), f(f(t)), ... peuvent encore convenir.
        # t = f[t] est exécuté au plus m - 1 fois en tout: O(m).
        while t > 0 and pattern[s] != pattern[t]:
            t = f[t]
        if pattern[s] == pattern[t]:
            t += 1
        f[s + 1] = t
    return f


# =======================
#   RECHERCHE
# =======================
def _scan(text: Sequence, pattern: Sequence, f: Sequence[int], start: int = 0) -> Iterator[int]:
    """Parcourt text une seule fois et produit l'indice de début de chaque occurrence."""
    m = len(pattern)
    s = 0  # état de l'automate: nombre de symboles du motif reconnus

    for i in range(start, len(text)):
        c = text[i]
        while s > 0 and c != pattern[s]:
            s = f[s]
        if c == pattern[s]:
            s += 1
        if s == m:
            yield i - m + 1
            s = f[s]  # on ne remet pas s à 0: les chevauchements comptent


def _start_index(text: Sequence, start: int) -> int:
    """Ramène start dans [0, len(text)] comme un découpage text[start:]."""
    n = len(text)
    if start < 0:
        start += n
    return min(max(start, 0), n)


def find_first(text: Sequence, pattern: Sequence, start: int = 0) -> int:
    """
    Indice de la première occurrence de pattern dans text à partir de start,
    ou -1 (comme str.find). Un start négatif compte depuis la fin du texte.
    """
    f = build_failure_function(pattern)
    return next(_scan(text, pattern, f, _start_index(text, start)), NOT_FOUND)


def count_occurrences(text: Sequence, pattern: Sequence) -> int:
    """Nombre d'occurrences de pattern dans text, chevauchements compris ("aa" dans "aaaa" -> 3)."""
    f = build_failure_function(pattern)
    return sum(1 for _ in _scan(text, pattern, f))


def kmp_search(text: Sequence, pattern: Sequence) -> List[int]:
    """
    Retourne la liste des indices de début d'occurrence de 'pattern' dans 'text'
    (occurrences chevauchantes comprises).
    """
    f = build_failure_function(pattern)
    return list(_scan(text, pattern, f))


def iter_matches(text: Sequence, pattern: Sequence) -> Iterator[int]:
    """Comme kmp_search, mais produit les indices au fil du parcours."""
    f = build_failure_function(pattern)
    return _scan(text, pattern, f)


class KMP:
    """
    Motif compilé: la fonction d'échec est construite une fois (O(m)) puis
    réutilisée pour chaque texte (O(n) par parcours). Elle est stockée dans
    un tuple et jamais modifiée, un même objet peut donc servir à plusieurs
    parcours en parallèle. Un motif autre que str ou bytes est copié dans
    un tuple pour qu'il ne puisse plus changer après la compilation.
    """

    def __init__(self, pattern: Sequence):
        if not isinstance(pattern, (str, bytes)):
            pattern = tuple(pattern)
        self.pattern = pattern
        self.failure: Tuple[int, ...] = tuple(build_failure_function(pattern))

    def __len__(self) -> int:
        return len(self.pattern)

    def __repr__(self) -> str:
        return f"KMP({self.pattern!r})"

    def find(self, text: Sequence, start: int = 0) -> int:
        return next(_scan(text, self.pattern, self.failure, _start_index(text, start)), NOT_FOUND)

    def finditer(self, text: Sequence) -> Iterator[int]:
        return _scan(text, self.pattern, self.failure)

    def search_all(self, text: Sequence) -> List[int]:
        return list(self.finditer(text))

    def count(self, text: Sequence) -> int:
        return sum(1 for _ in self.finditer(text))


# =======================
#   PLUS COURT PRÉFIXE RÉPÉTÉ
# =======================
def shortest_repeating_prefix(s: S) -> S:
    """
    Plus court préfixe t tel que s = t^k (k >= 1), ou s lui-même.

    La longueur de t fait forcément partie de la chaîne f(n), f(f(n)), ...
    Chaque candidat u qui divise n est vérifié en reconstruisant
    s[:u] * (n // u): la divisibilité seule ne prouve rien.
    """
    n = len(s)
    if n == 0:
        raise EmptyInput()

    f = build_failure_function(s)
    best = n
    u = f[n]
    while u > 0:
        if n % u == 0 and s[:u] * (n // u) == s:
            best = u  # la chaîne est décroissante: le dernier retenu est le plus court
        u = f[u]
    return s[:best]


# =======================
#   AFFICHAGE
# =======================
def highlight(text: str, starts: List[int], m: int) -> str:
    """
    Retourne une version du texte avec les occurrences encadrées par [ ].
    Les occurrences qui se chevauchent sont fusionnées dans un seul bloc.
    """
    if not starts:
        return text
    spans: List[Tuple[int, int]] = []
    for s in sorted(starts):
        if spans and s < spans[-1][1]:
            spans[-1] = (spans[-1][0], max(spans[-1][1], s + m))
        else:
            spans.append((s, s + m))

    parts = []
    last = 0
    for a, b in spans:
        parts.append(text[last:a])
        parts.append("[" + text[a:b] + "]")
        last = b
    parts.append(text[last:])
    return "".join(parts)


def locate(text: str, index: int) -> Tuple[int, int, str]:
    """(numéro de ligne à partir de 1, colonne, contenu de la ligne) de l'indice donné."""
    line_start = text.rfind("\n", 0, index) + 1
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)
    line_no = text.count("\n", 0, index) + 1
    return line_no, index - line_start, text[line_start:line_end]


def format_failure_function(pattern: Sequence, f: Sequence[int]) -> str:
    lines = [f"Failure function for {pattern}:"]
    for i in range(1, len(pattern) + 1):
        lines.append(f"f[{i}] = {f[i]}")
    return "\n".join(lines)


def pretty_print_failure(pattern: str, f: List[int]) -> None:
    print("Motif :", repr(pattern))
    print("Index :", " ".join(f"{i:>2}" for i in range(1, len(pattern) + 1)))
    print("Chars :", " ".join(f"{c:>2}" for c in pattern))
    print("f     :", " ".join(f"{v:>2}" for v in f[1:]))
    print()


def demo() -> None:
    # Démo rapide
    text = "Pony Tracks"
    tests = ["Chihuahua", "Pizzi", "Pepperoni", "Pizza", "Poppers", "Pony", "rack"]

    print("Texte :", repr(text))
    print()

    for pat in tests:
        f = build_failure_function(pat)
        occ = kmp_search(text, pat)
        pretty_print_failure(pat, f)
        if occ:
            print(f"→ {pat!r} trouvé aux positions {occ}")
            print("   ", highlight(text, occ, len(pat)))
        else:
            print(f"→ {pat!r} introuvable dans le texte.")
        print(f"   plus court préfixe répété : {shortest_repeating_prefix(pat)!r}")
        print("-" * 60)


if __name__ == "__main__":
    demo()
