import sys
import time

import algoKMP as algoKMP

FILE_PATH = sys.argv[1] if len(sys.argv) > 1 else "babylone.txt"

PATTERNS = [
    "Sargon",
    "Babylon",
    "Akkad",
    "the",
    "aaaaaaaaab",
    "abababababac",
]

def library_time(text, pattern):
    t0 = time.perf_counter()
    c = 0
    p = text.find(pattern)
    while p != -1:
        c += 1
        p = text.find(pattern, p + 1)
    return (time.perf_counter() - t0) * 1000.0, c

def search_time(matcher, text):
    t0 = time.perf_counter()
    c = matcher.count(text)
    return (time.perf_counter() - t0) * 1000.0, c

def main():
    try:
        with open(FILE_PATH, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    except OSError as e:
        print(f"ERROR opening {FILE_PATH}: {e}", file=sys.stderr)
        sys.exit(2)

    # cas défavorable pour une recherche naïve: beaucoup de faux départs
    worst = "a" * 200_000 + "b"

    total_kmp = 0.0
    total_lib = 0.0

    print("pattern build_ms search_ms kmp_total_ms library_ms count")
    for label, source in (("file", text), ("worst", worst)):
        print(f"# {label} ({len(source)} symboles)")
        for pat in PATTERNS:
            t0 = time.perf_counter()
            matcher = algoKMP.KMP(pat)
            build_ms = (time.perf_counter() - t0) * 1000.0

            search_ms, c = search_time(matcher, source)
            kmp_total = build_ms + search_ms
            total_kmp += kmp_total

            lib_ms, lib_c = library_time(source, pat)
            total_lib += lib_ms

            flag = "" if c == lib_c else f" MISMATCH(library={lib_c})"
            print(f"{pat} {build_ms:.2f} {search_ms:.2f} {kmp_total:.2f} {lib_ms:.2f} {c}{flag}")

    print(f"TOTAL_KMP_MS\t{total_kmp:.2f}")
    print(f"TOTAL_LIBRARY_MS\t{total_lib:.2f}")

if __name__ == "__main__":
    main()
