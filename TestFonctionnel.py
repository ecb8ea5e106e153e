import sys
import subprocess

import algoKMP as algoKMP

FILE_PATH = sys.argv[1] if len(sys.argv) > 1 else "babylone.txt"

PATTERNS = [
    "Sargon",
    "Babylon",
    "Akkad",
    "Assyria",
    "the",
    "aa",
    "e, ",
]

def run_custom(pattern: str, file_path: str):
    matcher = algoKMP.KMP(pattern)
    out = []
    with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
        for raw in f:
            line = raw.rstrip("\n")
            if matcher.find(line) != algoKMP.NOT_FOUND:
                out.append(line)
    return out

def find_grep_cmd():
    for cmd in (["fgrep"], ["grep", "-F"]):
        try:
            subprocess.run(cmd + ["--version"], capture_output=True)
            return cmd
        except OSError:
            pass
    print("ERROR: ni 'fgrep' ni 'grep -F' trouvés.", file=sys.stderr)
    sys.exit(3)

def run_grep(pattern: str, file_path: str, grep_cmd):
    res = subprocess.run(
        grep_cmd + ["--", pattern, file_path],
        capture_output=True, text=True, encoding="utf-8", errors="ignore"
    )
    if res.returncode not in (0, 1):
        print(f"ERROR pattern={pattern!r} -> {res.stderr.strip()}", file=sys.stderr)
    return [ln.rstrip("\n") for ln in res.stdout.splitlines()]

def check_text(pattern: str, text: str):
    """Compare premier indice et comptage avec str.find sur tout le fichier."""
    problems = []
    got = algoKMP.find_first(text, pattern)
    want = text.find(pattern)
    if got != want:
        problems.append(f"find_first={got} str.find={want}")

    brute = 0
    p = text.find(pattern)
    while p != -1:
        brute += 1
        p = text.find(pattern, p + 1)
    c = algoKMP.count_occurrences(text, pattern)
    if c != brute:
        problems.append(f"count_occurrences={c} attendu={brute}")
    return problems

def show_diff(title, lines, limit=5):
    if not lines:
        print(f"  {title}: (rien)")
        return
    print(f"  {title}: {len(lines)} ligne(s) (max {limit} affichées)")
    for i, ln in enumerate(sorted(lines)):
        if i >= limit:
            print("    ...")
            break
        print(f"    {ln}")

def main():
    try:
        with open(FILE_PATH, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    except OSError as e:
        print(f"ERROR: impossible d'ouvrir {FILE_PATH}: {e}", file=sys.stderr)
        sys.exit(2)

    grep_cmd = find_grep_cmd()

    all_ok = True

    for pat in PATTERNS:
        print(f"MOTIF : {pat!r}")
        customResult = run_custom(pat, FILE_PATH)
        grepResult = run_grep(pat, FILE_PATH, grep_cmd)

        setCustomResult = set(customResult)
        setGrepResult = set(grepResult)

        posDiff = setCustomResult - setGrepResult
        negDiff = setGrepResult - setCustomResult
        problems = check_text(pat, text)

        if not posDiff and not negDiff and not problems:
            print("OK✅")
        else:
            all_ok = False
            print("PAS OK❌")
            if posDiff or negDiff:
                print("Différences:")
                show_diff("KMP ", posDiff)
                show_diff("GREP", negDiff)
            for pb in problems:
                print(f"  {pb}")

        print("-" * 50)

    sys.exit(0 if all_ok else 1)

if __name__ == "__main__":
    main()
