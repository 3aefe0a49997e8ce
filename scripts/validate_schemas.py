import json
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from jsonvalidation.schema import compile_schema  # noqa: E402

DIR = os.path.join(ROOT, "config", "schemas")


def main(strict=False):
    bad = 0
    for fn in sorted(os.listdir(DIR)):
        if not fn.endswith(".json") or fn.startswith("_"):
            continue
        try:
            with open(os.path.join(DIR, fn), encoding="utf-8") as f:
                schema = json.load(f)
        except ValueError as e:
            print("Invalid JSON:", fn, e)
            bad += 1
            continue
        result = compile_schema(schema)
        for issue in result.errors:
            print("Error:", fn, issue.pointer or "/", issue.message)
        for issue in result.warnings:
            print("Warning:", fn, issue.pointer or "/", issue.message)
        if not result.succeeded or (strict and result.warnings):
            bad += 1
    print("OK" if bad == 0 else f"{bad} invalid schemas")
    return bad


if __name__ == "__main__":
    sys.exit(1 if main(strict="--strict" in sys.argv[1:]) else 0)
