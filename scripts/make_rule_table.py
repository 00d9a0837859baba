#!/usr/bin/env python3
"""
Write the JSON transition table for an outer-totalistic rule (e.g. B36/S23),
for use with `nrss --rule`.
"""
import os
import sys
import argparse

# ensure repo root in path for imports
script_dir = os.path.dirname(os.path.abspath(__file__))
repo_root = os.path.abspath(os.path.join(script_dir, '..'))
sys.path.insert(0, repo_root)

from nrss.errors import RuleError
from nrss.rules import TransitionTable


def main():
    parser = argparse.ArgumentParser(description='Build a transition table from a B/S rulestring')
    parser.add_argument('rulestring', type=str, help='rule in B/S notation, e.g. B3/S23')
    parser.add_argument('--out', type=str, default=None,
                        help='output JSON path (default: <rule>.json in the current directory)')
    args = parser.parse_args()

    try:
        table = TransitionTable.from_rulestring(args.rulestring)
    except RuleError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    out = args.out or table.rule.replace('/', '_') + '.json'
    table.save(out)
    print(f"Saved transition table for {table.rule} to {out}")


if __name__ == '__main__':
    main()
