"""
Transition tables for two-state Moore-neighbourhood rules.

A table has 512 entries indexed by the 9-bit neighbourhood code 0b(abcdefghi)
where the neighbourhood is laid out as:

    adg
    beh
    cfi

so each column contributes three bits (top, middle, bottom) and the left column
sits in the high bits. Tables are stored as JSON: {"rule": ..., "transitions": [...]}.
"""
import json
import os
import re

import numpy as np

from .errors import RuleError

DEFAULT_RULE_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'default_rule.json')

CENTRE_BIT = 1 << 4

_TOTALISTIC = re.compile(r'^B([0-8]*)/?S([0-8]*)$', re.IGNORECASE)


class TransitionTable:
    def __init__(self, transitions, rule):
        """
        Args:
            transitions: sequence of 512 ints, each 0 or 1
            rule (str): rulestring written into pattern headers
        """
        table = np.asarray(transitions)
        if table.shape != (512,):
            raise RuleError(f'transition table for {rule} must have 512 entries, got {table.size}')
        if not np.isin(table, (0, 1)).all():
            raise RuleError(f'transition table for {rule} may only contain 0 and 1')
        if table[0]:
            raise RuleError(f'{rule} gives birth on an empty neighbourhood')
        self.table = table.astype(np.uint8)
        self.table.flags.writeable = False
        self.rule = rule

    def __getitem__(self, code):
        return self.table[code]

    def __eq__(self, other):
        return (isinstance(other, TransitionTable) and self.rule == other.rule
                and np.array_equal(self.table, other.table))

    def __repr__(self):
        return f'TransitionTable({self.rule!r})'

    @classmethod
    def load(cls, path):
        try:
            with open(path, 'r') as f:
                doc = json.load(f)
        except (OSError, ValueError) as e:
            raise RuleError(f'could not read rule table {path}: {e}') from e
        try:
            return cls(doc['transitions'], doc['rule'])
        except (KeyError, TypeError) as e:
            raise RuleError(f'rule table {path} needs "rule" and "transitions" keys') from e

    @classmethod
    def default(cls):
        return cls.load(DEFAULT_RULE_PATH)

    @classmethod
    def from_rulestring(cls, rulestring):
        """Build an outer-totalistic table from B/S notation such as B3/S23."""
        m = _TOTALISTIC.match(rulestring.strip())
        if not m:
            raise RuleError(f'{rulestring!r} is not an outer-totalistic B/S rulestring; '
                            'use a JSON transition table for other rules')
        birth = {int(c) for c in m.group(1)}
        survival = {int(c) for c in m.group(2)}
        transitions = []
        for code in range(512):
            neighbours = bin(code & ~CENTRE_BIT).count('1')
            if code & CENTRE_BIT:
                transitions.append(int(neighbours in survival))
            else:
                transitions.append(int(neighbours in birth))
        rule = 'B' + ''.join(sorted(m.group(1))) + '/S' + ''.join(sorted(m.group(2)))
        return cls(transitions, rule)

    def save(self, path):
        with open(path, 'w') as f:
            json.dump({'rule': self.rule, 'transitions': [int(v) for v in self.table]}, f, indent=2)
            f.write('\n')
