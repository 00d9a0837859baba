#!/usr/bin/env python3
"""
Plot the speeds recorded in one or more NRSS state files as displacement vs period,
and write them to a CSV.
"""
import os
import sys
import csv
import argparse
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# ensure repo root in path for imports
script_dir = os.path.dirname(os.path.abspath(__file__))
repo_root = os.path.abspath(os.path.join(script_dir, '..'))
sys.path.insert(0, repo_root)

from nrss.errors import LedgerError
from nrss.ledger import Ledger


def main():
    parser = argparse.ArgumentParser(description='Plot discovered NRSS speeds')
    parser.add_argument('state_files', nargs='+', help='NRSS state files')
    parser.add_argument('--out_fig', type=str, default='nrss_speeds.png', help='output scatter plot')
    parser.add_argument('--out_csv', type=str, default=None, help='optional CSV of (file, dx, period, speed)')
    args = parser.parse_args()

    fig, ax = plt.subplots(figsize=(8, 6))
    rows = []
    for path in args.state_files:
        ledger = Ledger(path)
        try:
            ledger.load()
        except LedgerError as e:
            print(e, file=sys.stderr)
            sys.exit(1)
        if not ledger.speeds:
            print(f"{path}: no speeds recorded")
            continue
        dx = np.array([s.dx for s in ledger.speeds])
        period = np.array([s.period for s in ledger.speeds])
        ax.scatter(period, dx, label=f"{os.path.basename(path)} ({len(ledger)})", s=20)
        for s in ledger.speeds:
            rows.append([path, s.dx, s.period, f"{s.dx / s.period:.6f}"])
    if not rows:
        print("Nothing to plot")
        return

    # lines of constant speed for reference
    pmax = max(r[2] for r in rows)
    p = np.linspace(1, pmax, 100)
    for frac in (1/2, 1/3, 1/4):
        ax.plot(p, p * frac, color='grey', linewidth=0.5, linestyle='--')
        ax.text(pmax, pmax * frac, f"c/{round(1/frac)}", fontsize=8, va='bottom', ha='right')
    ax.set_xlabel('Period')
    ax.set_ylabel('Displacement per period (cells)')
    ax.set_title('Discovered NRSS speeds')
    ax.legend()
    plt.tight_layout()
    fig.savefig(args.out_fig)
    plt.close(fig)
    print(f"Saved speed plot to: {args.out_fig}")

    if args.out_csv:
        with open(args.out_csv, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['state_file', 'dx', 'period', 'speed'])
            writer.writerows(rows)
        print(f"Saved speeds CSV to: {args.out_csv}")


if __name__ == '__main__':
    main()
