"""Empirical draw-frequency analysis for weight tables.

Draws a large number of samples from a WeightedSampler and compares the
observed frequency of each choice against its configured probability:
1. Draw log: one row per draw
2. Frequency table: expected vs observed per choice
3. Drift report: flags choices that drift past a tolerance, and zero-weight
   choices that were drawn at all
4. Bar chart of expected vs observed frequency

Outputs: JSON summary + CSV frequency table + matplotlib figure.

Usage:
    from tower_pinball.features import feature_table
    from tower_pinball.sampler import WeightedSampler
    from tower_pinball.analysis.draw_report import generate_report

    sampler = WeightedSampler(feature_table())
    generate_report(sampler, output_dir="reports/features", n=100_000, seed=0)
"""

import json
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..sampler import WeightedSampler


def _label(choice) -> str:
    name = getattr(choice, "name", None)
    return str(name) if name is not None else str(choice)


def collect_draws(sampler: WeightedSampler, n: int, rng) -> pd.DataFrame:
    """Draw ``n`` samples and log the index and label of each."""
    indices = np.fromiter(
        (sampler.sample_index(rng) for _ in range(n)), dtype=np.int64, count=n
    )
    labels = [_label(c) for c in sampler.choices]
    return pd.DataFrame({
        "draw": np.arange(n),
        "index": indices,
        "choice": [labels[i] for i in indices],
    })


def frequency_table(sampler: WeightedSampler, draws: pd.DataFrame) -> pd.DataFrame:
    """Expected vs observed frequency per choice, index-aligned with the sampler."""
    n = len(draws)
    counts = draws["index"].value_counts().reindex(range(len(sampler)), fill_value=0)
    df = pd.DataFrame({
        "index": np.arange(len(sampler)),
        "choice": [_label(c) for c in sampler.choices],
        "weight": sampler.weights,
        "expected": sampler.probabilities(),
        "count": counts.to_numpy(),
    })
    df["observed"] = df["count"] / n if n else 0.0
    df["drift"] = df["observed"] - df["expected"]
    return df


def compute_drift_report(freq: pd.DataFrame, tolerance: float = 0.01) -> dict:
    """Identify problems in a frequency table.

    Args:
        freq: Frequency table from frequency_table().
        tolerance: Flag choices whose absolute drift exceeds this.

    Returns:
        Dict of issue category -> list of flagged choices. Empty categories
        are dropped.
    """
    issues = {
        "drift": [],
        "zero_weight_drawn": [],
        "never_drawn": [],
    }

    for row in freq.to_dict(orient="records"):
        if row["weight"] == 0 and row["count"] > 0:
            issues["zero_weight_drawn"].append({
                "choice": row["choice"], "count": int(row["count"]),
            })
            continue

        if row["weight"] > 0 and row["count"] == 0:
            issues["never_drawn"].append({
                "choice": row["choice"], "expected": float(row["expected"]),
            })

        if abs(row["drift"]) > tolerance:
            issues["drift"].append({
                "choice": row["choice"],
                "expected": float(row["expected"]),
                "observed": float(row["observed"]),
                "drift": float(row["drift"]),
            })

    return {k: v for k, v in issues.items() if v}


def plot_draw_frequencies(freq: pd.DataFrame, output_dir, name: str = "draw_frequencies") -> str:
    """Side-by-side bars of expected and observed frequency."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    x = np.arange(len(freq))
    width = 0.4

    fig, ax = plt.subplots(figsize=(max(6, len(freq) * 0.9), 4))
    ax.bar(x - width / 2, freq["expected"], width, label="expected")
    ax.bar(x + width / 2, freq["observed"], width, label="observed")
    ax.set_xticks(x)
    ax.set_xticklabels(freq["choice"], rotation=30, ha="right")
    ax.set_ylabel("frequency")
    ax.set_title("Draw frequency")
    ax.legend()
    fig.tight_layout()

    path = output_dir / f"{name}.png"
    fig.savefig(path, dpi=100)
    plt.close(fig)
    return str(path)


def generate_report(
    sampler: WeightedSampler,
    output_dir: str | Path,
    n: int = 100_000,
    seed: int | None = None,
    tolerance: float = 0.01,
) -> dict:
    """Generate a full draw-frequency report.

    Args:
        sampler: Sampler to analyse.
        output_dir: Directory to write outputs.
        n: Number of draws.
        seed: Seed for numpy.random.default_rng.
        tolerance: Drift tolerance for the drift report.

    Returns:
        Summary dict (also saved as JSON).
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating draw report in {output_dir}/")

    rng = np.random.default_rng(seed)
    print(f"  Drawing {n} samples...")
    draws = collect_draws(sampler, n, rng)
    freq = frequency_table(sampler, draws)

    print("  Plotting draw frequencies...")
    figure = plot_draw_frequencies(freq, output_dir)

    print("  Computing drift report...")
    issues = compute_drift_report(freq, tolerance=tolerance)

    summary = {
        "table": sampler.table.name,
        "n_choices": len(sampler),
        "n_draws": n,
        "seed": seed,
        "tolerance": tolerance,
        "max_abs_drift": float(freq["drift"].abs().max()),
        "frequencies": freq[["choice", "weight", "expected", "observed"]].to_dict(orient="records"),
        "issues": issues,
        "has_issues": len(issues) > 0,
        "figures": {"draw_frequencies": figure},
    }

    summary_path = output_dir / "draw_summary.json"
    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2, default=str)
    print(f"  Summary saved to {summary_path}")

    freq_path = output_dir / "frequencies.csv"
    freq.to_csv(freq_path, index=False)
    print(f"  Frequencies saved to {freq_path}")

    print()
    print(f"=== Draw Report: {sampler.table.name} ===")
    print(f"Draws: {n} over {len(sampler)} choices")
    print(f"Max drift: {summary['max_abs_drift']:.4f}")
    if issues:
        print(f"\nIssues found ({len(issues)} categories):")
        for cat, items in issues.items():
            print(f"  {cat}: {len(items)} choices")
    else:
        print("\nNo issues detected.")

    return summary
