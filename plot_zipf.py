from __future__ import annotations

import matplotlib
import matplotlib.pyplot as plt

from doctypes import InvalidInputError, RankedEntry
from ranker import zipf_expected


def plot_rank_frequency(
    ranking: list[RankedEntry],
    loglog: bool = True,
    output_path: str | None = None,
    title: str = 'Rank-frequency distribution',
) -> matplotlib.figure.Figure:
    """Plot word counts against their ranks with the ideal Zipf curve C / r.

    Arguments:
        ranking: output of ranker.rank
        loglog: if set to true, use logarithmic axes
        output_path: path to save the figure (shown interactively if None)
        title: figure title
    Returns:
        the matplotlib figure
    """
    if not ranking:
        raise InvalidInputError('cannot plot an empty ranking')
    ranks = [entry.rank for entry in ranking]
    counts = [entry.count for entry in ranking]

    fig, ax = plt.subplots(figsize=(8, 6))
    if loglog:
        ax.loglog(ranks, counts, label='Corpus')
        ax.loglog(ranks, zipf_expected(ranking), linestyle='--', label='Zipf: C / r')
    else:
        ax.plot(ranks, counts, label='Corpus')
        ax.plot(ranks, zipf_expected(ranking), linestyle='--', label='Zipf: C / r')
    ax.set_xlabel('Rank')
    ax.set_ylabel('Frequency')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, which='major', linestyle='--', alpha=0.6)
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path)
    else:
        plt.show()
    return fig
