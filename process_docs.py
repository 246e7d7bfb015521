from __future__ import annotations

import time

import pandas as pd

from doctypes import InvalidInputError, RankedEntry
from engine import FrequencyRanker
from ranker import fit_zipf_exponent
from util import (get_docs_size, load_stopwords, print_ranking, read_docs,
                  tokenize_docs)


def save_ranking(ranking: list[RankedEntry], meaningful: list[int], path: str):
    keep = set(meaningful)
    df = pd.DataFrame({
        'rank': [entry.rank for entry in ranking],
        'word': [entry.word for entry in ranking],
        'count': [entry.count for entry in ranking],
        'meaningful': [entry.rank in keep for entry in ranking],
    })
    df.to_csv(path, index=False)


def main(
    input_path: str = 'files/speeches.csv',
    output_path: str | None = None,
    lang: str = 'en',
    min_frequency: int = 10,
    lowercase: bool = False,
    strip_punctuation: bool = False,
    plot_path: str | None = None,
    loglog: bool = True,
    topk: int = 20,
):
    """Rank the words of a collection of speeches by frequency.

    Arguments:
        input_path: path to load input file (must be .csv or .json format)
        output_path: path to save the ranking as .csv (not saved if None)
        lang: language tag of the stop-word list (no stop-words if empty)
        min_frequency: words with a lower count are outside the meaningful range
        lowercase: if set to true, fold tokens to lowercase
        strip_punctuation: if set to true, strip punctuation around tokens
        plot_path: path to save the rank-frequency plot (not plotted if None)
        loglog: if set to true, plot with logarithmic axes
        topk: number of top ranked words to print
    """
    docs = read_docs(input_path)
    if not docs:
        raise InvalidInputError(f'{input_path} contains no documents')
    docs_size = get_docs_size(input_path)
    print(f'read {input_path} with {len(docs)} rows @ {docs_size/1e6:.1f}MB')

    print('start ranking...')
    start = time.time()

    docs = tokenize_docs(docs, lowercase, strip_punctuation)
    stopwords = load_stopwords(lang) if lang else frozenset()
    ranker = FrequencyRanker(docs, stopwords)
    vocabulary = ranker.vocabulary()
    ranking = ranker.rank()
    meaningful = ranker.meaningful_range(min_frequency)

    end = time.time()
    time_taken = end - start
    time_taken = f'{time_taken // 60:.0f}m{time_taken % 60:.0f}s'
    print(f'ranking completed in {time_taken}')

    print(f'tokens: {sum(vocabulary.values())}, types: {len(vocabulary)}, '
          f'TTR: {ranker.type_token_ratio():.4f}')
    if len(ranking) > 1:
        print(f'zipf exponent: {fit_zipf_exponent(ranking):.3f}')
    print(f'meaningful range: {len(meaningful)} of {len(ranking)} words '
          f'(min frequency {min_frequency}, stop-words: {lang or "none"})')
    print_ranking(ranking, topk, set(meaningful))

    if output_path is not None:
        save_ranking(ranking, meaningful, output_path)
        print(f'ranking saved at {output_path}')

    if plot_path is not None:
        import matplotlib.pyplot as plt
        from plot_zipf import plot_rank_frequency
        fig = plot_rank_frequency(ranking, loglog=loglog, output_path=plot_path)
        plt.close(fig)
        print(f'plot saved at {plot_path}')


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(
        description='Rank the words of a collection of speeches by frequency.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        '-i', '--in', default='files/speeches.csv',
        help='path to load input file (must be .csv or .json format)',
        metavar='PATH', dest='input_path')
    parser.add_argument(
        '-o', '--out', default=None,
        help='path to save the ranking as .csv',
        metavar='PATH', dest='output_path')
    parser.add_argument(
        '-l', '--lang', default='en',
        help='language tag of the stop-word list',
        metavar='LANG', dest='lang')
    parser.add_argument(
        '-m', '--min-frequency', default=10, type=int,
        help='words with a lower count are outside the meaningful range',
        metavar='N', dest='min_frequency')
    parser.add_argument(
        '--lowercase', action='store_true',
        help='if set, fold tokens to lowercase',
        dest='lowercase')
    parser.add_argument(
        '--strip-punctuation', action='store_true',
        help='if set, strip punctuation around tokens',
        dest='strip_punctuation')
    parser.add_argument(
        '-p', '--plot', default=None,
        help='path to save the rank-frequency plot',
        metavar='PATH', dest='plot_path')
    parser.add_argument(
        '--linear', action='store_false',
        help='if set, plot with linear axes instead of log-log',
        dest='loglog')
    parser.add_argument(
        '-k', '--topk', default=20, type=int,
        help='number of top ranked words to print',
        metavar='K', dest='topk')

    args = parser.parse_args()
    main(**vars(args))
