from __future__ import annotations

import csv
import functools
import os
import string
from timeit import default_timer as timer

import nltk
import pandas as pd

from doctypes import Document, InvalidInputError, RankedEntry, TokenizedDocument

STOPWORD_LANGUAGES = {
    'da': 'danish',
    'de': 'german',
    'en': 'english',
    'es': 'spanish',
    'fi': 'finnish',
    'fr': 'french',
    'it': 'italian',
    'nl': 'dutch',
    'no': 'norwegian',
    'pt': 'portuguese',
    'ru': 'russian',
    'sv': 'swedish',
}


def fmt_secs(s: float):
    if s == 0:
        return '0s'
    ut = []
    for u, t in [('d', 86400), ('h', 3600), ('m', 60), ('s', 1)]:
        q, s = divmod(s, t)
        if q:
            ut.append(f'{int(q)}{u}')
    if any(u[-1] in 'dhm' for u in ut):
        return ''.join(ut[:2])
    s += q
    for u in ('s', 'ms', 'µs', 'ns', 'ps'):
        if s < 0.01:
            s *= 1000
        else:
            break
    return f'{round(s, 2)}{u}'


def timed(fn, args, kwargs=None):
    start_time = timer()
    output = fn(*args, **(kwargs or {}))
    end_time = timer()
    time_taken = end_time - start_time
    return output, time_taken


def test(fn, expected, *args, **kwargs):
    output, time_taken = timed(fn, args, kwargs)
    if callable(expected):
        output, expected = expected(output)
    assert output == expected, f'expected {expected} from {fn.__name__} but got {output}'
    print(f'{fn.__name__} test passed ({fmt_secs(time_taken)})')


def print_ranking(
    ranking: list[RankedEntry],
    topk: int | None = None,
    meaningful: set[int] | None = None,
):
    """Print a ranking as a table, optionally marking meaningful ranks with '*'."""
    rows = ranking[:topk] if topk is not None else ranking
    if not rows:
        return
    a = max(len(str(entry.rank)) for entry in rows)
    b = max(max(len(entry.word) for entry in rows), 4)
    c = max(max(len(str(entry.count)) for entry in rows), 5)
    print(f"rank{' '*(a-4)}  word{' '*(b-4)}  count{' '*(c-5)}")
    print(f"===={'='*(a-4)}  ===={'='*(b-4)}  ====={'='*(c-5)}")
    for entry in rows:
        mark = ' *' if meaningful and entry.rank in meaningful else ''
        print(f'{entry.rank:<{max(a, 4)}}  {entry.word:<{b}}  {entry.count:>{c}}{mark}')


def tokenize(
    text: str,
    lowercase: bool = False,
    strip_punctuation: bool = False,
) -> list[str]:
    """Split text on whitespace.

    Arguments:
        text: raw text
        lowercase: if set to true, fold tokens to lowercase
        strip_punctuation: if set to true, strip leading and trailing punctuation
    Returns:
        list of non-empty tokens
    """
    tokens = []
    for word in text.split():
        if strip_punctuation:
            word = word.strip(string.punctuation)
        if lowercase:
            word = word.lower()
        if word:
            tokens.append(word)
    return tokens


def tokenize_docs(
    docs: list[Document],
    lowercase: bool = False,
    strip_punctuation: bool = False,
) -> list[TokenizedDocument]:
    docs_ = []
    for doc in docs:
        tokens = tokenize(doc.text, lowercase, strip_punctuation)
        docs_.append(TokenizedDocument(id=doc.id, tokens=tuple(tokens)))
    return docs_


def load_stopwords(lang: str = 'en') -> frozenset[str]:
    """Load the nltk stop-word list for a language tag such as 'en'."""
    name = STOPWORD_LANGUAGES.get(lang, lang)
    if name not in STOPWORD_LANGUAGES.values():
        err_msg = (f"Unsupported language '{lang}'. "
                   f"Must be one of {', '.join(sorted(STOPWORD_LANGUAGES))}.")
        raise ValueError(err_msg)
    try:
        words = nltk.corpus.stopwords.words(name)
    except LookupError:
        nltk.download('stopwords', quiet=True)
        words = nltk.corpus.stopwords.words(name)
    return frozenset(words)


@functools.lru_cache
def read_df(path: str, sep: str = ';') -> pd.DataFrame:
    _, ext = os.path.splitext(path)
    if ext == '.csv':
        return pd.read_csv(path, sep=sep, quotechar='"',
                           quoting=csv.QUOTE_MINIMAL,
                           dtype={'id': str, 'text': str})
    elif ext == '.json':
        return pd.read_json(path, dtype={'id': str, 'text': str})
    else:
        err_msg = f"Invalid file extension '{ext}'. Must be '.csv' or '.json'."
        raise ValueError(err_msg)


def row_to_doc_adapter(row: pd.Series) -> Document:
    text = '' if pd.isna(row['text']) else str(row['text'])
    return Document(id=str(row['id']), text=text)


def read_docs(docs_path: str, sep: str = ';') -> list[Document]:
    df = read_df(docs_path, sep)
    missing = {'id', 'text'} - set(df.columns)
    if missing:
        err_msg = f"{docs_path} is missing column(s): {', '.join(sorted(missing))}"
        raise InvalidInputError(err_msg)
    if df.empty:
        return []
    docs = df.apply(row_to_doc_adapter, axis=1)
    return docs.tolist()


def get_docs_size(docs_path: str, sep: str = ';') -> int:
    df = read_df(docs_path, sep)
    return df.memory_usage(deep=True).sum()
