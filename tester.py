import contextlib
import io
import os
import tempfile
from unittest import mock

import matplotlib
import pandas as pd
import pytest

matplotlib.use('Agg')

from doctypes import (ConfigurationError, DivisionError, Document,
                      InvalidInputError, RankedEntry, TokenizedDocument)
from util import test

SPEECHES_CSV = '''id;speech_type;president;date;text
"1";"SOTU";"Washington";"1790-01-08";"the people the people the union"
"2";"SOTU";"Adams";"1797-11-22";"the union of the people"
'''


def _docs(*texts):
    return [TokenizedDocument(str(i + 1), tuple(text.split()))
            for i, text in enumerate(texts)]


def _ranking(vocabulary):
    import ranker
    return ranker.rank(vocabulary)


def test_ranker():
    import ranker

    def test_build_vocabulary():
        test(ranker.build_vocabulary, {'a': 2, 'b': 2, 'c': 1},
             _docs('a a b', 'b c'))
        test(ranker.build_vocabulary, lambda v: (list(v), ['b', 'c', 'a']),
             _docs('b c', 'a a b'))
        test(ranker.build_vocabulary, {}, [])
        test(ranker.build_vocabulary, {}, _docs(''))
        test(ranker.build_vocabulary, {'The': 1, 'the': 1, 'the,': 1},
             _docs('The the the,'))
        with pytest.raises(InvalidInputError):
            ranker.build_vocabulary([TokenizedDocument('1', None)])
    test_build_vocabulary()

    def test_vocabulary_invariants():
        docs = _docs('x y z x', 'y y', '', 'z w')
        vocabulary = ranker.build_vocabulary(docs)
        assert sum(vocabulary.values()) == sum(len(d.tokens) for d in docs)
        assert vocabulary == ranker.build_vocabulary(docs[::-1])
    test_vocabulary_invariants()

    def test_build_document_term_matrix():
        test(ranker.build_document_term_matrix,
             {'1': {'a': 2, 'b': 1}, '2': {'b': 1, 'c': 1}, '3': {}},
             _docs('a a b', 'b c', ''))
        with pytest.raises(InvalidInputError):
            ranker.build_document_term_matrix(
                [TokenizedDocument('1', ('a',)), TokenizedDocument('1', ('b',))])
    test_build_document_term_matrix()

    def test_rank():
        test(ranker.rank,
             [RankedEntry(1, 'a', 2), RankedEntry(2, 'b', 2), RankedEntry(3, 'c', 1)],
             {'a': 2, 'b': 2, 'c': 1})
        test(ranker.rank,
             [RankedEntry(1, 'x', 7), RankedEntry(2, 'b', 2), RankedEntry(3, 'a', 2)],
             {'b': 2, 'a': 2, 'x': 7})
        test(ranker.rank, [RankedEntry(1, 'a', 0)], {'a': 0})
        with pytest.raises(InvalidInputError):
            ranker.rank({})
        with pytest.raises(InvalidInputError):
            ranker.rank({'a': 1, 'b': -1})
    test_rank()

    def test_rank_invariants():
        vocabulary = ranker.build_vocabulary(
            _docs('d c b a d c b d c d', 'e f e g'))
        ranking = ranker.rank(vocabulary)
        assert [e.rank for e in ranking] == list(range(1, len(vocabulary) + 1))
        counts = [e.count for e in ranking]
        assert counts == sorted(counts, reverse=True)
        again = ranker.rank(ranker.ranking_to_vocabulary(ranking))
        assert again == ranking
    test_rank_invariants()

    def test_ranking_to_vocabulary():
        test(ranker.ranking_to_vocabulary,
             lambda v: (list(v.items()), [('a', 2), ('b', 2), ('c', 1)]),
             [RankedEntry(1, 'a', 2), RankedEntry(2, 'b', 2), RankedEntry(3, 'c', 1)])
    test_ranking_to_vocabulary()

    def test_filter_meaningful_range():
        ranking = _ranking({'the': 100, 'cat': 5, 'xyz': 1})
        test(ranker.filter_meaningful_range, [],
             ranking, frozenset({'the'}), 10)
        test(ranker.filter_meaningful_range, [2],
             ranking, frozenset({'the'}), 5)
        test(ranker.filter_meaningful_range, [2, 3],
             ranking, frozenset({'the'}), 0)
        test(ranker.filter_meaningful_range, [1],
             ranking, frozenset(), 10)
        test(ranker.filter_meaningful_range, [1, 2, 3],
             ranking, frozenset(), 0)
        test(ranker.filter_meaningful_range, [], ranking, frozenset({'the'}))
    test_filter_meaningful_range()

    def test_filter_negative_min_frequency():
        ranking = _ranking({'the': 100, 'cat': 5, 'xyz': 1})
        with pytest.warns(ConfigurationError):
            result = ranker.filter_meaningful_range(ranking, frozenset({'the'}), -3)
        assert result == [2, 3]
    test_filter_negative_min_frequency()

    def test_excluded_ranks():
        ranking = _ranking({'the': 100, 'of': 40, 'nation': 12,
                            'cat': 5, 'xyz': 1})
        stopwords = frozenset({'the', 'of', 'xyz'})
        test(ranker.excluded_ranks, [1, 2, 4, 5], ranking, stopwords, 10)
        meaningful = ranker.filter_meaningful_range(ranking, stopwords, 10)
        excluded = ranker.excluded_ranks(ranking, stopwords, 10)
        assert meaningful == [3]
        assert sorted(meaningful + excluded) == [e.rank for e in ranking]
        assert set(meaningful).isdisjoint(excluded)
    test_excluded_ranks()

    def test_type_token_ratio():
        test(ranker.type_token_ratio, 0.6, {'a': 2, 'b': 2, 'c': 1})
        test(ranker.type_token_ratio, 1.0, {'a': 1, 'b': 1, 'c': 1})
        with pytest.raises(DivisionError):
            ranker.type_token_ratio({})
        with pytest.raises(ZeroDivisionError):
            ranker.type_token_ratio({'a': 0})
        test(ranker.type_token_ratio, 1.0, {'a': 1, 'b': 0})
        test(ranker.type_token_ratio, 0.5, {'a': 3, 'b': 0, 'c': 1})
        with pytest.raises(InvalidInputError):
            ranker.type_token_ratio({'a': 2, 'b': -1})
    test_type_token_ratio()

    def test_zipf_expected():
        test(ranker.zipf_expected, [100.0, 50.0, 100 / 3],
             _ranking({'the': 100, 'cat': 5, 'xyz': 1}))
        test(ranker.zipf_expected, [], [])
    test_zipf_expected()

    def test_fit_zipf_exponent():
        ranking = _ranking({'a': 60, 'b': 30, 'c': 20, 'd': 15})
        assert ranker.fit_zipf_exponent(ranking) == pytest.approx(1.0)
        with pytest.raises(InvalidInputError):
            ranker.fit_zipf_exponent(_ranking({'a': 3}))
    test_fit_zipf_exponent()


def test_engine():
    from engine import FrequencyRanker

    def test_frequency_ranker():
        engine = FrequencyRanker(_docs('the people the people the union',
                                       'the union of the people'),
                                 frozenset({'the', 'of'}))
        assert engine.vocabulary() == {'the': 5, 'people': 3, 'union': 2, 'of': 1}
        assert engine.rank() == [RankedEntry(1, 'the', 5),
                                 RankedEntry(2, 'people', 3),
                                 RankedEntry(3, 'union', 2),
                                 RankedEntry(4, 'of', 1)]
        assert engine.meaningful_range(2) == [2, 3]
        assert engine.meaningful_words(3) == [RankedEntry(2, 'people', 3)]
        assert engine.type_token_ratio() == pytest.approx(4 / 11)
        assert engine.document_term_matrix()['2'] == {'the': 2, 'union': 1,
                                                      'of': 1, 'people': 1}
    test_frequency_ranker()

    def test_frequency_ranker_returns_copies():
        engine = FrequencyRanker(_docs('a b a'))
        engine.vocabulary()['a'] = 99
        engine.rank().clear()
        assert engine.vocabulary() == {'a': 2, 'b': 1}
        assert len(engine.rank()) == 2
    test_frequency_ranker_returns_copies()

    def test_frequency_ranker_empty():
        with pytest.raises(InvalidInputError):
            FrequencyRanker([])
        with pytest.raises(InvalidInputError):
            FrequencyRanker(_docs('', '')).rank()
    test_frequency_ranker_empty()


def test_util():
    import util

    def test_tokenize():
        test(util.tokenize, ['The', 'cat,', 'the', 'hat.'], 'The cat,\tthe\n hat.')
        test(util.tokenize, ['the', 'cat', 'the', 'hat'],
             'The cat, the hat.', True, True)
        test(util.tokenize, ['a'], '-- a ...', False, True)
        test(util.tokenize, [], '   ')
    test_tokenize()

    def test_tokenize_docs():
        test(util.tokenize_docs,
             [TokenizedDocument('7', ('fellow', 'citizens')),
              TokenizedDocument('8', ())],
             [Document('7', 'Fellow Citizens!'), Document('8', '')], True, True)
    test_tokenize_docs()

    def test_load_stopwords():
        with pytest.raises(ValueError):
            util.load_stopwords('xx')

        corpus = mock.Mock()
        corpus.words.return_value = ['the', 'and', 'the']
        with mock.patch.object(util.nltk.corpus, 'stopwords', corpus):
            stopwords = util.load_stopwords('en')
        assert stopwords == frozenset({'the', 'and'})
        assert isinstance(stopwords, frozenset)
        corpus.words.assert_called_once_with('english')

        corpus = mock.Mock()
        corpus.words.side_effect = [LookupError('stopwords'), ['le', 'la']]
        with mock.patch.object(util.nltk.corpus, 'stopwords', corpus), \
                mock.patch.object(util.nltk, 'download') as download:
            assert util.load_stopwords('fr') == frozenset({'le', 'la'})
        download.assert_called_once_with('stopwords', quiet=True)
        corpus.words.assert_called_with('french')
    test_load_stopwords()

    def test_read_docs():
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'speeches.csv')
            with open(path, 'w', encoding='utf-8') as fp:
                fp.write('id;speech_type;president;date;text\n'
                         '"1";"SOTU";"Washington";"1790-01-08";"Fellow-Citizens; of the Senate"\n'
                         '"2";"SOTU";"Adams";"1797-11-22";\n')
            test(util.read_docs,
                 [Document('1', 'Fellow-Citizens; of the Senate'), Document('2', '')],
                 path)

            numeric_path = os.path.join(tmp, 'numeric.csv')
            with open(numeric_path, 'w', encoding='utf-8') as fp:
                fp.write('id;speech_type;president;date;text\n'
                         '"1";"SOTU";"Washington";"1790-01-08";"1790"\n'
                         '"2";"SOTU";"Adams";"1797-11-22";"42"\n')
            test(util.read_docs, [Document('1', '1790'), Document('2', '42')],
                 numeric_path)

            bad_path = os.path.join(tmp, 'bad.csv')
            with open(bad_path, 'w', encoding='utf-8') as fp:
                fp.write('id;body\n1;hello\n')
            with pytest.raises(InvalidInputError):
                util.read_docs(bad_path)

        with pytest.raises(ValueError):
            util.read_docs('speeches.txt')
    test_read_docs()

    def test_print_ranking():
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            util.print_ranking(_ranking({'the': 100, 'cat': 5, 'xyz': 1}),
                               2, {2})
        lines = out.getvalue().splitlines()
        assert len(lines) == 4
        assert lines[2].split() == ['1', 'the', '100']
        assert lines[3].split() == ['2', 'cat', '5', '*']
    test_print_ranking()

    def test_fmt_secs():
        test(util.fmt_secs, '0s', 0)
        test(util.fmt_secs, '1m5s', 65)
        test(util.fmt_secs, '2.5s', 2.5)
    test_fmt_secs()


def test_plot_zipf():
    import matplotlib.pyplot as plt
    from plot_zipf import plot_rank_frequency

    def test_plot_rank_frequency():
        ranking = _ranking({'the': 100, 'cat': 5, 'xyz': 1})
        with tempfile.TemporaryDirectory() as tmp:
            for loglog in (True, False):
                path = os.path.join(tmp, f'zipf_{loglog}.png')
                fig = plot_rank_frequency(ranking, loglog=loglog, output_path=path)
                assert os.path.isfile(path)
                assert len(fig.axes[0].lines) == 2
                plt.close(fig)
        with pytest.raises(InvalidInputError):
            plot_rank_frequency([], output_path='unused.png')
    test_plot_rank_frequency()


def test_process_docs():
    import matplotlib.pyplot as plt
    import process_docs

    def test_main():
        plt.close('all')
        with tempfile.TemporaryDirectory() as tmp:
            input_path = os.path.join(tmp, 'speeches.csv')
            output_path = os.path.join(tmp, 'ranking.csv')
            plot_path = os.path.join(tmp, 'zipf.png')
            with open(input_path, 'w', encoding='utf-8') as fp:
                fp.write(SPEECHES_CSV)
            with contextlib.redirect_stdout(io.StringIO()):
                process_docs.main(input_path, output_path, lang=None,
                                  min_frequency=2, plot_path=plot_path, topk=3)
            df = pd.read_csv(output_path)
            assert df['rank'].tolist() == [1, 2, 3, 4]
            assert df['word'].tolist() == ['the', 'people', 'union', 'of']
            assert df['count'].tolist() == [5, 3, 2, 1]
            assert df['meaningful'].tolist() == [True, True, True, False]
            assert os.path.isfile(plot_path)
        assert plt.get_fignums() == []
    test_main()

    def test_main_empty_input():
        with tempfile.TemporaryDirectory() as tmp:
            input_path = os.path.join(tmp, 'empty.csv')
            with open(input_path, 'w', encoding='utf-8') as fp:
                fp.write('id;speech_type;president;date;text\n')
            with pytest.raises(InvalidInputError):
                process_docs.main(input_path, lang=None)
    test_main_empty_input()


if __name__ == '__main__':
    test_ranker()
    test_engine()
    test_util()
    test_plot_zipf()
    test_process_docs()
