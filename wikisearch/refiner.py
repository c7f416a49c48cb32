"""
Client-side refinement of article hits.

Everything here runs after the engine answered: articles keep the engine's
order, only their bodies are reduced to the sentences that contain the query.
"""
import math
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, NamedTuple, Optional, Sequence, Union

from wikisearch.config import HIGHLIGHT_POST_TAG, HIGHLIGHT_PRE_TAG
from wikisearch.es_models import Article, SearchResult

ELLIPSIS = "ellipsis"
NO_RELEVANT_SENTENCES = "No relevant sentences found..."

# The last page label disappears once the current page reaches this number
LAST_PAGE_LABEL_CUTOFF = 9


class SentenceSegmenter(ABC):
    """Splits article text into units that are checked against the query"""

    @abstractmethod
    def split(self, text: str) -> List[str]: ...


class DelimiterSegmenter(SentenceSegmenter):
    """
    Naive splitter on a literal delimiter.
    Abbreviations and decimals are split too; empty segments are kept.
    """

    def __init__(self, delimiter: str = "."):
        self.delimiter = delimiter

    def split(self, text: str) -> List[str]:
        return text.split(self.delimiter)


DEFAULT_SEGMENTER = DelimiterSegmenter()


class HighlightStyle(NamedTuple):
    pre_tag: str = HIGHLIGHT_PRE_TAG
    post_tag: str = HIGHLIGHT_POST_TAG


class HighlightPass(NamedTuple):
    """One replacement step: wrap every occurrence of `word` in `style`"""
    word: str
    style: HighlightStyle

    def apply(self, sentence: str) -> str:
        pattern = re.compile(re.escape(self.word), re.IGNORECASE)
        return pattern.sub(
            lambda m: f"{self.style.pre_tag}{m.group(0)}{self.style.post_tag}",
            sentence)


def extract_relevant_sentences(
    article_text: str, query: str,
    segmenter: Optional[SentenceSegmenter] = None
) -> List[str]:
    """Segments of `article_text` containing `query`, case-insensitively"""
    segmenter = segmenter or DEFAULT_SEGMENTER
    needle = query.lower()
    return [s for s in segmenter.split(article_text) if needle in s.lower()]


def build_highlight_passes(query: str, style: Optional[HighlightStyle] = None) -> List[HighlightPass]:
    style = style or HighlightStyle()
    return [HighlightPass(word, style) for word in query.split()]


def apply_highlight_passes(sentence: str, passes: Iterable[HighlightPass]) -> str:
    # Each pass sees the markers added by the previous ones
    for highlight_pass in passes:
        sentence = highlight_pass.apply(sentence)
    return sentence


def highlight(sentence: str, query: str, style: Optional[HighlightStyle] = None) -> str:
    """
    Wrap every case-insensitive occurrence of each query word.

    Matching is plain substring matching: "cat" is marked inside "catalog" as
    well. Words are applied left to right, repeated words run again, and markers
    can nest when query words overlap.
    """
    return apply_highlight_passes(sentence, build_highlight_passes(query, style))


def refine_article(
    article: Article, query: str,
    segmenter: Optional[SentenceSegmenter] = None,
    style: Optional[HighlightStyle] = None
) -> SearchResult:
    passes = build_highlight_passes(query, style)
    sentences = [apply_highlight_passes(s, passes)
                 for s in extract_relevant_sentences(article.text, query, segmenter)]
    return SearchResult(title=article.title, text=article.text,
                        url=article.url, sentences=sentences)


def refine_results(
    articles: Iterable[Article], query: str,
    segmenter: Optional[SentenceSegmenter] = None,
    style: Optional[HighlightStyle] = None
) -> List[SearchResult]:
    """Refine every article, keeping the engine's order"""
    return [refine_article(a, query, segmenter, style) for a in articles]


def display_sentences(result: SearchResult) -> List[str]:
    """Sentences to render for a selected result, never empty"""
    if result.sentences:
        return list(result.sentences)
    return [NO_RELEVANT_SENTENCES]


def paginate(results: Sequence[SearchResult], page_length: int, page_number: int) -> List[SearchResult]:
    if page_length <= 0 or page_number < 1:
        return []
    start = (page_number - 1) * page_length
    return list(results[start:start + page_length])


def count_pages(result_count: int, page_length: int) -> int:
    if page_length <= 0:
        return 0
    return math.ceil(result_count / page_length)


def can_change_page(page: int, pages: int) -> bool:
    return 1 <= page <= pages


def generate_page_labels(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """
    Page buttons around `current_page`.

    The first page is shown once the current page is past 2, the last one only
    while the current page is below LAST_PAGE_LABEL_CUTOFF. An ELLIPSIS goes
    between any two labels that are not adjacent pages. A current page past the
    end is labelled as the last page, so no label exceeds `total_pages`.
    """
    current_page = min(current_page, max(total_pages, 1))
    numbers = {current_page}
    if current_page - 1 >= 1:
        numbers.add(current_page - 1)
    if current_page + 1 <= total_pages:
        numbers.add(current_page + 1)
    if current_page > 2:
        numbers.add(1)
    if total_pages > 1 and current_page < LAST_PAGE_LABEL_CUTOFF:
        numbers.add(total_pages)

    labels: List[Union[int, str]] = []
    previous = None
    for number in sorted(numbers):
        if previous is not None and number - previous > 1:
            labels.append(ELLIPSIS)
        labels.append(number)
        previous = number
    return labels


def truncate_title(title: str) -> str:
    # Titles over 30 characters keep their first 40
    return title[:40] + "..." if len(title) > 30 else title
