"""
kotoba-lookup: Japanese dictionary lookup with deinflection and pitch accents.

Resolves a raw, possibly inflected, possibly romanized text fragment into
dictionary entries (headword, reading, glosses, pitch accent) using flat
packed-text dictionary files.

Basic Usage:
    import kotoba_lookup

    result = kotoba_lookup.search("たべなかった")
    for entry in result.word_entries:
        print(entry.headword, entry.reading, entry.glosses, entry.pitch_accents)
"""

import asyncio
import time
from pathlib import Path
from typing import Optional, Tuple, Union

from kotoba_lookup.assets import FileAssetProvider, LoadError, load_all
from kotoba_lookup.deinflect import Deinflection, deinflect
from kotoba_lookup.dictionary import WordEntry
from kotoba_lookup.kana import katakana_to_hiragana, romaji_to_hiragana
from kotoba_lookup.search import Dictionaries, WordSearchResult, clean_query, search_word

__version__ = "0.1.0"


# =============================================================================
# Dictionary Loading
# =============================================================================

# Module-level singleton
_DICTIONARIES: Optional[Dictionaries] = None


def load_dictionaries(assets_dir: Optional[Union[str, Path]] = None) -> Dictionaries:
    """
    Load the dictionary assets once and cache them.

    Runs its own event loop; from async code use load_dictionaries_async().

    Args:
        assets_dir: Directory holding the asset files. Uses the default
            (KOTOBA_LOOKUP_ASSETS or the bundled data directory) if not given.

    Returns:
        The loaded Dictionaries bundle

    Raises:
        LoadError: If any asset cannot be read
        RuntimeError: If called while an event loop is running
    """
    global _DICTIONARIES

    if _DICTIONARIES is not None:
        return _DICTIONARIES

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError(
            "load_dictionaries() cannot run inside an event loop; "
            "await load_dictionaries_async() instead"
        )

    _DICTIONARIES = asyncio.run(load_all(FileAssetProvider(assets_dir)))
    return _DICTIONARIES


async def load_dictionaries_async(
    assets_dir: Optional[Union[str, Path]] = None,
) -> Dictionaries:
    """
    Async version of load_dictionaries(), sharing the same cache.

    Example:
        >>> dictionaries = await kotoba_lookup.load_dictionaries_async()
    """
    global _DICTIONARIES

    if _DICTIONARIES is None:
        _DICTIONARIES = await load_all(FileAssetProvider(assets_dir))
    return _DICTIONARIES


def is_loaded() -> bool:
    """Check if the dictionaries are loaded."""
    return _DICTIONARIES is not None


def unload_dictionaries():
    """Drop the cached dictionaries."""
    global _DICTIONARIES
    _DICTIONARIES = None


def warm_up(verbose: bool = False) -> Tuple[float, dict]:
    """
    Pre-load the dictionaries and report how long it took.

    Args:
        verbose: If True, print timing information

    Returns:
        Tuple of (total_time_seconds, timing_details_dict)
    """
    t0 = time.perf_counter()
    dictionaries = load_dictionaries()
    total_time = time.perf_counter() - t0
    timings = {'dictionaries': total_time * 1000}

    if verbose:
        print(f"Loaded dictionaries in {timings['dictionaries']:.1f}ms "
              f"({len(dictionaries.word_index):,} index keys)")

    return total_time, timings


# =============================================================================
# Main API
# =============================================================================

def search(text: str) -> WordSearchResult:
    """
    Search the default dictionaries.

    Whitespace is removed from text before searching.

    Example:
        >>> result = kotoba_lookup.search("taberu")
        >>> result.selected_text_length
        6
    """
    return search_word(load_dictionaries(), clean_query(text))


async def search_async(text: str) -> WordSearchResult:
    """
    Async version of search() for callers running inside an event loop.

    Example:
        >>> result = await kotoba_lookup.search_async("taberu")
    """
    dictionaries = await load_dictionaries_async()
    return search_word(dictionaries, clean_query(text))


def get_version() -> str:
    """Get the library version."""
    return __version__


__all__ = [
    # Data classes
    "Deinflection",
    "Dictionaries",
    "WordEntry",
    "WordSearchResult",
    # API
    "search",
    "search_async",
    "search_word",
    "deinflect",
    "romaji_to_hiragana",
    "katakana_to_hiragana",
    "load_dictionaries",
    "load_dictionaries_async",
    "unload_dictionaries",
    "is_loaded",
    "warm_up",
    "get_version",
    # Exceptions
    "LoadError",
    # Version
    "__version__",
]
