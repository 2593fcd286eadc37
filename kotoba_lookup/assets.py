"""
Asset loading for kotoba-lookup.

The search core never performs I/O itself. Asset bytes come from an
AssetProvider; FileAssetProvider reads them from a directory:

    <assets>/word-dict.txt
    <assets>/word-dict-index.txt
    <assets>/deinflect.txt
    <assets>/pitch-accents.txt

The directory defaults to kotoba_lookup/data and can be overridden with the
KOTOBA_LOOKUP_ASSETS environment variable.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

from kotoba_lookup.deinflect import DeinflectionData, parse_deinflection_data
from kotoba_lookup.dictionary import WordDict, WordIndex
from kotoba_lookup.pitch import PitchTable
from kotoba_lookup.search import Dictionaries

logger = logging.getLogger(__name__)


# ============================================================================
# Paths
# ============================================================================

WORD_DICT_ASSET = "word-dict.txt"
WORD_INDEX_ASSET = "word-dict-index.txt"
DEINFLECT_ASSET = "deinflect.txt"
PITCH_ASSET = "pitch-accents.txt"

ASSETS_ENV_VAR = "KOTOBA_LOOKUP_ASSETS"


def get_assets_dir() -> Path:
    """Get the default asset directory."""
    override = os.environ.get(ASSETS_ENV_VAR)
    if override:
        return Path(override)
    return Path(__file__).parent / "data"


# ============================================================================
# Errors
# ============================================================================

class LoadError(Exception):
    """Raised when a dictionary asset cannot be read."""

    def __init__(self, asset: str, reason: str):
        super().__init__(f"Dictionary unavailable: cannot load {asset}: {reason}")
        self.asset = asset
        self.reason = reason


# ============================================================================
# Providers
# ============================================================================

class AssetProvider(Protocol):
    """Source of raw asset text."""

    async def read_text(self, name: str) -> str:
        ...


class FileAssetProvider:
    """Reads assets from a local directory."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else get_assets_dir()

    def __repr__(self) -> str:
        return f"FileAssetProvider({str(self.base_dir)!r})"

    def _read(self, name: str) -> str:
        path = self.base_dir / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise LoadError(name, f"{path} not found")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(name, str(e)) from e

    async def read_text(self, name: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, name)


async def _read_asset(provider: AssetProvider, name: str) -> str:
    try:
        text = await provider.read_text(name)
    except LoadError:
        raise
    except Exception as e:
        raise LoadError(name, str(e)) from e
    logger.debug("Loaded %s (%d chars)", name, len(text))
    return text


# ============================================================================
# Loaders
# ============================================================================

async def load_word_dict(provider: AssetProvider) -> Tuple[WordDict, WordIndex]:
    """Load the packed dictionary and its index concurrently."""
    word_dict_text, word_index_text = await asyncio.gather(
        _read_asset(provider, WORD_DICT_ASSET),
        _read_asset(provider, WORD_INDEX_ASSET),
    )
    return WordDict(word_dict_text), WordIndex(word_index_text)


async def load_deinflection_data(provider: AssetProvider) -> DeinflectionData:
    """Load and parse the deinflection rules."""
    text = await _read_asset(provider, DEINFLECT_ASSET)
    return parse_deinflection_data(text.replace("\r", "").split("\n"))


async def load_pitch_data(provider: AssetProvider) -> PitchTable:
    """Load the pitch-accent table."""
    return PitchTable(await _read_asset(provider, PITCH_ASSET))


async def load_all(provider: AssetProvider) -> Dictionaries:
    """
    Load every asset and assemble the search bundle.

    The dictionary pair, the rules and the pitch table are fetched in
    parallel. Any failure is fatal.

    Raises:
        LoadError: If an asset cannot be read
    """
    (word_dict, word_index), deinflection, pitch_table = await asyncio.gather(
        load_word_dict(provider),
        load_deinflection_data(provider),
        load_pitch_data(provider),
    )
    logger.info(
        "Dictionaries loaded: %d index keys, %d rule groups, %d pitch entries",
        len(word_index), len(deinflection.rule_groups), len(pitch_table),
    )
    return Dictionaries(
        word_dict=word_dict,
        word_index=word_index,
        reasons=deinflection.reasons,
        rule_groups=deinflection.rule_groups,
        pitch_table=pitch_table,
    )
