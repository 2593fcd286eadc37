"""
CLI interface for kotoba-lookup.

Usage:
    kotoba-lookup "食べなかった"
    kotoba-lookup -d "たべさせられた"
    kotoba-lookup --json taberu
    echo "はなす" | kotoba-lookup --assets ./dictionaries
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from kotoba_lookup import __version__
from kotoba_lookup.assets import FileAssetProvider, LoadError, load_all
from kotoba_lookup.deinflect import Deinflection, deinflect
from kotoba_lookup.dictionary import WordEntry
from kotoba_lookup.kana import normalize_key
from kotoba_lookup.pitch import format_pitch
from kotoba_lookup.search import Dictionaries, WordSearchResult, clean_query, search_word


# ============================================================================
# Output Formatting
# ============================================================================

def format_entry(entry: WordEntry) -> str:
    """
    One entry on one line.

    Format: headword [reading] はなꜜす: gloss; gloss
    """
    parts = [entry.headword]
    if entry.reading:
        parts.append(f"[{entry.reading}]")
    if entry.pitch_accents:
        pronunciation = entry.reading or entry.headword
        parts.append(" ".join(format_pitch(pronunciation, accent) for accent in entry.pitch_accents))
    return " ".join(parts) + ": " + "; ".join(entry.glosses)


def format_default(result: WordSearchResult, limit: Optional[int] = None) -> str:
    """Default output: one line per matched entry."""
    entries = result.word_entries[:limit] if limit else result.word_entries
    if not entries:
        return "No matches."
    return "\n".join(format_entry(entry) for entry in entries)


def format_deinflections(deinflections: List[Deinflection]) -> str:
    """Deinflection candidates with their derivation trails."""
    lines = []
    for d in deinflections[1:]:
        lines.append(f"  └─ {d.word} ← {d.reason_chain}")
    return "\n".join(lines)


def format_detailed(
    dictionaries: Dictionaries,
    text: str,
    result: WordSearchResult,
    limit: Optional[int] = None,
) -> str:
    """
    Detailed output: the matched part of the input, the candidate base
    forms it deinflects to, then the entries.
    """
    selected = text[:result.selected_text_length]
    lines = [f"{selected}【{normalize_key(selected)}】", "─" * 40]

    trail = format_deinflections(
        deinflect(dictionaries.reasons, dictionaries.rule_groups, normalize_key(selected))
    )
    if trail:
        lines.append(trail)
        lines.append("─" * 40)

    lines.append(format_default(result, limit))
    return "\n".join(lines)


def format_json(result: WordSearchResult, limit: Optional[int] = None) -> str:
    """Format the search result as JSON."""
    data = result.to_dict()
    if limit:
        data["word_entries"] = data["word_entries"][:limit]
    return json.dumps(data, ensure_ascii=False, indent=2)


# ============================================================================
# Main
# ============================================================================

def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="kotoba-lookup",
        description="Japanese dictionary lookup with deinflection and pitch accents",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Japanese text (kana, kanji or romaji) to look up",
    )
    parser.add_argument(
        "--assets", "-a",
        metavar="DIR",
        help="Directory holding the dictionary files",
    )
    parser.add_argument(
        "--detail", "-d",
        action="store_true",
        help="Show the deinflection candidates of the matched text",
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Show at most N entries",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log loading details to stderr",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"kotoba-lookup {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    if args.text is None:
        # Read from stdin
        text = sys.stdin.read()
    else:
        text = args.text

    text = clean_query(text)
    if not text:
        parser.print_help()
        sys.exit(1)

    try:
        dictionaries = asyncio.run(load_all(FileAssetProvider(args.assets)))
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = search_word(dictionaries, text)

    if args.json:
        print(format_json(result, args.limit))
    elif args.detail:
        print(format_detailed(dictionaries, text, result, args.limit))
    else:
        print(format_default(result, args.limit))


if __name__ == "__main__":
    main()
