#!/usr/bin/env python3
"""
Dictionary Builder for kotoba-lookup.

This script builds the flat dictionary assets from JMdict XML:

- word-dict.txt: one EDICT-style line per JMdict entry
- word-dict-index.txt: sorted normalized keys with byte offsets

It can also sort a tab-separated pitch-accent file (word, katakana reading,
accents) into pitch-accents.txt.

Usage:
    python scripts/build_dictionary.py [--jmdict PATH] [--output-dir DIR] [--pitch PATH]

Requirements:
    pip install kotoba-lookup[build]  # Installs lxml
"""

import argparse
import logging
import re
import sys
import time
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lxml import etree

from kotoba_lookup.dictionary import WordEntry, build_word_index

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


# ============================================================================
# Paths
# ============================================================================

DEFAULT_JMDICT = Path(__file__).parent.parent / "data" / "JMdict_e.xml"
DEFAULT_OUTPUT_DIR = Path(__file__).parent.parent / "kotoba_lookup" / "data"

# Namespace lxml uses for the xml:lang attribute on <gloss>
XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'


# ============================================================================
# Entity Parsing
# ============================================================================

ENTITY_REPLACEMENTS: Dict[str, str] = {}


def parse_entity_definitions(xml_path: Path) -> Dict[str, str]:
    """Parse entity definitions from JMDict DTD."""
    with open(xml_path, 'rb') as f:
        content = b''
        for line in f:
            content += line
            if b']>' in line:
                break

    pattern = rb'<!ENTITY\s+([\w-]+)\s+"([^"]*)"\s*>'
    for match in re.finditer(pattern, content):
        name = match.group(1).decode('utf-8')
        value = match.group(2).decode('utf-8')
        if name not in ('lt', 'gt', 'amp', 'apos', 'quot'):
            ENTITY_REPLACEMENTS[value] = name

    return ENTITY_REPLACEMENTS


def fix_entity_value(text: str) -> str:
    """Convert expanded entity value to short name."""
    return ENTITY_REPLACEMENTS.get(text, text)


# ============================================================================
# JMDict Parsing
# ============================================================================

def node_text(elem) -> str:
    """Get all text from element."""
    return ''.join(elem.itertext())


def parse_entries(xml_path: Path) -> Iterator[WordEntry]:
    """
    Stream JMdict XML and yield one WordEntry per <entry>.

    The first kanji form becomes the headword and the first kana form the
    reading; kana-only entries use the kana form as headword. Glosses of
    each sense are joined with "; ", and the part-of-speech tags of the
    sense are prefixed in parentheses.
    """
    logger.info("Parsing entity definitions...")
    parse_entity_definitions(xml_path)

    logger.info("Parsing JMdict entries...")

    context = etree.iterparse(
        str(xml_path),
        events=('end',),
        tag='entry',
        recover=True,
        load_dtd=True,
        no_network=True
    )

    count = 0
    for event, elem in context:
        kanji = [node_text(keb) for keb in elem.iterfind('k_ele/keb')]
        kana = [node_text(reb) for reb in elem.iterfind('r_ele/reb')]

        glosses = []
        for sense in elem.findall('sense'):
            texts = [
                node_text(gloss) for gloss in sense.findall('gloss')
                if gloss.get(XML_LANG, 'eng') == 'eng'
            ]
            if not texts:
                continue
            pos = [fix_entity_value(node_text(p)) for p in sense.findall('pos')]
            gloss = "; ".join(texts).replace("/", "|")
            if pos:
                gloss = f"({','.join(pos)}) {gloss}"
            glosses.append(gloss)

        if kana and glosses:
            if kanji:
                yield WordEntry(headword=kanji[0], reading=kana[0], glosses=tuple(glosses))
            else:
                yield WordEntry(headword=kana[0], reading="", glosses=tuple(glosses))
            count += 1
            if count % 10000 == 0:
                logger.info(f"  Parsed {count} entries...")

        elem.clear()
        while elem.getprevious() is not None:
            del elem.getparent()[0]

    logger.info(f"Parsed {count} entries")


# ============================================================================
# Pitch Accents
# ============================================================================

def sort_pitch_lines(lines: List[str]) -> List[str]:
    """
    Keep well-formed pitch lines and sort them by (word, reading).
    """
    rows: List[Tuple[str, str, str]] = []
    for line in lines:
        fields = line.rstrip("\r\n").split("\t")
        if len(fields) < 3 or not fields[0] or not fields[1]:
            continue
        if not all(accent.isdigit() for accent in fields[2].split(",")):
            logger.warning(f"Skipping pitch line with bad accents: {line!r}")
            continue
        rows.append((fields[0], fields[1], fields[2]))

    rows.sort(key=lambda row: (row[0], row[1]))
    return ["\t".join(row) for row in rows]


# ============================================================================
# Output
# ============================================================================

def write_text(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(text)
    file_size = path.stat().st_size / (1024 * 1024)
    logger.info(f"Saved {path} ({file_size:.1f} MB)")


# ============================================================================
# Main
# ============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Build kotoba-lookup dictionary assets from JMdict XML"
    )
    parser.add_argument(
        '--jmdict', '-j',
        type=Path,
        default=DEFAULT_JMDICT,
        help=f"Path to JMdict XML file (default: {DEFAULT_JMDICT})"
    )
    parser.add_argument(
        '--output-dir', '-o',
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})"
    )
    parser.add_argument(
        '--pitch', '-p',
        type=Path,
        default=None,
        help="Tab-separated pitch-accent source to sort into pitch-accents.txt"
    )

    args = parser.parse_args()

    if not args.jmdict.exists():
        logger.error(f"JMdict file not found: {args.jmdict}")
        sys.exit(1)

    start_time = time.time()

    dict_text, index_text = build_word_index(parse_entries(args.jmdict))
    write_text(args.output_dir / "word-dict.txt", dict_text)
    write_text(args.output_dir / "word-dict-index.txt", index_text)

    if args.pitch is not None:
        with open(args.pitch, 'r', encoding='utf-8') as f:
            pitch_lines = sort_pitch_lines(f.readlines())
        write_text(args.output_dir / "pitch-accents.txt", "".join(line + "\n" for line in pitch_lines))

    elapsed = time.time() - start_time
    logger.info(f"Build completed in {elapsed:.1f} seconds")


if __name__ == '__main__':
    main()
