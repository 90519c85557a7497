#!/usr/bin/env python3
"""
Normalization of synonym values into canonical ones.

Runs once per result: failed results and results that were already
normalized are returned unchanged.
"""

import logging
from dataclasses import replace
from typing import Dict, List

from .result import ParseResult

logger = logging.getLogger(__name__)

AUDIO_SYNONYMS: Dict[str, str] = {
    'AC3': 'DD',
    'EAC3': 'DDP',
}

# Keys are lower case; unknown codecs are lower-cased as well
CODEC_SYNONYMS: Dict[str, str] = {
    'avc': 'AVC',
    'h264': 'AVC',
    'x264': 'AVC',
    'hevc': 'HEVC',
    'h265': 'HEVC',
    'x265': 'HEVC',
    'mpeg2': 'MPEG-2',
    'divx': 'DivX',
    'dvix': 'DivX',
    'xvid': 'Xvid',
}

RELEASE_TYPE_SYNONYMS: Dict[str, str] = {
    'OAV': 'OVA',
    'ODA': 'OAD',
}

RESOLUTION_SYNONYMS: Dict[str, str] = {
    '2160p': '4k',
    '1440p': '2k',
}


def normalize_audio(audio: List[str]) -> List[str]:
    """Rename AC3/EAC3, dropping duplicates created by the rename."""
    renamed = [AUDIO_SYNONYMS.get(item, item) for item in audio]
    if renamed == audio:
        return list(audio)
    return list(dict.fromkeys(renamed))


def normalize_codec(codec: str) -> str:
    codec = codec.lower()
    return CODEC_SYNONYMS.get(codec, codec)


def normalize_release_types(release_types: List[str]) -> List[str]:
    return [RELEASE_TYPE_SYNONYMS.get(item, item) for item in release_types]


def normalize_resolution(resolution: str) -> str:
    resolution = resolution.lower()
    return RESOLUTION_SYNONYMS.get(resolution, resolution)


def normalize(result: ParseResult) -> ParseResult:
    """
    Canonicalize audio, codec, release type and resolution values.

    Args:
        result: Parse result

    Returns:
        A normalized copy, or result itself when it failed or was already
        normalized
    """
    if result.error is not None or result.normalized:
        return result

    logger.debug("Normalizing result for %r", result.title)
    return replace(
        result,
        audio=normalize_audio(result.audio),
        codec=normalize_codec(result.codec),
        release_types=normalize_release_types(result.release_types),
        resolution=normalize_resolution(result.resolution),
        normalized=True,
    )
