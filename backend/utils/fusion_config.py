#!/usr/bin/env python3
"""
Fusion Service Configuration
Environment-driven settings for the fusion engine and its API
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from processors.consensus_blender import DEFAULT_AGREEMENT_THRESHOLD

logger = logging.getLogger(__name__)

# backend/.env
BACKEND_ENV_PATH = Path(__file__).parent.parent / '.env'

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

T = TypeVar('T')


def _read(env: Mapping[str, str], name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        logger.warning(f"⚠️ Invalid {name}={raw!r}, using default {default!r}")
        return default


def _threshold(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value) or value < 0:
        raise ValueError(raw)
    return value


def _log_level(raw: str) -> str:
    level = raw.upper()
    if level not in LOG_LEVELS:
        raise ValueError(raw)
    return level


@dataclass(frozen=True)
class FusionConfig:
    """Settings for the fusion service"""
    agreement_threshold: float = DEFAULT_AGREEMENT_THRESHOLD
    api_host: str = 'localhost'
    api_port: int = 5004
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'FusionConfig':
        """
        Build settings from environment variables

        Loads backend/.env first when reading the process environment.
        Invalid values fall back to defaults with a warning.
        """
        if env is None:
            load_dotenv(BACKEND_ENV_PATH)
            env = os.environ

        return cls(
            agreement_threshold=_read(env, 'FUSION_AGREEMENT_THRESHOLD', DEFAULT_AGREEMENT_THRESHOLD, _threshold),
            api_host=_read(env, 'FUSION_API_HOST', 'localhost', str),
            api_port=_read(env, 'FUSION_API_PORT', 5004, int),
            log_level=_read(env, 'FUSION_LOG_LEVEL', 'INFO', _log_level),
        )
