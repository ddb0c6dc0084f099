"""YAML build context parser for nativeplan.

A build context file describes one planning run without a Cargo
environment, which is convenient for CI matrices and for reproducing a
plan outside the build script:

    version: 1
    target:
      os: linux
      env: gnu
      family: unix
      triple: x86_64-unknown-linux-gnu
    compiler: gcc
    features: [stats, lto]
    build:
      profile: release
      cxx_standard: 20
      backend: cmake
      out_dir: out
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from nativeplan.core import context as keys
from nativeplan.core.context import BuildContext
from nativeplan.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1

TARGET_FIELDS = {
    "os": keys.TARGET_OS,
    "env": keys.TARGET_ENV,
    "family": keys.TARGET_FAMILY,
    "triple": keys.TARGET_TRIPLE,
}

ANDROID_FIELDS = {
    "ndk": keys.ANDROID_NDK,
    "platform": keys.ANDROID_PLATFORM,
}

BUILD_FIELDS = {
    "profile": keys.PROFILE,
    "cxx_standard": keys.CXX_STANDARD,
    "backend": keys.BACKEND,
    "out_dir": keys.OUT_DIR,
}

# build: section booleans that are expressed as features
BUILD_FEATURE_FIELDS = {
    "checked": "check",
    "android_shared_stl": "android_shared_stl",
}


def parse_context_file(path: Path) -> BuildContext:
    """
    Parse a YAML build context file.

    Args:
        path: Path to the YAML file

    Returns:
        BuildContext described by the file

    Raises:
        ConfigError: If the file is missing, not valid YAML, or malformed
    """
    if not path.exists():
        raise ConfigError(f"Build context file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}")

    if data is None:
        raise ConfigError(f"Build context file is empty: {path}")

    logger.debug(f"Loaded build context from {path}")
    return parse_context_data(data)


def parse_context_data(data: Any) -> BuildContext:
    """Parse already-loaded YAML data into a BuildContext."""
    if not isinstance(data, dict):
        raise ConfigError("Build context must be a mapping")

    version = data.get("version", SUPPORTED_VERSION)
    if version != SUPPORTED_VERSION:
        raise ConfigError(f"Unsupported version: {version} (expected {SUPPORTED_VERSION})")

    facts: Dict[str, str] = {}

    target = _section(data, "target")
    _copy_fields(target, TARGET_FIELDS, facts, "target")

    for name, key in (("compiler", keys.COMPILER), ("msystem", keys.MSYSTEM)):
        value = data.get(name)
        if value is not None:
            facts[key] = _scalar(value, name)

    android = _section(data, "android")
    _copy_fields(android, ANDROID_FIELDS, facts, "android")

    build = _section(data, "build")
    _copy_fields(build, BUILD_FIELDS, facts, "build")

    features = _parse_features(data.get("features"))
    for name, feature in BUILD_FEATURE_FIELDS.items():
        value = build.get(name)
        if value is None:
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"build.{name} must be true or false")
        if value:
            features.append(feature)

    return BuildContext.from_mapping(facts, features=features)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _copy_fields(
    section: Dict[str, Any], mapping: Dict[str, str], facts: Dict[str, str], prefix: str
) -> None:
    unknown = set(section) - set(mapping) - set(BUILD_FEATURE_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown field(s) in '{prefix}': {', '.join(sorted(unknown))}")
    for name, key in mapping.items():
        value = section.get(name)
        if value is not None:
            facts[key] = _scalar(value, f"{prefix}.{name}")


def _scalar(value: Any, name: str) -> str:
    if isinstance(value, (dict, list)):
        raise ConfigError(f"Field '{name}' must be a scalar")
    if isinstance(value, bool):
        raise ConfigError(f"Field '{name}' must be a string")
    return str(value)


def _parse_features(value: Any) -> List[str]:
    """Features may be a list of names or a mapping of name -> bool."""
    if value is None:
        return []
    if isinstance(value, list):
        return [_scalar(item, "features") for item in value]
    if isinstance(value, dict):
        enabled = []
        for name, flag in value.items():
            if not isinstance(flag, bool):
                raise ConfigError(f"features.{name} must be true or false")
            if flag:
                enabled.append(str(name))
        return enabled
    raise ConfigError("'features' must be a list or a mapping")
