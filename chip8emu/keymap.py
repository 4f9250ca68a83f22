"""Key map loading.

A key map file is a YAML mapping from CHIP-8 key (0x0-0xF) to a host key name
or a list of host key names. Host key names are ``pyglet.window.key``
attribute names (``_1``, ``NUM_1``, ``UP``, ``Q``, ...); turning them into
pyglet symbols is left to the frontend.
"""

import logging
import os

import yaml

from .constants import KEY_COUNT
from .errors import KeyMapError

logger = logging.getLogger(__name__)

DEFAULT_KEYMAP_PATH = os.path.join(os.path.dirname(__file__), "keymap.yaml")


def _chip8_key(value):
    if isinstance(value, str):
        try:
            value = int(value, 16)
        except ValueError:
            raise KeyMapError(f"{value!r} is not a CHIP-8 key") from None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < KEY_COUNT:
        raise KeyMapError(f"{value!r} is not a CHIP-8 key (0x0-0xF)")
    return value


def parse_keymap(mapping):
    """Turn {chip8 key: host name(s)} into {host name: chip8 key}."""
    if not isinstance(mapping, dict):
        raise KeyMapError("key map must be a mapping of CHIP-8 keys to host keys")
    keymap = {}
    for chip8_key, names in mapping.items():
        key = _chip8_key(chip8_key)
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not names:
            raise KeyMapError(f"key 0x{key:X} needs a host key name or a list of them")
        for name in names:
            if not isinstance(name, str) or not name:
                raise KeyMapError(f"invalid host key name {name!r} for key 0x{key:X}")
            if name in keymap and keymap[name] != key:
                raise KeyMapError(f"host key {name} is mapped to both 0x{keymap[name]:X} and 0x{key:X}")
            keymap[name] = key
    unmapped = sorted(set(range(KEY_COUNT)) - set(keymap.values()))
    if unmapped:
        logger.warning("CHIP-8 keys with no host key: %s", ", ".join(f"{k:X}" for k in unmapped))
    return keymap


def load_keymap(path=None):
    path = path or DEFAULT_KEYMAP_PATH
    try:
        with open(path, "r") as f:
            mapping = yaml.safe_load(f)
    except OSError as e:
        raise KeyMapError(f"could not read key map {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise KeyMapError(f"could not parse key map {path}: {e}") from e
    logger.debug("Loaded key map from %s", path)
    return parse_keymap(mapping)
