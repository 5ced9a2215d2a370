import sys
import argparse
import json
import random
import importlib.util
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type
from pathlib import Path

import frequency_analysis
from caesar import ALPHABET, caesar_decrypt, caesar_encrypt, check_caesar_key

DEFAULT_METHOD = "substitution"

ENCRYPT = "encrypt"
DECRYPT = "decrypt"

# Verbose mode (disabled by default, enabled with --verbose)
VERBOSE = False

def log_info(msg: str):
    """Print info message only if verbose mode is enabled."""
    if VERBOSE:
        print(f"[INFO] {msg}", file=sys.stderr)

def log_warn(msg: str):
    """Print warning message only if verbose mode is enabled."""
    if VERBOSE:
        print(f"[WARN] {msg}", file=sys.stderr)

# ==========================================
#  FRAMEWORK: Abstract Base Class & Registry
# ==========================================

class CipherStrategy(ABC):
    """Abstract base class that all ciphers must implement."""

    # Keyless ciphers (e.g. atbash) set this to False
    requires_key = True

    def __init__(self, key: Optional[int] = None):
        self.key = key

    @property
    @abstractmethod
    def name(self) -> str:
        """The command-line name for this cipher."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description for help text."""
        pass

    @abstractmethod
    def encode(self, text: str) -> str:
        pass

    @abstractmethod
    def decode(self, text: str) -> str:
        pass

CIPHER_REGISTRY: Dict[str, Type[CipherStrategy]] = {}

def register_cipher(cls):
    """Decorator to auto-register cipher classes by name."""
    CIPHER_REGISTRY[cls.name] = cls
    return cls

def build_cipher(name: str, key: Optional[int] = None) -> CipherStrategy:
    """
    Instantiate a registered cipher.

    Raises KeyError for an unknown name and ValueError when a keyed
    cipher is requested without a key.
    """
    if name not in CIPHER_REGISTRY:
        raise KeyError(f"Unknown cipher '{name}'")
    cls = CIPHER_REGISTRY[name]
    if cls.requires_key and key is None:
        raise ValueError(f"Cipher '{name}' requires a key (-k/--key).")
    if not cls.requires_key and key is not None:
        log_warn(f"Cipher '{name}' is keyless. Ignoring key {key}.")
    return cls(key)

# ==========================================
#  PLUGIN SYSTEM: Dynamic Cipher Loading
# ==========================================

PLUGIN_MANIFEST = "manifest.json"

def _read_manifest(plugin_dir: Path) -> List[dict]:
    """Return the manifest's plugin entries, or [] when there is nothing usable."""
    manifest_path = plugin_dir / PLUGIN_MANIFEST
    if not manifest_path.is_file():
        log_warn(f"No {PLUGIN_MANIFEST} in {plugin_dir}. Skipping plugin loading.")
        return []
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        log_warn(f"Unreadable {manifest_path}: {e}")
        return []
    entries = manifest.get("plugins", []) if isinstance(manifest, dict) else []
    return [entry for entry in entries if isinstance(entry, dict) and entry.get("file")]

def _exec_plugin(filepath: Path) -> List[str]:
    """
    Run one plugin file with CipherStrategy and register_cipher in its
    namespace and return the cipher names it (re)registered.
    """
    spec = importlib.util.spec_from_file_location(f"classical_plugin_{filepath.stem}", filepath)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {filepath}")
    module = importlib.util.module_from_spec(spec)
    module.CipherStrategy = CipherStrategy
    module.register_cipher = register_cipher

    before = dict(CIPHER_REGISTRY)
    spec.loader.exec_module(module)
    return [name for name, cls in CIPHER_REGISTRY.items() if before.get(name) is not cls]

def load_plugins(plugin_dir: str = None) -> List[str]:
    """
    Register the ciphers listed in a plugin directory's manifest.json.

    Each manifest entry is {"file": "<name>.py", "cipher": "<name>"}; the
    "cipher" field is optional and, when present, must be registered by
    that file. Broken entries are logged (with --verbose) and skipped.

    Args:
        plugin_dir: Plugin directory (default: plugins/ next to this module)

    Returns:
        Names of the ciphers the plugins registered, in manifest order
    """
    plugin_dir = Path(plugin_dir) if plugin_dir is not None else Path(__file__).parent / "plugins"
    if not plugin_dir.is_dir():
        return []

    loaded = []
    for entry in _read_manifest(plugin_dir):
        filepath = plugin_dir / entry["file"]
        expected = entry.get("cipher")
        if not filepath.is_file():
            log_warn(f"Plugin file not found: {filepath}")
            continue
        try:
            registered = _exec_plugin(filepath)
        except Exception as e:
            log_warn(f"Plugin {filepath.name} failed: {e}")
            continue

        if expected is None:
            loaded.extend(registered)
        elif expected in registered:
            loaded.append(expected)
        else:
            log_warn(f"Plugin {filepath.name} did not register cipher '{expected}'")
    return loaded

# ==========================================
#  METHOD 1: Caesar (rotation) cipher
# ==========================================

@register_cipher
class CaesarCipher(CipherStrategy):
    name = "caesar"
    description = "Rotation cipher: every letter shifts back by KEY places (KEY in 1..25)."

    def __init__(self, key: Optional[int] = None):
        check_caesar_key(key)
        super().__init__(key)

    def encode(self, text: str) -> str:
        return caesar_encrypt(text, self.key)

    def decode(self, text: str) -> str:
        return caesar_decrypt(text, self.key)

# ==========================================
#  METHOD 2: Keyed monoalphabetic substitution
# ==========================================

def _seed_from_key(key: int) -> int:
    """Map every integer to a distinct non-negative seed (0, -1, 1, -2, ... -> 0, 1, 2, 3, ...)."""
    # random.Random seeds from abs(), which would give k and -k one table
    return 2 * key if key >= 0 else -2 * key - 1

@register_cipher
class SubstitutionCipher(CipherStrategy):
    """
    Monoalphabetic substitution over a-z.

    The integer key seeds a Mersenne Twister whose Fisher-Yates shuffle
    produces the encoding table, so one key always yields one table.
    The decoding table is its inverse permutation. Both tables are
    plain strings built once here and never touched again.

    Only ASCII letters are substituted. Everything else, accented
    letters included, passes through unchanged.
    """

    name = "substitution"
    description = "Monoalphabetic substitution; KEY (any integer) seeds the shuffled alphabet."

    def __init__(self, key: Optional[int] = None):
        # random.Random(None) would seed from OS entropy
        if isinstance(key, bool) or not isinstance(key, int):
            raise ValueError(f"Substitution key must be an integer, got {key!r}")
        super().__init__(key)
        rng = random.Random(_seed_from_key(key))
        letters = list(ALPHABET)
        rng.shuffle(letters)
        self.encoding_table = "".join(letters)
        self.decoding_table = "".join(
            ALPHABET[self.encoding_table.index(letter)] for letter in ALPHABET
        )

    def transform(self, text: str, direction: str) -> str:
        if direction == ENCRYPT:
            table = self.encoding_table
        elif direction == DECRYPT:
            table = self.decoding_table
        else:
            raise ValueError(f"Unknown direction '{direction}' (expected '{ENCRYPT}' or '{DECRYPT}')")

        result = []
        for char in text:
            lower = char.lower()
            # str.lower() maps some non-ASCII letters into a-z (e.g. Kelvin sign)
            if char.isascii() and 'a' <= lower <= 'z':
                mapped = table[ord(lower) - ord('a')]
                result.append(mapped.upper() if char.isupper() else mapped)
            else:
                result.append(char)
        return ''.join(result)

    def encrypt(self, plaintext: str) -> str:
        return self.transform(plaintext, ENCRYPT)

    def decrypt(self, ciphertext: str) -> str:
        return self.transform(ciphertext, DECRYPT)

    def encode(self, text: str) -> str:
        return self.encrypt(text)

    def decode(self, text: str) -> str:
        return self.decrypt(text)

# ==========================================
#  CLI LOGIC
# ==========================================

def list_ciphers():
    """Print all available ciphers."""
    print("\nAvailable Ciphers:")
    print("=" * 60)
    for name, cipher in CIPHER_REGISTRY.items():
        key_marker = "KEY" if cipher.requires_key else "---"
        print(f"  {name:<14} [{key_marker}]  {cipher.description}")
    print("=" * 60)
    print(f"\nTotal: {len(CIPHER_REGISTRY)} cipher(s) registered.")


def print_analysis(text: str, method: str):
    """Print a frequency table and a first attack on the ciphertext."""
    frequencies = frequency_analysis.letter_frequencies(text)
    if not frequencies:
        print("No letters to analyze.")
        return

    counts = frequency_analysis.letter_counts(text)
    print("\nLetter Frequencies:")
    print("=" * 60)
    for letter, percent in frequencies.items():
        english = frequency_analysis.ENGLISH_LETTER_FREQUENCIES[letter]
        print(f"  {letter}  {counts[letter]:>6}  {percent:6.2f}%   (English {english:5.2f}%)")
    print("=" * 60)

    if method == "caesar":
        key, plaintext = frequency_analysis.crack_caesar(text)
        print(f"\nMost likely Caesar key: {key}")
        print(plaintext)
    else:
        table = frequency_analysis.guess_decoding_table(text)
        print("\nFrequency-rank guess (cipher -> plain):")
        print("  " + " ".join(f"{c}>{table[c]}" for c in ALPHABET))
        print(frequency_analysis.apply_partial_key(text, table))


def main(argv: Optional[List[str]] = None):
    global VERBOSE

    if argv is None:
        argv = sys.argv[1:]

    # Preliminary scan for --verbose (needed before plugin loading)
    VERBOSE = "--verbose" in argv or "-v" in argv

    # Load plugins before parsing args (so they appear in --list and -m choices)
    plugin_dir = None
    for i, arg in enumerate(argv):
        if arg == "--plugin-dir" and i + 1 < len(argv):
            plugin_dir = argv[i + 1]
            break
        elif arg.startswith("--plugin-dir="):
            plugin_dir = arg.split("=", 1)[1]
            break

    loaded_plugins = load_plugins(plugin_dir)
    if loaded_plugins:
        log_info(f"Loaded plugins: {', '.join(loaded_plugins)}")

    parser = argparse.ArgumentParser(
        prog="classical-engine",
        description="Classical cipher engine: Caesar, keyed substitution and frequency analysis",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument("--version", action="version", version="%(prog)s 1.0")

    method_help = "\n".join(f"  {k:<14}: {v.description}" for k, v in CIPHER_REGISTRY.items())

    parser.add_argument("-m", "--method", choices=list(CIPHER_REGISTRY.keys()), default=DEFAULT_METHOD,
                        help=f"Select cipher algorithm (default: {DEFAULT_METHOD}).\n{method_help}")
    parser.add_argument("-k", "--key", type=int, metavar="INT",
                        help="Cipher key (caesar: 1..25, substitution: any integer)")

    # Main action group
    action_group = parser.add_mutually_exclusive_group(required=True)
    action_group.add_argument("-e", "--encode", action="store_true", help="Encrypt mode")
    action_group.add_argument("-d", "--decode", action="store_true", help="Decrypt mode")
    action_group.add_argument("-l", "--list", action="store_true", help="List all available ciphers")
    action_group.add_argument("-a", "--analyze", action="store_true",
                              help="Frequency-analyze ciphertext (caesar: recover the key)")

    parser.add_argument("--plugin-dir", type=str, metavar="PATH",
                        help="Custom plugin directory (must contain manifest.json)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output (info and warning messages)")

    # I/O options
    io_group = parser.add_mutually_exclusive_group()
    io_group.add_argument("-t", "--text", help="Direct text input")
    io_group.add_argument("-i", "--input", help="Input file path")

    parser.add_argument("-o", "--output", help="Output file path")

    args = parser.parse_args(argv)

    if args.list:
        list_ciphers()
        return

    # 1. READ INPUT
    source_text = ""
    if args.text is not None:
        source_text = args.text
    elif args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                source_text = f.read()
        except FileNotFoundError:
            sys.exit(f"Error: File '{args.input}' not found.")
    elif not sys.stdin.isatty():
        source_text = sys.stdin.read()
    else:
        print("[CIPHER] Paste input below. Ctrl+D (Unix) or Ctrl+Z (Win) to end:")
        try:
            source_text = sys.stdin.read()
        except KeyboardInterrupt:
            sys.exit(0)

    if args.analyze:
        print_analysis(source_text, args.method)
        return

    # 2. BUILD CIPHER
    try:
        cipher = build_cipher(args.method, args.key)
    except ValueError as e:
        sys.exit(f"Key Error ({args.method}): {e}")
    log_info(f"Using cipher '{cipher.name}' with key {cipher.key}")

    # 3. TRANSFORM
    try:
        if args.encode:
            result = cipher.encode(source_text)
        else:
            result = cipher.decode(source_text)
    except Exception as e:
        mode = "Encode" if args.encode else "Decode"
        sys.exit(f"{mode} Error ({cipher.name}): {e}")

    # 4. WRITE OUTPUT
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result)
        except OSError as e:
            sys.exit(f"Error writing output: {e}")
        log_info(f"Wrote {len(result)} character(s) to {args.output}")
    else:
        print(result)

if __name__ == "__main__":
    main()
