from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from seedstream.config import GeneratorConfig, create_generator, derive_from_config
from seedstream.constants import BACKENDS, BACKEND_SYSTEM, DEFAULT_PRIMITIVE
from seedstream.errors import SeedStreamError
from seedstream.hashutil import PRIMITIVES
from seedstream.sampling import random_in_range


def _parse_hex(value: Optional[str], what: str) -> Optional[bytes]:
    """Decode an optional hex argument.

    Args:
        value: Hex string from the command line, or None.
        what: Argument name used in the error message.
    """
    if value is None:
        return None
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise ValueError(f"{what} must be a hex string") from None


def _config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    return GeneratorConfig(
        backend=args.backend,
        seed=_parse_hex(args.seed_hex, "--seed-hex"),
        salt=_parse_hex(args.salt_hex, "--salt-hex"),
        primitive=args.primitive,
        output_length=getattr(args, "length", None),
    )


def cmd_bytes(config: GeneratorConfig, count: int, *, chunks: int = 1) -> List[str]:
    """Draw ``chunks`` requests of ``count`` bytes each; return them as hex lines."""
    with create_generator(config) as gen:
        return [gen.next(count).hex() for _ in range(chunks)]


def cmd_int(config: GeneratorConfig, lo: int, hi: int, *, count: int = 1) -> List[int]:
    """Draw ``count`` uniform integers in the inclusive range ``[lo, hi]``."""
    with create_generator(config) as gen:
        return [random_in_range(gen, lo, hi) for _ in range(count)]


def cmd_derive(config: GeneratorConfig) -> str:
    return derive_from_config(config).hex()


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--backend", choices=list(BACKENDS), default=BACKEND_SYSTEM, help="Generator backend (default: system)")
    p.add_argument("--seed-hex", help="Seed as hex (required by every backend except system)")
    p.add_argument("--salt-hex", help="Salt as hex (public default when omitted)")
    p.add_argument(
        "--primitive",
        choices=sorted(PRIMITIVES),
        default=DEFAULT_PRIMITIVE,
        help=f"Keyed hash for hash-drbg and derive (default: {DEFAULT_PRIMITIVE})",
    )


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="seedstream",
        description="Random bytes and unbiased integers from seeded generators",
        epilog="Seeded backends are deterministic: the same seed and salt always give the same output.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_bytes = sub.add_parser("bytes", help="Print random bytes as hex")
    ap_bytes.add_argument("-n", "--count", type=int, default=32, help="Bytes per request (default 32)")
    ap_bytes.add_argument("--chunks", type=int, default=1, help="Number of successive requests (default 1)")
    _add_common(ap_bytes)

    ap_int = sub.add_parser("int", help="Print uniform integers in an inclusive range")
    ap_int.add_argument("--min", dest="lo", type=int, default=0, help="Lower bound, inclusive (default 0)")
    ap_int.add_argument("--max", dest="hi", type=int, required=True, help="Upper bound, inclusive")
    ap_int.add_argument("--count", type=int, default=1, help="How many integers (default 1)")
    _add_common(ap_int)

    ap_derive = sub.add_parser("derive", help="One-shot extended-hash KDF of the seed")
    ap_derive.add_argument("--length", type=int, default=32, help="Output length in bytes (default 32)")
    _add_common(ap_derive)

    args = ap.parse_args(argv)
    try:
        config = _config_from_args(args)
        if args.cmd == "bytes":
            for line in cmd_bytes(config, args.count, chunks=args.chunks):
                print(line)
        elif args.cmd == "int":
            for value in cmd_int(config, args.lo, args.hi, count=args.count):
                print(value)
        elif args.cmd == "derive":
            print(cmd_derive(config))
    except (SeedStreamError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
