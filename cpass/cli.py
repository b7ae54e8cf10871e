"""
Command-line interface and high-level generator functions.
"""

from __future__ import annotations

import argparse
import logging
import os
import platform
import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from . import __version__
from .config import UINT32_MAX, GeneratorConfig
from .entropy import wipe
from .errors import CpassError
from .generator import generate
from .strength import EntropyReport, estimate

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CPASS_LOG_LEVEL"


@dataclass
class GenerationResult:
    """
    Full result of one password generation.
    """

    # Secret password bytes. Wipe with entropy.wipe() after use.
    password: bytearray

    # Strength estimate for the configuration that produced it.
    entropy: EntropyReport
    config: GeneratorConfig


def generate_password_with_meta(config: GeneratorConfig) -> GenerationResult:
    """
    - Build the password buffer.
    - Estimate min/max entropy for the configuration.
    """
    report = estimate(config)
    password = generate(config)
    return GenerationResult(password=password, entropy=report, config=config)


def generate_password(config: GeneratorConfig) -> str:
    """
    Convenience wrapper returning the password as text.

    The intermediate buffer is wiped; the returned str cannot be.
    """
    result = generate_password_with_meta(config)
    try:
        return result.password.decode("ascii")
    finally:
        wipe(result.password)


# ---------- interactive helpers ----------


class InputError(Exception):
    """A prompt could not be answered with a usable value."""


class YesNoError(InputError):
    """The y/n confirmation prompt could not be answered."""


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def is_suspicious_length(length: int) -> bool:
    """Round (10, 20, ...) and power-of-two (16, 32, ...) lengths are easy to guess."""
    return length % 10 == 0 or is_power_of_two(length)


def _read_line(prompt: str, read: Callable[[], str], out: TextIO) -> str:
    out.write(prompt)
    out.flush()
    try:
        line = read()
    except EOFError as exc:
        raise InputError("read bytes: EOF") from exc
    return line.rstrip("\r\n")


def ask_uint32(prompt: str, read: Callable[[], str], out: TextIO) -> int:
    text = _read_line(f"{prompt} > ", read, out).strip()
    if not (text.isascii() and text.isdigit()):
        raise InputError(f"parse uint: invalid syntax {text!r}")
    value = int(text)
    if value > UINT32_MAX:
        raise InputError(f"parse uint: value out of range {text!r}")
    return value


def ask_yes_no(prompt: str, read: Callable[[], str], out: TextIO) -> bool:
    answer = _read_line(f"{prompt} [y/n] > ", read, out)
    return answer[:1].lower() == "y"


def ask_length(read: Callable[[], str], out: TextIO) -> int:
    while True:
        length = ask_uint32("Password length", read, out)
        if not is_suspicious_length(length):
            return length

        out.write(
            "WARN: Detected a common base-ten (10, 20, etc) or power-of-two (16, 32, etc) "
            "password length. It's recommended to use something more random.\n"
        )
        try:
            change = ask_yes_no("Change password length?", read, out)
        except InputError as exc:
            raise YesNoError(str(exc)) from exc
        if not change:
            out.write("WARN: Going with unsafe password length.\n")
            return length


def banner() -> str:
    return (
        f"cpass v{__version__} {platform.system().lower()}/{platform.machine().lower()} "
        f"{platform.python_implementation()} {platform.python_version()}. "
        "Copyright (c) 2023 The cpass Authors. Distributed under GNU GPL v3, "
        "this program comes with ABSOLUTELY NO WARRANTY."
    )


def _configure_logging(verbose: bool) -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if verbose:
        level = logging.DEBUG
    elif level_name and isinstance(logging.getLevelName(level_name), int):
        level = logging.getLevelName(level_name)
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cpass",
        description="Minimalist random password generator with entropy estimates.",
    )
    parser.add_argument("--version", action="version", version=f"cpass v{__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging on stderr")
    parser.add_argument("-l", "--length", type=int, help="password length (skips the prompt)")
    parser.add_argument("-u", "--uppercase", type=int, help="number of uppercase characters")
    parser.add_argument("-d", "--digits", type=int, help="number of digit characters")
    parser.add_argument("-s", "--special", type=int, help="number of special characters")
    return parser.parse_args(argv)


def main(
    argv: list[str] | None = None,
    read: Callable[[], str] | None = None,
    out: TextIO | None = None,
) -> int:
    """
    Entry point for `cpass`, `python -m cpass` or `run_cpass.py`.

    Returns the process exit status.
    """
    args = parse_args(argv)
    _configure_logging(args.verbose)
    read = read or input
    out = out or sys.stdout

    out.write(banner() + "\n")

    questions = (
        ("uppercase", "uppercase character count", "Number of uppercase characters to include (ABCDE)"),
        ("digits", "digit character count", "Number of digit characters to include (01234)"),
        ("special", "special character count", "Number of special characters to include (~!@#$)"),
    )

    try:
        length = args.length if args.length is not None else ask_length(read, out)
    except YesNoError as exc:
        out.write(f"Error: ask for yes/no: {exc}\n")
        return 1
    except InputError as exc:
        out.write(f"Error: ask for password length: {exc}\n")
        return 1

    counts = []
    for attr, what, prompt in questions:
        value = getattr(args, attr)
        if value is None:
            try:
                value = ask_uint32(prompt, read, out)
            except InputError as exc:
                out.write(f"Error: ask for {what}: {exc}\n")
                return 1
        counts.append(value)

    try:
        config = GeneratorConfig.create(length, *counts)
    except CpassError as exc:
        out.write(f"Error: create password generator instance: {exc}\n")
        return 1

    try:
        result = generate_password_with_meta(config)
    except CpassError as exc:
        logger.debug("Generation failed", exc_info=True)
        out.write(f"Error: generate password: {exc}\n")
        return 1

    report = result.entropy
    try:
        out.write(
            f"\nGenerated Password: {result.password.decode('ascii')}\n\n"
            f"Entropy (min/realistic/max bits): {report.min_bits}/{report.realistic_bits:g}/"
            f"{report.max_bits} ({report.rating})\n"
        )
    finally:
        wipe(result.password)

    return 0


def run() -> None:
    sys.exit(main())
