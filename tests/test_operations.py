#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Unit tests for the pure building blocks behind the directives.

• Argument splitting for the literal operations.
• Case segmentation and conversion.
• Text building and replacement helpers.
• Engine configuration and logging helpers.
"""
from __future__ import annotations

import io
import json
import logging
import sys
import unittest
from pathlib import Path
from unittest import mock

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from placemacro.errors import (  # noqa: E402
    EmptySequence,
    ExpansionError,
    InvalidIdentifier,
    MalformedArguments,
    UnknownCaseStyle,
)
from placemacro.logging.helpers import JsonLogFormatter, get_logger, setup_base_logger, trace_call  # noqa: E402
from placemacro.parsing.directives import DirectiveCall, DirectiveKind, lookup_directive  # noqa: E402
from placemacro.parsing.lexer import tokenize  # noqa: E402
from placemacro.parsing.source import Span  # noqa: E402
from placemacro.processing import case_ops, slice_ops, text_ops  # noqa: E402
from placemacro.processing.arguments import split_arguments  # noqa: E402
from placemacro.runtime.config import EngineConfig  # noqa: E402
from placemacro.tokens import Ident, Literal, Punct  # noqa: E402


# --------------------------------------------------------------------------- #
#  1. Argument lists                                                          #
# --------------------------------------------------------------------------- #
class ArgumentTests(unittest.TestCase):
    def test_exact_and_trailing_comma(self) -> None:
        self.assertEqual(len(split_arguments(tokenize('"a", "b"'), 2)), 2)
        self.assertEqual(len(split_arguments(tokenize('"a", "b",'), 2)), 2)

    def test_single_token_groups_are_unwrapped(self) -> None:
        (arg,) = split_arguments(tokenize('(("a"))'), 1)
        self.assertEqual(arg, Literal.string("a"))

    def test_malformed_lists(self) -> None:
        for src, n in ((', "a"', 1), ('"a" "b"', 2), ('"a", "b", "c"', 2), ('"a"', 2), ('"a",,', 1), ("", 1)):
            with self.subTest(src=src), self.assertRaises(MalformedArguments):
                split_arguments(tokenize(src), n)

    def test_too_many_message(self) -> None:
        with self.assertRaises(MalformedArguments) as cm:
            split_arguments(tokenize("a, b"), 1)
        self.assertEqual(cm.exception.message, "takes only 1 argument")


# --------------------------------------------------------------------------- #
#  2. Case conversion                                                         #
# --------------------------------------------------------------------------- #
class CaseTests(unittest.TestCase):
    def test_split_words(self) -> None:
        self.assertEqual(case_ops.split_words("my_var"), ["my", "var"])
        self.assertEqual(case_ops.split_words("myVar"), ["my", "Var"])
        self.assertEqual(case_ops.split_words("MY_VAR"), ["MY", "VAR"])
        self.assertEqual(case_ops.split_words("HTTPServer"), ["HTTP", "Server"])
        self.assertEqual(case_ops.split_words("__leading"), ["leading"])

    def test_digit_runs_are_words(self) -> None:
        self.assertEqual(case_ops.split_words("item2"), ["item", "2"])
        self.assertEqual(case_ops.split_words("item_2"), ["item", "2"])
        self.assertEqual(case_ops.split_words("a_1b"), ["a", "1", "b"])
        self.assertEqual(case_ops.split_words("HTTP2Server"), ["HTTP", "2", "Server"])

    def test_snake_pascal_snake_is_stable(self) -> None:
        for name in ("item_2", "a_1b", "x_2y", "v2", "http_server_v2", "HTTPServer"):
            with self.subTest(name=name):
                snake = case_ops.convert_case(name, "to_case")
                pascal = case_ops.convert_case(snake, "ToCase")
                self.assertEqual(case_ops.convert_case(pascal, "to_case"), snake)
        self.assertEqual(case_ops.convert_case("item_2", "to_case"), "item_2")

    def test_non_ascii_letters(self) -> None:
        self.assertEqual(case_ops.split_words("CaféBar"), ["Café", "Bar"])
        self.assertEqual(case_ops.convert_case("café_bar", "ToCase"), "CaféBar")
        self.assertEqual(case_ops.convert_case("名前_x", "TO_CASE"), "名前_X")

    def test_non_identifier_characters(self) -> None:
        for text in ("a-b", "a b", "x$"):
            with self.subTest(text=text), self.assertRaises(InvalidIdentifier):
                case_ops.split_words(text)

    def test_every_style(self) -> None:
        expected = {
            "TOCASE": "HTTPSERVERCONFIG",
            "tocase": "httpserverconfig",
            "toCase": "httpServerConfig",
            "ToCase": "HttpServerConfig",
            "to_case": "http_server_config",
            "TO_CASE": "HTTP_SERVER_CONFIG",
        }
        for style, out in expected.items():
            with self.subTest(style=style):
                self.assertEqual(case_ops.convert_case("HTTPServer_config", style), out)

    def test_aliases(self) -> None:
        self.assertEqual(case_ops.convert_case("my_var", "pascal"), "MyVar")
        self.assertEqual(case_ops.convert_case("MyVar", "Constant"), "MY_VAR")

    def test_unknown_style(self) -> None:
        with self.assertRaises(UnknownCaseStyle):
            case_ops.convert_case("x", "kebab")

    def test_stand_alone_form(self) -> None:
        self.assertEqual(slice_ops.to_case(tokenize('"camel", my_var')), (Ident("myVar"),))

    def test_conversion_to_non_identifier(self) -> None:
        with self.assertRaises(InvalidIdentifier):
            slice_ops.to_case_ident("tocase", Ident("_"))


# --------------------------------------------------------------------------- #
#  3. Text and slice helpers                                                  #
# --------------------------------------------------------------------------- #
class TextOpsTests(unittest.TestCase):
    def test_concat_ignores_punctuation_and_flattens_groups(self) -> None:
        self.assertEqual(text_ops.concat_text(tokenize("a :: [b (c 1)] 'd' 2.0")), "abc1d2")

    def test_identifier_rules(self) -> None:
        self.assertTrue(text_ops.is_identifier("_x1"))
        self.assertFalse(text_ops.is_identifier("_"))
        self.assertFalse(text_ops.is_identifier("1x"))
        with self.assertRaises(InvalidIdentifier) as cm:
            text_ops.build_identifier(())
        self.assertEqual(cm.exception.message, "empty identifier")

    def test_unicode_and_raw_identifiers(self) -> None:
        for text in ("café", "名前", "r#type", "r#match", "_é"):
            with self.subTest(text=text):
                self.assertTrue(text_ops.is_identifier(text))
        for text in ("r#", "r#_", "r#self", "r#crate", "r#super", "r#Self", "a-b", "r#1", "é b"):
            with self.subTest(text=text):
                self.assertFalse(text_ops.is_identifier(text))

    def test_replace_newline(self) -> None:
        self.assertEqual(text_ops.replace_newline("a\n\t b\nc", " "), "a b c")
        self.assertEqual(text_ops.replace_newline("no newline", "-"), "no newline")
        self.assertEqual(text_ops.replace_newline("a\nb", r"\1"), r"a\1b")

    def test_str_replace(self) -> None:
        self.assertEqual(text_ops.str_replace("abab", "ab", "b"), "bb")
        self.assertEqual(text_ops.str_replace("abc", "x", "y"), "abc")

    def test_slices(self) -> None:
        seq = tokenize("a b c")
        self.assertEqual(slice_ops.head(seq), (Ident("a"),))
        self.assertEqual(slice_ops.tail(seq), (Ident("b"), Ident("c")))
        self.assertEqual(slice_ops.start(seq), (Ident("a"), Ident("b")))
        self.assertEqual(slice_ops.last(seq), (Ident("c"),))
        self.assertEqual(slice_ops.tail(tokenize("a")), ())
        with self.assertRaises(EmptySequence):
            slice_ops.last(())

    def test_dollar_takes_no_arguments(self) -> None:
        self.assertEqual(slice_ops.dollar(), (Punct("$"),))
        with self.assertRaises(MalformedArguments):
            slice_ops.dollar(tokenize("x"))


# --------------------------------------------------------------------------- #
#  4. Directive names                                                         #
# --------------------------------------------------------------------------- #
class DirectiveNameTests(unittest.TestCase):
    def test_aliases_resolve_to_the_same_kind(self) -> None:
        pairs = [
            ("__identity__", "__id__"),
            ("__dollar__", "__s__"),
            ("__string__", "__str__"),
            ("__identifier__", "__ident__"),
            ("__stringify__", "__strfy__"),
            ("__replace_newline__", "__repnl__"),
            ("__str_replace__", "__repstr__"),
        ]
        for long, short in pairs:
            with self.subTest(name=long):
                self.assertIsNotNone(lookup_directive(long))
                self.assertIs(lookup_directive(long), lookup_directive(short))

    def test_to_case_spellings(self) -> None:
        for name in ("__ToCase__", "__toCase__", "__TO_CASE__", "__to_case__", "__tocase__", "__TOCASE__"):
            with self.subTest(name=name):
                self.assertIs(lookup_directive(name), DirectiveKind.TO_CASE)

    def test_non_directives(self) -> None:
        for name in ("__init__", "string", "__String__", "__to_Case_"):
            with self.subTest(name=name):
                self.assertIsNone(lookup_directive(name))


# --------------------------------------------------------------------------- #
#  5. Configuration, errors and logging                                       #
# --------------------------------------------------------------------------- #
class ConfigTests(unittest.TestCase):
    def test_defaults_and_environment(self) -> None:
        cfg = EngineConfig.from_env({})
        self.assertEqual((cfg.passes, cfg.max_passes), (1, 64))
        cfg = EngineConfig.from_env({"PLACEMACRO_MAX_STEPS": "10", "PLACEMACRO_PASSES": "3"})
        self.assertEqual((cfg.max_steps, cfg.passes), (10, 3))

    def test_overrides_win_unless_none(self) -> None:
        cfg = EngineConfig.from_env({"PLACEMACRO_PASSES": "3"}, passes=None, max_steps=5)
        self.assertEqual((cfg.passes, cfg.max_steps), (3, 5))

    def test_invalid_environment(self) -> None:
        for raw in ("abc", "0", "-2"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                EngineConfig.from_env({"PLACEMACRO_MAX_STEPS": raw})


class ErrorContextTests(unittest.TestCase):
    def test_located_fills_only_missing_fields(self) -> None:
        exc = ExpansionError("boom", directive="__inner__")
        exc.located(directive="__outer__", span=Span(line=3, col=7), depth=2)
        self.assertEqual(exc.directive, "__inner__")
        self.assertEqual(str(exc), "boom (in `__inner__`, at <input>:3:7, depth 2)")

    def test_compile_error_tokens(self) -> None:
        toks = ExpansionError('bad "thing"').to_compile_error()
        self.assertEqual(toks[0], Ident("compile_error"))
        self.assertEqual(toks[1], Punct("!"))
        self.assertEqual(toks[2].stream, (Literal.string('bad "thing"'),))


class LoggingTests(unittest.TestCase):
    def _capture(self, logger: logging.Logger) -> io.StringIO:
        buf = io.StringIO()
        handler = logging.StreamHandler(buf)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        self.addCleanup(logger.removeHandler, handler)
        old_level = logger.level
        logger.setLevel(logging.DEBUG)
        self.addCleanup(logger.setLevel, old_level)
        return buf

    def test_namespaced_loggers(self) -> None:
        self.assertEqual(get_logger("engine").name, "placemacro.engine")
        self.assertEqual(get_logger("placemacro.cli").name, "placemacro.cli")
        self.assertEqual(get_logger().name, "placemacro")

    def test_trace_call_is_gated(self) -> None:
        logger = get_logger("tests.trace")
        buf = self._capture(logger)
        call = DirectiveCall(
            DirectiveKind.STRING, "__str__", (), (0,), 2, 1, 0, Span(Path("lib.rs"), 4, 9)
        )
        with mock.patch.dict("os.environ", {"PLACEMACRO_TRACE": "0"}):
            trace_call(logger, "evaluate", call)
        self.assertEqual(buf.getvalue(), "")
        with mock.patch.dict("os.environ", {"PLACEMACRO_TRACE": "1"}):
            trace_call(logger, "evaluate", call, args=3)
        payload = json.loads(buf.getvalue().strip())
        self.assertEqual(payload["msg"], "evaluate __str__ at depth 1")
        self.assertEqual(payload["ctx"], {"directive": "__str__", "depth": 1, "at": "lib.rs:4:9", "args": 3})
        self.assertEqual(payload["module"], "placemacro.tests.trace")

    def test_base_logger_switches_format_in_place(self) -> None:
        base = logging.getLogger("placemacro")
        saved = (list(base.handlers), base.level, base.propagate)
        for handler in saved[0]:
            base.removeHandler(handler)

        def restore() -> None:
            for handler in list(base.handlers):
                base.removeHandler(handler)
            for handler in saved[0]:
                base.addHandler(handler)
            base.setLevel(saved[1])
            base.propagate = saved[2]

        self.addCleanup(restore)
        buf = io.StringIO()
        setup_base_logger(stream=buf)
        get_logger("cli").info("plain")
        setup_base_logger(json_logs=True, level=logging.DEBUG, stream=buf)
        get_logger("cli").debug("structured")

        self.assertEqual(len(base.handlers), 1)
        first, second = buf.getvalue().splitlines()
        self.assertEqual(first, "INFO: plain")
        self.assertEqual(json.loads(second)["msg"], "structured")


class SpanTests(unittest.TestCase):
    def test_format(self) -> None:
        self.assertEqual(Span(Path("x.rs"), 2, 3).format(), "x.rs:2:3")
        self.assertEqual(Span().format(), "<input>:1:1")

    def test_moved_to_keeps_path(self) -> None:
        moved = Span(Path("x.rs")).moved_to(5, 2)
        self.assertEqual((moved.path, moved.line, moved.col), (Path("x.rs"), 5, 2))

    def test_lexed_spans_carry_the_path(self) -> None:
        toks = tokenize("a\n  b", path=Path("m.rs"))
        self.assertEqual(toks[1].span.format(), "m.rs:2:3")


if __name__ == "__main__":
    unittest.main()
