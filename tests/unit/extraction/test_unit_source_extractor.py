# tests/unit/extraction/test_unit_source_extractor.py - v1
"""Tests for extraction/source_extractor.py - TS/TSX structural digests."""

from __future__ import annotations

from pathlib import Path

import pytest

from kbloader.extraction.source_extractor import extract_source_structure, split_source_header

SAMPLE_TS = """\
// Greeter module
export class Greeter<T> extends Base {
  private readonly name: string;
  greet(who: string): string {
    return who;
  }
}

export interface Options {
  verbose: boolean;
}

export type Id = string |
  number;

enum Color { Red = 1, Green }

export const add = (a: number, b: number): number => a + b;

function hello(name: string): void {}
"""

HEADER = "# Source: GitHub Repository acme/site\n# File: src/App.tsx\n\n"


class TestDigest:
    @pytest.fixture
    def digest(self) -> str:
        return extract_source_structure(SAMPLE_TS, "greeter.ts")

    def test_keeps_comments(self, digest: str):
        assert "// Greeter module" in digest

    def test_class_with_heritage_and_members(self, digest: str):
        assert "Class: Greeter<T> extends Base" in digest
        assert "name: string" in digest
        assert "- greet: string" in digest

    def test_functions_with_signatures(self, digest: str):
        assert "Function: hello(name: string): void" in digest
        assert "Function: add(a: number, b: number): number" in digest
        assert "Function: greet(who: string): string" in digest

    def test_interface_members(self, digest: str):
        assert "Interface: Options" in digest
        assert "- verbose: boolean" in digest

    def test_type_alias_collapsed(self, digest: str):
        assert "Type: Id = string | number" in digest

    def test_enum_members(self, digest: str):
        assert "Enum: Color" in digest
        assert "- Red = 1" in digest
        assert "- Green" in digest

    def test_function_bodies_omitted(self, digest: str):
        assert "return who" not in digest


class TestJsx:
    def test_components_and_props(self):
        source = 'const App = () => <Button label="hi" onClick={go} />;\n'
        digest = extract_source_structure(source, "App.tsx")
        assert "Function: App()" in digest
        assert "React Component: Button" in digest
        assert "- Prop: label" in digest
        assert "- Prop: onClick" in digest


class TestHeader:
    def test_split(self):
        header, body = split_source_header(HEADER + "code")
        assert header == HEADER
        assert body == "code"

    def test_split_without_header(self):
        assert split_source_header("code") == ("", "code")

    def test_header_preserved_and_used_for_grammar(self):
        source = HEADER + "export const App = () => <Page title=\"x\" />;\n"
        digest = extract_source_structure(source, "ignored.ts")
        assert digest.startswith(HEADER)
        assert "React Component: Page" in digest


class TestFallbacks:
    def test_empty_digest_returns_raw(self):
        assert extract_source_structure("const x = 1;\n", "x.ts") == "const x = 1;\n"

    def test_empty_digest_keeps_header(self):
        raw = HEADER + "const x = 1;\n"
        assert extract_source_structure(raw, "x.ts") == raw

    @pytest.mark.parametrize("payload", [
        b"\xff\xfe{{{ class",
        "function (((( {",
        "",
    ])
    def test_malformed_input_never_raises(self, payload):
        assert isinstance(extract_source_structure(payload, "bad.ts"), str)

    def test_reads_path(self, tmp_path: Path):
        f = tmp_path / "util.ts"
        f.write_text("function util(): void {}\n")
        assert "Function: util(): void" in extract_source_structure(f, "util.ts")
